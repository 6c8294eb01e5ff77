"""Image-to-text recognition for identity card captures.

Loads an uploaded or on-disk image, applies preprocessing and runs
Tesseract, producing the raw text handed to the extraction engine.
"""

import io
from dataclasses import dataclass
from pathlib import Path

import numpy as np
import pytesseract
from PIL import Image, ImageOps, UnidentifiedImageError

from src.utils.config import AppConfig
from src.utils.logger import get_logger

from .preprocess import ImagePreprocessor, QualityMetrics
from .tesseract_engine import OCRResult, TesseractEngine

logger = get_logger(__name__)


class RecognitionError(RuntimeError):
    """Raised when an image cannot be decoded or OCR is unavailable."""


@dataclass
class RecognitionResult:
    """Recognized text of one card image."""

    source_file: str
    ocr_result: OCRResult
    quality_metrics: QualityMetrics

    @property
    def text(self) -> str:
        return self.ocr_result.text


class TextRecognizer:
    """End-to-end recognition of a card image.

    Args:
        config: Application configuration object.
    """

    def __init__(self, config: AppConfig) -> None:
        self.config = config
        self.preprocessor = ImagePreprocessor(config.preprocessing)
        self.ocr_engine = TesseractEngine(
            tesseract_cmd=config.ocr.tesseract_cmd,
            default_lang=config.ocr.default_lang,
        )

    def recognize(
        self, source: Path | bytes, filename: str = "document"
    ) -> RecognitionResult:
        """Recognize the text of an image file or raw image bytes.

        Args:
            source: Path to an image file, or its raw bytes.
            filename: Display name for the source image.

        Returns:
            Recognition result with the OCR text.

        Raises:
            RecognitionError: If the image is unreadable or Tesseract fails.
        """
        logger.info("Recognizing image: %s", filename)
        image = self._load_image(source, filename)
        processed, metrics = self.preprocessor.process(image)

        try:
            ocr_result = self.ocr_engine.extract_text(processed, psm=self.config.ocr.psm)
        except pytesseract.TesseractNotFoundError as exc:
            raise RecognitionError("Tesseract is not installed or not on PATH") from exc
        except pytesseract.TesseractError as exc:
            raise RecognitionError(f"Tesseract failed on {filename}: {exc}") from exc

        return RecognitionResult(
            source_file=filename,
            ocr_result=ocr_result,
            quality_metrics=metrics,
        )

    def _load_image(self, source: Path | bytes, filename: str) -> np.ndarray:
        """Decode an image, honoring EXIF orientation from phone cameras.

        Args:
            source: Path or raw bytes of the image.
            filename: Display name used in error messages.

        Returns:
            RGB image as a numpy array.

        Raises:
            RecognitionError: If the data is not a decodable image.
        """
        stream = io.BytesIO(source) if isinstance(source, bytes) else Path(source)
        try:
            with Image.open(stream) as img:
                oriented = ImageOps.exif_transpose(img)
                return np.array(oriented.convert("RGB"))
        except (UnidentifiedImageError, OSError) as exc:
            raise RecognitionError(f"Cannot read image {filename}") from exc
