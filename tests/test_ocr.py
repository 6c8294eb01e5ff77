"""Tests for the Tesseract engine wrapper and the image recognizer."""

import io
from pathlib import Path
from unittest.mock import MagicMock, patch

import numpy as np
import pytesseract
import pytest
from PIL import Image

from src.ocr.preprocess import QualityMetrics
from src.ocr.recognizer import RecognitionError, RecognitionResult, TextRecognizer
from src.ocr.tesseract_engine import OCRResult, TesseractEngine
from src.utils.config import AppConfig, PreprocessingConfig


def _mock_tesseract_data() -> dict:
    """Create mock pytesseract word data."""
    return {
        "text": ["", "NUME", "POPESCU", "", "ION"],
        "conf": [-1, 95, 85, -1, 72],
    }


def _ocr_result(text: str = "NUME\nPOPESCU") -> OCRResult:
    return OCRResult(text=text, language="ron+eng", confidence=0.9, word_count=2)


class TestTesseractEngine:
    """Tests for the TesseractEngine class (mocked)."""

    @patch("src.ocr.tesseract_engine.pytesseract")
    def test_extract_text(self, mock_pytesseract: MagicMock) -> None:
        mock_pytesseract.image_to_string.return_value = "NUME\nPOPESCU\nION"
        mock_pytesseract.image_to_data.return_value = _mock_tesseract_data()

        engine = TesseractEngine()
        result = engine.extract_text(np.zeros((50, 100), dtype=np.uint8))

        assert isinstance(result, OCRResult)
        assert result.text == "NUME\nPOPESCU\nION"
        assert result.word_count == 3
        assert result.confidence == pytest.approx((95 + 85 + 72) / 3 / 100)
        assert result.language == "ron+eng"

    @patch("src.ocr.tesseract_engine.pytesseract")
    def test_language_and_psm_forwarded(self, mock_pytesseract: MagicMock) -> None:
        mock_pytesseract.image_to_string.return_value = ""
        mock_pytesseract.image_to_data.return_value = {"text": [], "conf": []}

        engine = TesseractEngine(default_lang="eng")
        result = engine.extract_text(np.zeros((10, 10), dtype=np.uint8), psm=11)

        _, kwargs = mock_pytesseract.image_to_string.call_args
        assert kwargs["lang"] == "eng"
        assert kwargs["config"] == "--psm 11"
        assert result.confidence == 0.0
        assert result.word_count == 0

    @patch("src.ocr.tesseract_engine.pytesseract")
    def test_custom_tesseract_cmd(self, mock_pytesseract: MagicMock) -> None:
        TesseractEngine(tesseract_cmd="/opt/tesseract")
        assert mock_pytesseract.pytesseract.tesseract_cmd == "/opt/tesseract"


class TestTextRecognizer:
    """Tests for the TextRecognizer class."""

    def setup_method(self) -> None:
        config = AppConfig(preprocessing=PreprocessingConfig(upscale_min_width=0))
        self.recognizer = TextRecognizer(config)

    def test_recognize_bytes(self, png_bytes: bytes) -> None:
        with patch.object(
            self.recognizer.ocr_engine, "extract_text", return_value=_ocr_result()
        ) as mock_extract:
            result = self.recognizer.recognize(png_bytes, "card.png")

        assert isinstance(result, RecognitionResult)
        assert result.text == "NUME\nPOPESCU"
        assert result.source_file == "card.png"
        assert isinstance(result.quality_metrics, QualityMetrics)
        image = mock_extract.call_args.args[0]
        assert image.ndim == 2

    def test_recognize_path(self, tmp_path: Path) -> None:
        path = tmp_path / "card.jpg"
        Image.fromarray(np.full((40, 80, 3), 200, dtype=np.uint8)).save(path)
        with patch.object(
            self.recognizer.ocr_engine, "extract_text", return_value=_ocr_result("X")
        ):
            result = self.recognizer.recognize(path, path.name)
        assert result.text == "X"

    def test_rgba_image(self) -> None:
        buf = io.BytesIO()
        Image.new("RGBA", (30, 20), (255, 255, 255, 128)).save(buf, format="PNG")
        with patch.object(
            self.recognizer.ocr_engine, "extract_text", return_value=_ocr_result()
        ):
            result = self.recognizer.recognize(buf.getvalue())
        assert result.text == "NUME\nPOPESCU"

    def test_invalid_bytes(self) -> None:
        with pytest.raises(RecognitionError, match="Cannot read image"):
            self.recognizer.recognize(b"not an image", "bad.png")

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(RecognitionError):
            self.recognizer.recognize(tmp_path / "missing.png")

    def test_tesseract_not_installed(self, png_bytes: bytes) -> None:
        with patch.object(
            self.recognizer.ocr_engine,
            "extract_text",
            side_effect=pytesseract.TesseractNotFoundError(),
        ):
            with pytest.raises(RecognitionError, match="not installed"):
                self.recognizer.recognize(png_bytes)

    def test_tesseract_failure(self, png_bytes: bytes) -> None:
        with patch.object(
            self.recognizer.ocr_engine,
            "extract_text",
            side_effect=pytesseract.TesseractError(1, "boom"),
        ):
            with pytest.raises(RecognitionError, match="Tesseract failed"):
                self.recognizer.recognize(png_bytes, "card.png")
