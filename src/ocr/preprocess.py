"""Image preprocessing for identity card photos.

Card captures are usually small, colored phone photos. They are
converted to grayscale, upscaled, denoised and binarized before OCR.
"""

from dataclasses import dataclass

import cv2
import numpy as np

from src.utils.config import PreprocessingConfig
from src.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class QualityMetrics:
    """Before/after image quality measurements."""

    sharpness_before: float
    sharpness_after: float
    contrast_before: float
    contrast_after: float


def to_gray(image: np.ndarray) -> np.ndarray:
    """Convert an RGB or RGBA image to grayscale; pass grayscale through."""
    if image.ndim == 3 and image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_RGBA2GRAY)
    if image.ndim == 3:
        return cv2.cvtColor(image, cv2.COLOR_RGB2GRAY)
    return image


def calculate_sharpness(image: np.ndarray) -> float:
    """Laplacian variance of the image; higher means sharper."""
    return float(cv2.Laplacian(to_gray(image), cv2.CV_64F).var())


def calculate_contrast(image: np.ndarray) -> float:
    """Standard deviation of grayscale intensities."""
    return float(to_gray(image).std())


def upscale(image: np.ndarray, min_width: int) -> np.ndarray:
    """Enlarge the image so it is at least ``min_width`` pixels wide.

    Args:
        image: Input image.
        min_width: Target minimum width. Wider images are returned as-is.

    Returns:
        The resized or original image.
    """
    width = image.shape[1]
    if width == 0 or width >= min_width:
        return image
    scale = min_width / width
    logger.debug("Upscaling image by %.2f", scale)
    return cv2.resize(image, None, fx=scale, fy=scale, interpolation=cv2.INTER_CUBIC)


def denoise(image: np.ndarray, method: str = "bilateral") -> np.ndarray:
    """Reduce noise with the named filter.

    Args:
        image: Grayscale image.
        method: ``"gaussian"``, ``"bilateral"`` or ``"none"``.

    Returns:
        Filtered image.

    Raises:
        ValueError: If the method is unknown.
    """
    if method == "gaussian":
        return cv2.GaussianBlur(image, (5, 5), 0)
    if method == "bilateral":
        return cv2.bilateralFilter(image, 9, 75, 75)
    if method == "none":
        return image
    raise ValueError(f"Unsupported denoise method: {method}")


def binarize(image: np.ndarray, method: str = "otsu") -> np.ndarray:
    """Threshold a grayscale image to black and white.

    Args:
        image: Grayscale image.
        method: ``"otsu"``, ``"adaptive"`` or ``"none"``.

    Returns:
        Binary image with values 0 or 255 (unchanged for ``"none"``).

    Raises:
        ValueError: If the method is unknown.
    """
    if method == "otsu":
        _, binary = cv2.threshold(image, 0, 255, cv2.THRESH_BINARY + cv2.THRESH_OTSU)
        return binary
    if method == "adaptive":
        return cv2.adaptiveThreshold(
            image, 255, cv2.ADAPTIVE_THRESH_GAUSSIAN_C, cv2.THRESH_BINARY, 31, 10
        )
    if method == "none":
        return image
    raise ValueError(f"Unsupported binarize method: {method}")


class ImagePreprocessor:
    """Applies the configured preprocessing steps to a card image.

    Args:
        config: Preprocessing configuration.
    """

    def __init__(self, config: PreprocessingConfig) -> None:
        self.config = config

    def process(self, image: np.ndarray) -> tuple[np.ndarray, QualityMetrics]:
        """Prepare an image for OCR.

        Args:
            image: Input image (RGB, RGBA or grayscale).

        Returns:
            Tuple of (processed_image, quality_metrics).
        """
        metrics = QualityMetrics(
            sharpness_before=calculate_sharpness(image),
            sharpness_after=0.0,
            contrast_before=calculate_contrast(image),
            contrast_after=0.0,
        )

        result = to_gray(image)
        if self.config.enabled:
            result = upscale(result, self.config.upscale_min_width)
            result = denoise(result, self.config.denoise_method)
            result = binarize(result, self.config.binarize_method)

        metrics.sharpness_after = calculate_sharpness(result)
        metrics.contrast_after = calculate_contrast(result)
        logger.info(
            "Preprocessing complete: sharpness %.1f->%.1f, contrast %.1f->%.1f",
            metrics.sharpness_before,
            metrics.sharpness_after,
            metrics.contrast_before,
            metrics.contrast_after,
        )
        return result, metrics
