"""Line normalization for raw OCR text.

Splits recognized text into trimmed, non-empty lines, treating the
machine-readable-zone filler characters as line breaks.
"""

import re
from dataclasses import dataclass

_SEGMENT_SPLIT = re.compile(r"\r\n|[\r\n<>]")


@dataclass(frozen=True)
class NormalizedText:
    """Views of one document's text shared by all field extractors."""

    raw: str
    lines: tuple[str, ...]
    upper: str


def normalize(raw: str) -> NormalizedText:
    """Split raw OCR text into ordered, trimmed, non-empty lines.

    Args:
        raw: Recognized text for a single document.

    Returns:
        The raw text, its normalized lines, and an uppercased copy.
    """
    segments = (segment.strip() for segment in _SEGMENT_SPLIT.split(raw))
    return NormalizedText(
        raw=raw,
        lines=tuple(segment for segment in segments if segment),
        upper=raw.upper(),
    )
