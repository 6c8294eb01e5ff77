"""Identity card extraction pipeline.

Runs the direct-pattern extractors and the label-proximity resolvers
over normalized OCR text, falls back to capitalized-word names when
labels are missing, and merges everything into a record that always
holds the full set of field keys.
"""

from dataclasses import dataclass, field

from src.utils.config import ExtractionConfig
from src.utils.logger import get_logger

from .fallback import FallbackNameExtractor
from .fields import FieldKey, empty_record
from .label_resolver import label_resolvers
from .normalizer import normalize
from .pattern_extractors import FieldExtractor, pattern_extractors

logger = get_logger(__name__)


@dataclass
class ExtractionResult:
    """Record produced for one document, with the strategy behind each value."""

    record: dict[str, str]
    raw_text: str
    sources: dict[str, str] = field(default_factory=dict)

    @property
    def filled(self) -> int:
        """Number of fields holding a non-empty value."""
        return sum(1 for value in self.record.values() if value)

    @property
    def completeness(self) -> float:
        """Fraction of the field set that was populated."""
        return self.filled / len(FieldKey)


class IdentityCardExtractor:
    """Extracts identity card fields from recognized text.

    Holds only immutable configuration, so one instance can serve
    concurrent requests.

    Args:
        config: Extraction configuration. Defaults are used if omitted.
    """

    def __init__(self, config: ExtractionConfig | None = None) -> None:
        self.config = config or ExtractionConfig()
        self.pattern_extractors: list[FieldExtractor] = pattern_extractors(
            self.config.citizenship_value
        )
        self.label_extractors: list[FieldExtractor] = list(
            label_resolvers(
                self.config.labels,
                self.config.boundary_labels,
                window=self.config.label_window,
                min_length=self.config.min_value_length,
            )
        )
        self.fallback = FallbackNameExtractor(self.config.fallback_denylist)

    def extract(self, text: str) -> ExtractionResult:
        """Run the full extraction pipeline on one document's text.

        Args:
            text: Raw OCR text. Empty text yields an empty record.

        Returns:
            Extraction result whose record contains every field key.
        """
        normalized = normalize(text)
        record = empty_record()
        sources: dict[str, str] = {}

        for method, extractors in (
            ("pattern", self.pattern_extractors),
            ("label", self.label_extractors),
        ):
            for extractor in extractors:
                key, value = extractor(normalized)
                if value:
                    record[key.value] = value
                    sources[key.value] = method
                    logger.debug("%s extracted %s=%r", method, key.value, value)

        for key in self.fallback.fill(record, text):
            sources[key.value] = "fallback"
            logger.debug("fallback extracted %s=%r", key.value, record[key.value])

        result = ExtractionResult(record=record, raw_text=text, sources=sources)
        logger.info(
            "Extracted %d/%d fields from %d lines",
            result.filled,
            len(FieldKey),
            len(normalized.lines),
        )
        return result


def extract_fields(text: str, config: ExtractionConfig | None = None) -> dict[str, str]:
    """Extract the identity card record from text with a fresh extractor.

    Args:
        text: Raw OCR text.
        config: Optional extraction configuration.

    Returns:
        Mapping of every field key to its value or an empty string.
    """
    return IdentityCardExtractor(config).extract(text).record
