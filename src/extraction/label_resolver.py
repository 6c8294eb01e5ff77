"""Label-proximity resolution for fields printed below their label.

A field such as the surname is located by finding its label line and
taking the first plausible value in a short window of following lines.
OCR output often inserts stray lines between a label and its value,
so the window spans several lines but stops short of capturing the
header of the next field.
"""

import re
from collections.abc import Iterable, Sequence

from src.utils.logger import get_logger

from .fields import FieldKey
from .normalizer import NormalizedText

logger = get_logger(__name__)

_CAPS = "A-ZĂÂÎȘŞȚŢ"

# All-caps header shapes: "SEX:", "DOMICILIU/", "NUME/NOM/LAST NAME".
_LABEL_LIKE = re.compile(rf"^[{_CAPS}][{_CAPS} .]{{0,24}}[:/]$|^[{_CAPS}]{{1,10}}/")


def compile_labels(patterns: Iterable[str]) -> list[re.Pattern[str]]:
    """Compile label regexes so they match at the start of a line.

    Args:
        patterns: Label regex sources, without anchors.

    Returns:
        Case-insensitive compiled patterns.
    """
    return [re.compile(rf"\s*(?:{p})", re.IGNORECASE) for p in patterns]


def is_label_like(line: str) -> bool:
    """Return True if the line has the shape of a printed field header."""
    return _LABEL_LIKE.search(line) is not None


class LabelProximityResolver:
    """Resolves one field by looking below its label.

    Args:
        field: Field populated by this resolver.
        label_patterns: Label regex sources recognizing this field.
        competing_patterns: Label regex sources of every field that may
            follow, rejected as values.
        window: Number of lines after the label searched for a value.
        min_length: Candidate values must be longer than this.
    """

    def __init__(
        self,
        field: FieldKey,
        label_patterns: Sequence[str],
        competing_patterns: Sequence[str],
        window: int = 4,
        min_length: int = 2,
    ) -> None:
        self.field = field
        self.labels = compile_labels(label_patterns)
        self.competing = compile_labels(competing_patterns)
        self.window = window
        self.min_length = min_length

    def find_label(self, lines: Sequence[str]) -> int | None:
        """Return the index of the first line carrying this field's label."""
        for index, line in enumerate(lines):
            if any(p.match(line) for p in self.labels):
                return index
        return None

    def accepts(self, candidate: str) -> bool:
        """Decide whether a line below the label can be the field value."""
        if len(candidate) <= self.min_length:
            return False
        if is_label_like(candidate):
            return False
        return not any(p.match(candidate) for p in self.competing)

    def __call__(self, text: NormalizedText) -> tuple[FieldKey, str | None]:
        """Return the first acceptable line after the field's label."""
        lines = text.lines
        label_index = self.find_label(lines)
        if label_index is None:
            return self.field, None

        for candidate in lines[label_index + 1 : label_index + 1 + self.window]:
            if self.accepts(candidate):
                return self.field, candidate

        logger.debug(
            "Label for %s found at line %d but no value within %d lines",
            self.field.value,
            label_index,
            self.window,
        )
        return self.field, None


def label_resolvers(
    labels: dict[str, list[str]],
    boundary_labels: Sequence[str],
    window: int = 4,
    min_length: int = 2,
) -> list[LabelProximityResolver]:
    """Build one resolver per labelled field.

    Every label known to the engine, including the boundary labels of
    fields extracted by pattern, is treated as competing for each field.

    Args:
        labels: Label regex sources keyed by field name.
        boundary_labels: Labels of fields not resolved by proximity.
        window: Lines searched after a label.
        min_length: Minimum exclusive value length.

    Returns:
        Resolvers in the order of ``labels``.
    """
    competing = [p for patterns in labels.values() for p in patterns]
    competing.extend(boundary_labels)
    return [
        LabelProximityResolver(
            FieldKey(name),
            patterns,
            competing,
            window=window,
            min_length=min_length,
        )
        for name, patterns in labels.items()
    ]
