"""Direct-pattern field extractors.

Each extractor scans the whole document text for a self-describing
token (personal code, dates, sex, citizenship, series and number) and
returns a ``(field, value)`` pair, with ``None`` when nothing matched.
Extractors are independent of each other and of line order.
"""

import re
from collections.abc import Callable

from .fields import FieldKey
from .normalizer import NormalizedText

FieldExtractor = Callable[[NormalizedText], tuple[FieldKey, str | None]]

_CNP_PATTERN = re.compile(r"(?<!\d)\d{13}(?!\d)")
_DATE_PATTERN = re.compile(r"(?<!\d)(\d{1,2})[./\-](\d{1,2})[./\-](\d{4})(?!\d)")
_SEX_PATTERN = re.compile(r"SEX[\s:/.]*([MF])(?![^\W\d_])")
_CITIZENSHIP_TOKENS = ("ROMANIA", "ROMÂNIA")
_SERIES_LABELLED_PATTERN = re.compile(
    r"\bSERIA\s*[:.]?\s*([A-Z]{2,3})\s*N[RO]\s*[:.]?\s*(\d{5,7})\b"
)
_SERIES_PATTERN = re.compile(r"\b([A-Z]{2,3})\s*(\d{5,7})\b")

# Dates appear on the card in this order: birth, issue, expiry.
_DATE_FIELDS = (
    FieldKey.DATA_NASTERII,
    FieldKey.DATA_EMITERII,
    FieldKey.DATA_EXPIRARII,
)


def extract_cnp(text: NormalizedText) -> tuple[FieldKey, str | None]:
    """Find the first standalone run of exactly thirteen digits."""
    match = _CNP_PATTERN.search(text.raw)
    return FieldKey.CNP, match.group(0) if match else None


def find_dates(raw: str) -> list[str]:
    """Return distinct ``DD.MM.YYYY`` dates in order of first appearance.

    Day and month are zero-padded; ``.``, ``/`` and ``-`` are accepted as
    separators. Values are not checked against the calendar.

    Args:
        raw: Full document text.

    Returns:
        Normalized dates without repeats.
    """
    dates: list[str] = []
    for day, month, year in _DATE_PATTERN.findall(raw):
        value = f"{int(day):02d}.{int(month):02d}.{year}"
        if value not in dates:
            dates.append(value)
    return dates


def date_extractor(position: int) -> FieldExtractor:
    """Build the extractor for the date at ``position`` (0 = birth date).

    Args:
        position: Index into the distinct dates found in the text.

    Returns:
        An extractor bound to the corresponding date field.
    """
    field = _DATE_FIELDS[position]

    def extract(text: NormalizedText) -> tuple[FieldKey, str | None]:
        dates = find_dates(text.raw)
        return field, dates[position] if position < len(dates) else None

    extract.__name__ = f"extract_{field.value}"
    return extract


def extract_sex(text: NormalizedText) -> tuple[FieldKey, str | None]:
    """Find a ``SEX`` label followed by a single ``M`` or ``F``."""
    match = _SEX_PATTERN.search(text.upper)
    return FieldKey.SEX, match.group(1) if match else None


class CitizenshipExtractor:
    """Sets a fixed citizenship when the country name appears in the text.

    Args:
        value: Value reported when the country name is present.
    """

    def __init__(self, value: str) -> None:
        self.value = value

    def __call__(self, text: NormalizedText) -> tuple[FieldKey, str | None]:
        found = any(token in text.upper for token in _CITIZENSHIP_TOKENS)
        return FieldKey.CETATENIE, self.value if found else None


def find_series_number(raw: str) -> tuple[str, str] | None:
    """Locate the document series letters and number digits.

    A ``SERIA XX NR 123456`` phrase wins over the bare letters+digits
    shape so the ``NR`` label itself is never taken as the series.

    Args:
        raw: Full document text.

    Returns:
        ``(series, number)``, or ``None`` if neither shape occurs.
    """
    labelled = _SERIES_LABELLED_PATTERN.search(raw.upper())
    if labelled:
        return labelled.group(1), labelled.group(2)
    match = _SERIES_PATTERN.search(raw)
    if match:
        return match.group(1), match.group(2)
    return None


def extract_series(text: NormalizedText) -> tuple[FieldKey, str | None]:
    """Extract the letter run of the card series."""
    found = find_series_number(text.raw)
    return FieldKey.SERIE, found[0] if found else None


def extract_number(text: NormalizedText) -> tuple[FieldKey, str | None]:
    """Extract the digit run following the card series."""
    found = find_series_number(text.raw)
    return FieldKey.NUMAR, found[1] if found else None


def pattern_extractors(citizenship_value: str) -> list[FieldExtractor]:
    """Return the direct-pattern extractors in pipeline order.

    Args:
        citizenship_value: Value reported by the citizenship extractor.

    Returns:
        Ordered list of extractors.
    """
    return [
        extract_cnp,
        date_extractor(0),
        date_extractor(1),
        date_extractor(2),
        extract_sex,
        CitizenshipExtractor(citizenship_value),
        extract_series,
        extract_number,
    ]
