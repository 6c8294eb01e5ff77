"""Fallback name extraction from capitalized words.

Used only when the label-based resolver leaves the surname or the
given name empty. Any capitalized word that is not known document
boilerplate is a name candidate, so place names missing from the
denylist can be picked up as names.
"""

import re
from collections.abc import Iterable

from src.utils.logger import get_logger

from .fields import FieldKey

logger = get_logger(__name__)

_UPPER = "A-ZÀ-ÖØ-ÞĂÂÎȘŞȚŢ"
_LOWER = "a-zß-öø-ÿăâîșşțţ"
_CAPITALIZED_WORD = re.compile(rf"\b[{_UPPER}][{_LOWER}]+\b")


class FallbackNameExtractor:
    """Fills missing name fields from capitalized words in the text.

    Args:
        denylist: Words that are never names (headers, country, cities).
            Matching is case-insensitive.
    """

    def __init__(self, denylist: Iterable[str]) -> None:
        self.denylist = frozenset(word.casefold() for word in denylist)

    def candidates(self, raw: str) -> list[str]:
        """Return distinct capitalized words not in the denylist.

        Args:
            raw: Full document text.

        Returns:
            Candidate names in order of first appearance.
        """
        seen: list[str] = []
        for token in _CAPITALIZED_WORD.findall(raw):
            if token not in seen and token.casefold() not in self.denylist:
                seen.append(token)
        return seen

    def fill(self, record: dict[str, str], raw: str) -> list[FieldKey]:
        """Populate empty surname and given name fields in place.

        The surname takes the first candidate and the given name the
        second; fields that already hold a value are left untouched.

        Args:
            record: Record being assembled.
            raw: Full document text.

        Returns:
            The fields this call populated.
        """
        need_surname = not record[FieldKey.NUME]
        need_given = not record[FieldKey.PRENUME]
        if not (need_surname or need_given):
            return []

        names = self.candidates(raw)
        filled: list[FieldKey] = []
        if need_surname and names:
            record[FieldKey.NUME] = names[0]
            filled.append(FieldKey.NUME)
        if need_given and len(names) > 1:
            record[FieldKey.PRENUME] = names[1]
            filled.append(FieldKey.PRENUME)

        logger.debug("Fallback considered %d name candidates", len(names))
        return filled
