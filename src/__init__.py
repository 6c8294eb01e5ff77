"""Identity Card Extraction Service.

Recovers structured fields (personal code, names, dates, address,
issuing authority, series and number) from the noisy OCR text of
scanned Romanian identity cards.
"""

__version__ = "1.0.0"
