"""Barcode text normalization.

Scanners and manual entry produce UPC/EAN text with separators, stray
letters and zero padding. Providers index barcodes inconsistently, so the
resolver tries both the text as scanned and the cleaned digit sequence.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass

from mediacloset.models.query import BarcodeQuery

_NON_DIGITS = re.compile(r"[^0-9]")


def clean_barcode(raw: str) -> str:
    """Clean scanned barcode text into a canonical digit sequence.

    Removes whitespace, dashes and any other non-digit character, then
    strips leading zeros. Never fails; an input with no significant digits
    becomes "0".

    Args:
        raw: Barcode text as scanned or typed.

    Returns:
        Digits without leading zeros, or "0".

    Example:
        >>> clean_barcode("  00-123 ABC 456  ")
        '123456'
    """
    cleaned = raw.strip().replace("-", "").replace(" ", "")
    cleaned = _NON_DIGITS.sub("", cleaned)
    cleaned = cleaned.lstrip("0")
    return cleaned or "0"


@dataclass(frozen=True, slots=True)
class BarcodeCandidate:
    """A scanned barcode and its cleaned form.

    Attributes:
        original: Text exactly as received.
        cleaned: Result of clean_barcode(original).
    """

    original: str
    cleaned: str

    @classmethod
    def from_raw(cls, raw: str) -> "BarcodeCandidate":
        """Create a candidate from raw scanned text."""
        return cls(original=raw, cleaned=clean_barcode(raw))

    @property
    def is_distinct(self) -> bool:
        """Return True if cleaning changed the text."""
        return self.cleaned != self.original

    def forms(self) -> Iterator[BarcodeQuery]:
        """Yield the queries to try: original first, cleaned only if distinct."""
        yield BarcodeQuery(self.original)
        if self.is_distinct:
            yield BarcodeQuery(self.cleaned, cleaned=True)
