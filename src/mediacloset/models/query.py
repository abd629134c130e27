"""Query records describing what a single provider call looks up."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class BarcodeQuery:
    """Lookup by barcode text (original or cleaned form).

    Attributes:
        barcode: Barcode text sent to the provider.
        cleaned: True if this is the cleaned form of the scanned text.
    """

    barcode: str
    cleaned: bool = False

    def __str__(self) -> str:
        """Return a short description for logs."""
        form = "cleaned" if self.cleaned else "original"
        return f"barcode {self.barcode} ({form})"


@dataclass(frozen=True, slots=True)
class AlbumTitleQuery:
    """Lookup by artist and album title."""

    artist: str
    album: str

    def __str__(self) -> str:
        """Return a short description for logs."""
        return f"{self.artist} - {self.album}"


@dataclass(frozen=True, slots=True)
class MovieQuery:
    """Lookup by movie title with optional director and year filters."""

    title: str
    director: str | None = None
    year: int | None = None

    def __str__(self) -> str:
        """Return a short description for logs."""
        if self.year is not None:
            return f"{self.title} ({self.year})"
        return self.title


ProviderQuery = BarcodeQuery | AlbumTitleQuery | MovieQuery
