"""Album metadata model shared by every music provider."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class AlbumMetadata:
    """Normalized album metadata from any provider.

    Attributes:
        source: Tag of the provider that supplied this record.
        artist: Artist name, if known.
        album: Album title, if known.
        year: Four-digit release year.
        label: Record label (first one if the provider lists several).
        genres: Genres and styles, deduplicated in first-seen order.
        cover_url: Cover art URL.
        country: Release country code (MusicBrainz only).
        barcode: Barcode printed on the release (MusicBrainz only).
        release_id: MusicBrainz release MBID.
    """

    source: str
    artist: str | None = None
    album: str | None = None
    year: int | None = None
    label: str | None = None
    genres: tuple[str, ...] = field(default_factory=tuple)
    cover_url: str | None = None
    country: str | None = None
    barcode: str | None = None
    release_id: str | None = None

    @property
    def has_cover(self) -> bool:
        """Return True if a cover art URL is present."""
        return bool(self.cover_url)

    @property
    def display_title(self) -> str:
        """Return "Artist - Album" for display, or whichever part is known."""
        parts = [p for p in (self.artist, self.album) if p]
        return " - ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "source": self.source,
            "artist": self.artist,
            "album": self.album,
            "year": self.year,
            "label": self.label,
            "genres": list(self.genres),
            "cover_url": self.cover_url,
            "country": self.country,
            "barcode": self.barcode,
            "release_id": self.release_id,
        }
