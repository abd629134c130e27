"""Movie metadata model."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class MovieMetadata:
    """Normalized movie metadata.

    Attributes:
        title: Movie title as reported by the provider.
        source: Tag of the provider that supplied this record.
        year: Release year (first year of a range like "2001-2003").
        director: Director name(s), comma separated as the provider lists them.
        genre: Genre string.
        plot: Short plot summary.
        poster_url: Poster image URL.
    """

    title: str
    source: str
    year: int | None = None
    director: str | None = None
    genre: str | None = None
    plot: str | None = None
    poster_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "title": self.title,
            "source": self.source,
            "year": self.year,
            "director": self.director,
            "genre": self.genre,
            "plot": self.plot,
            "poster_url": self.poster_url,
        }
