"""Typed response structures for each upstream catalog.

Every provider decodes its JSON body exactly once into these frozen
dataclasses. Field access is checked: a present field with the wrong JSON
type raises ResponseFormatError, while missing or null fields fall back to
empty defaults.
"""

from dataclasses import dataclass
from typing import Any, TypeVar

T = TypeVar("T")


class ResponseFormatError(ValueError):
    """Response JSON does not have the expected shape."""


def _expect_object(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ResponseFormatError(f"{what}: expected object, got {type(data).__name__}")
    return data


def _get(data: dict[str, Any], key: str, kind: type[T], default: T) -> T:
    """Return data[key] checked against kind, or default if missing/null."""
    value = data.get(key)
    if value is None:
        return default
    # bool is an int subclass; never accept it where a number is expected
    if isinstance(value, bool) and kind is not bool:
        raise ResponseFormatError(f"field {key!r}: expected {kind.__name__}, got bool")
    if not isinstance(value, kind):
        raise ResponseFormatError(
            f"field {key!r}: expected {kind.__name__}, got {type(value).__name__}"
        )
    return value


def _get_str_list(data: dict[str, Any], key: str) -> tuple[str, ...]:
    values = _get(data, key, list, [])
    if not all(isinstance(v, str) for v in values):
        raise ResponseFormatError(f"field {key!r}: expected list of strings")
    return tuple(values)


def _get_objects(data: dict[str, Any], key: str) -> list[dict[str, Any]]:
    items = _get(data, key, list, [])
    return [_expect_object(item, key) for item in items]


# -- Discogs ------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class DiscogsResult:
    """One entry of a Discogs database search.

    Attributes:
        id: Discogs release id.
        title: Combined "Artist - Album" title.
        year: Release year (0 if unknown).
        label: Label names.
        genre: Genre names.
        style: Style names.
        cover_image: Cover image URL.
        type: Entry type ("release", "master", ...).
    """

    id: int = 0
    title: str = ""
    year: int = 0
    label: tuple[str, ...] = ()
    genre: tuple[str, ...] = ()
    style: tuple[str, ...] = ()
    cover_image: str = ""
    type: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DiscogsResult":
        """Create result from JSON dict."""
        year = data.get("year")
        # Discogs sometimes serializes the year as a string
        if isinstance(year, str):
            year = int(year) if year.isascii() and year.isdecimal() else 0
            data = {**data, "year": year}
        return cls(
            id=_get(data, "id", int, 0),
            title=_get(data, "title", str, ""),
            year=_get(data, "year", int, 0),
            label=_get_str_list(data, "label"),
            genre=_get_str_list(data, "genre"),
            style=_get_str_list(data, "style"),
            cover_image=_get(data, "cover_image", str, ""),
            type=_get(data, "type", str, ""),
        )


@dataclass(frozen=True, slots=True)
class DiscogsSearchResponse:
    """Discogs /database/search response."""

    results: tuple[DiscogsResult, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> "DiscogsSearchResponse":
        """Create response from decoded JSON."""
        body = _expect_object(data, "Discogs search")
        return cls(results=tuple(DiscogsResult.from_dict(r) for r in _get_objects(body, "results")))


# -- iTunes -------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ITunesAlbum:
    """One album entry from the iTunes Search API.

    Attributes:
        artist_name: Artist name.
        collection_name: Album title.
        release_date: ISO timestamp, e.g. "1973-03-01T08:00:00Z".
        primary_genre_name: Single genre name.
        artwork_url_100: 100x100 artwork URL.
    """

    artist_name: str = ""
    collection_name: str = ""
    release_date: str = ""
    primary_genre_name: str = ""
    artwork_url_100: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ITunesAlbum":
        """Create album from JSON dict."""
        return cls(
            artist_name=_get(data, "artistName", str, ""),
            collection_name=_get(data, "collectionName", str, ""),
            release_date=_get(data, "releaseDate", str, ""),
            primary_genre_name=_get(data, "primaryGenreName", str, ""),
            artwork_url_100=_get(data, "artworkUrl100", str, ""),
        )


@dataclass(frozen=True, slots=True)
class ITunesSearchResponse:
    """iTunes /search response."""

    result_count: int = 0
    results: tuple[ITunesAlbum, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> "ITunesSearchResponse":
        """Create response from decoded JSON."""
        body = _expect_object(data, "iTunes search")
        return cls(
            result_count=_get(body, "resultCount", int, 0),
            results=tuple(ITunesAlbum.from_dict(r) for r in _get_objects(body, "results")),
        )


# -- MusicBrainz / Cover Art Archive ------------------------------------------


@dataclass(frozen=True, slots=True)
class ReleaseCandidate:
    """A MusicBrainz release (one pressing/edition) from a search.

    Attributes:
        id: Release MBID.
        title: Release title.
        date: Release date string ("YYYY", "YYYY-MM" or "YYYY-MM-DD").
        country: Release country code.
        barcode: Barcode printed on the release.
        artist_credit: Credited artist names in order.
        label_info: Label names in order.
    """

    id: str = ""
    title: str = ""
    date: str = ""
    country: str = ""
    barcode: str = ""
    artist_credit: tuple[str, ...] = ()
    label_info: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ReleaseCandidate":
        """Create release from JSON dict."""
        artists: list[str] = []
        for credit in _get_objects(data, "artist-credit"):
            artist = _expect_object(credit.get("artist") or {}, "artist-credit.artist")
            name = _get(artist, "name", str, "")
            if name:
                artists.append(name)

        labels: list[str] = []
        for info in _get_objects(data, "label-info"):
            label = _expect_object(info.get("label") or {}, "label-info.label")
            name = _get(label, "name", str, "")
            if name:
                labels.append(name)

        return cls(
            id=_get(data, "id", str, ""),
            title=_get(data, "title", str, ""),
            date=_get(data, "date", str, ""),
            country=_get(data, "country", str, ""),
            barcode=_get(data, "barcode", str, ""),
            artist_credit=tuple(artists),
            label_info=tuple(labels),
        )


@dataclass(frozen=True, slots=True)
class MusicBrainzSearchResponse:
    """MusicBrainz /ws/2/release search response."""

    releases: tuple[ReleaseCandidate, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> "MusicBrainzSearchResponse":
        """Create response from decoded JSON."""
        body = _expect_object(data, "MusicBrainz search")
        return cls(
            releases=tuple(ReleaseCandidate.from_dict(r) for r in _get_objects(body, "releases"))
        )

    @property
    def release_ids(self) -> list[str]:
        """Return non-empty release ids in search-result order."""
        return [r.id for r in self.releases if r.id]


@dataclass(frozen=True, slots=True)
class CoverArtImage:
    """One image listed by the Cover Art Archive."""

    image: str = ""
    front: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CoverArtImage":
        """Create image entry from JSON dict."""
        return cls(
            image=_get(data, "image", str, ""),
            front=_get(data, "front", bool, False),
        )


@dataclass(frozen=True, slots=True)
class CoverArtResponse:
    """Cover Art Archive /release/{id} metadata response."""

    images: tuple[CoverArtImage, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> "CoverArtResponse":
        """Create response from decoded JSON."""
        body = _expect_object(data, "Cover Art Archive")
        return cls(images=tuple(CoverArtImage.from_dict(i) for i in _get_objects(body, "images")))

    def front_image(self) -> str | None:
        """Return the image flagged as front, else the first image, else None."""
        for img in self.images:
            if img.front and img.image:
                return img.image
        for img in self.images:
            if img.image:
                return img.image
        return None


# -- OMDb ---------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class OmdbResponse:
    """OMDb title lookup response.

    Attributes:
        response: "True" on a match, "False" otherwise.
        error: Error message when response is "False".
    """

    response: str = "False"
    error: str = ""
    title: str = ""
    year: str = ""
    director: str = ""
    genre: str = ""
    plot: str = ""
    poster: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "OmdbResponse":
        """Create response from decoded JSON."""
        body = _expect_object(data, "OMDb")
        return cls(
            response=_get(body, "Response", str, "False"),
            error=_get(body, "Error", str, ""),
            title=_get(body, "Title", str, ""),
            year=_get(body, "Year", str, ""),
            director=_get(body, "Director", str, ""),
            genre=_get(body, "Genre", str, ""),
            plot=_get(body, "Plot", str, ""),
            poster=_get(body, "Poster", str, ""),
        )

    @property
    def is_found(self) -> bool:
        """Return True if OMDb reported a match."""
        return self.response == "True"
