"""Field mapping helpers shared by the provider clients.

Each provider decodes its own response shape, then uses these helpers to
fill the shared AlbumMetadata/MovieMetadata fields the same way.
"""

from collections.abc import Iterable
from typing import TypeVar

T = TypeVar("T")

TITLE_SEPARATOR = " - "

# iTunes serves 100x100 thumbnails; the same path works for larger sizes
SMALL_ARTWORK_TOKEN = "100x100"
LARGE_ARTWORK_TOKEN = "600x600"

_YEAR_DIGITS = 4


def split_artist_album(title: str) -> tuple[str | None, str | None]:
    """Split a combined "Artist - Album" title.

    Splits on the first separator only, so album titles that contain
    " - " themselves stay intact.

    Args:
        title: Combined title string.

    Returns:
        Tuple of (artist, album). Artist is None if there is no separator;
        a blank side of the separator is None.
    """
    if not title:
        return None, None
    if TITLE_SEPARATOR not in title:
        return None, title
    artist, album = title.split(TITLE_SEPARATOR, 1)
    return none_if_blank(artist.strip()), none_if_blank(album.strip())


def merge_unique(*lists: Iterable[str] | None) -> tuple[str, ...]:
    """Merge several lists into one, keeping the first occurrence of each value.

    Args:
        *lists: Lists to merge in priority order. None entries are skipped.

    Returns:
        Tuple of unique values in first-seen order.
    """
    seen: dict[str, None] = {}
    for values in lists:
        if not values:
            continue
        for value in values:
            if value and value not in seen:
                seen[value] = None
    return tuple(seen)


def first_or_none(values: list[T] | None) -> T | None:
    """Return the first element of a list, or None if it is empty."""
    if not values:
        return None
    return values[0]


def upgrade_artwork_url(url: str) -> str:
    """Swap the small artwork size token for a larger one."""
    return url.replace(SMALL_ARTWORK_TOKEN, LARGE_ARTWORK_TOKEN)


def extract_year(value: int | str | None) -> int | None:
    """Extract a four-digit year from an int field or a date-like string.

    Args:
        value: Year as int (0 means unknown), or a string such as
            "1973", "1973-03-01" or "2001-2003".

    Returns:
        The year, or None if it cannot be parsed.
    """
    if value is None:
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    head = value.strip()[:_YEAR_DIGITS]
    # ASCII digits only; int() rejects superscript digits
    if len(head) != _YEAR_DIGITS or not (head.isascii() and head.isdecimal()):
        return None
    year = int(head)
    return year if year > 0 else None


def none_if_blank(value: str | None, *placeholders: str) -> str | None:
    """Return None for empty strings and provider placeholders like "N/A"."""
    if not value or value in placeholders:
        return None
    return value
