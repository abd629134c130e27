"""MusicBrainz release search provider.

Uses MusicBrainz to search for releases and the Cover Art Archive to find
artwork. Free and community-driven, with comprehensive catalog data but
weaker barcode coverage than Discogs. MusicBrainz allows one request per
second, so every search first waits on the shared RateGovernor.
"""

from __future__ import annotations

import logging

import httpx

from mediacloset.api.providers.cover_art import CoverArtResolver
from mediacloset.api.providers.provider import (
    REQUEST_TIMEOUT,
    AlbumProvider,
    NoResultsError,
    ProviderTransientError,
    get_json,
)
from mediacloset.api.providers.types import (
    MusicBrainzSearchResponse,
    ReleaseCandidate,
    ResponseFormatError,
)
from mediacloset.core.rate_limit import MUSICBRAINZ_RATE_KEY, RateGovernor
from mediacloset.models.album import AlbumMetadata
from mediacloset.models.normalize import extract_year, first_or_none, none_if_blank

logger = logging.getLogger(__name__)

# MusicBrainz API endpoint
MUSICBRAINZ_API_URL = "https://musicbrainz.org/ws/2"

# Limit title searches to avoid probing too many releases for cover art
TITLE_SEARCH_LIMIT = "10"

SOURCE_TAG = "musicbrainz"


def _lucene_phrase(text: str) -> str:
    """Quote text as a Lucene phrase."""
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class MusicBrainzProvider(AlbumProvider):
    """Search MusicBrainz releases by barcode or by artist and album.

    Two-step process:
    1. Search MusicBrainz for matching releases (rate limited)
    2. Resolve cover art across the returned release ids

    Example:
        provider = MusicBrainzProvider(client, governor, CoverArtResolver(client))
        album = await provider.lookup_by_title("Pink Floyd", "The Dark Side of the Moon")
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        governor: RateGovernor,
        cover_art: CoverArtResolver,
        base_url: str = MUSICBRAINZ_API_URL,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        """Initialize the provider.

        Args:
            client: Shared async HTTP client.
            governor: Process-wide rate governor.
            cover_art: Resolver used for artwork lookups.
            base_url: API base URL (overridable for tests).
            timeout: Per-request timeout in seconds.
        """
        self._client = client
        self._governor = governor
        self._cover_art = cover_art
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    @property
    def name(self) -> str:
        """Return provider name."""
        return "MusicBrainz"

    async def lookup_by_barcode(self, barcode: str) -> AlbumMetadata:
        """Search MusicBrainz releases by barcode.

        Args:
            barcode: UPC/EAN text.

        Returns:
            Metadata of the first release, with cover art from the first
            release (in result order) that has any.

        Raises:
            NoResultsError: No release carries this barcode.
            ProviderTransientError: The request or response was bad.
        """
        search = await self._search(
            {
                "query": f"barcode:{barcode}",
                "fmt": "json",
                "inc": "artists+labels+recordings",
            }
        )
        if not search.releases:
            raise NoResultsError(self.name, f"no releases found for barcode '{barcode}'")

        cover_url = await self._cover_art.resolve(search.release_ids)
        return self._to_album(search.releases[0], cover_url)

    async def lookup_by_title(self, artist: str, album: str) -> AlbumMetadata:
        """Search MusicBrainz releases by artist and album title.

        The artist and album given by the caller are kept as-is; the search
        only contributes cover art and release details.

        Args:
            artist: Artist name.
            album: Album title.

        Returns:
            Album metadata with cover art if any release has it.

        Raises:
            NoResultsError: No release matches.
            ProviderTransientError: The request or response was bad.
        """
        search = await self._search(
            {
                "query": f"release:{_lucene_phrase(album)} AND artist:{_lucene_phrase(artist)}",
                "fmt": "json",
                "limit": TITLE_SEARCH_LIMIT,
            }
        )
        if not search.releases:
            raise NoResultsError(
                self.name, f"no releases found for artist '{artist}', album '{album}'"
            )

        cover_url = await self._cover_art.resolve(search.release_ids)
        first = search.releases[0]
        return AlbumMetadata(
            source=SOURCE_TAG,
            artist=artist,
            album=album,
            year=extract_year(first.date),
            label=first_or_none(list(first.label_info)),
            cover_url=cover_url,
            country=none_if_blank(first.country),
            release_id=none_if_blank(first.id),
        )

    async def _search(self, params: dict[str, str]) -> MusicBrainzSearchResponse:
        """Run one rate-limited release search."""
        await self._governor.wait(MUSICBRAINZ_RATE_KEY)
        data = await get_json(
            self._client,
            self.name,
            f"{self._base_url}/release/",
            params=params,
            timeout=self._timeout,
        )
        try:
            return MusicBrainzSearchResponse.from_dict(data)
        except ResponseFormatError as e:
            raise ProviderTransientError(self.name, f"unexpected response shape: {e}") from e

    @staticmethod
    def _to_album(release: ReleaseCandidate, cover_url: str | None) -> AlbumMetadata:
        """Map a release candidate into AlbumMetadata."""
        return AlbumMetadata(
            source=SOURCE_TAG,
            artist=first_or_none(list(release.artist_credit)),
            album=none_if_blank(release.title),
            year=extract_year(release.date),
            label=first_or_none(list(release.label_info)),
            cover_url=cover_url,
            country=none_if_blank(release.country),
            barcode=none_if_blank(release.barcode),
            release_id=none_if_blank(release.id),
        )
