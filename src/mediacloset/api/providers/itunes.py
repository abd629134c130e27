"""iTunes Search API provider.

Uses Apple's free iTunes Search API. No authentication required, good
coverage for popular music. iTunes has no barcode field, so the barcode is
sent as a plain search term.
"""

from __future__ import annotations

import logging

import httpx

from mediacloset.api.providers.provider import (
    REQUEST_TIMEOUT,
    AlbumProvider,
    NoResultsError,
    ProviderTransientError,
    get_json,
)
from mediacloset.api.providers.types import ITunesAlbum, ITunesSearchResponse, ResponseFormatError
from mediacloset.models.album import AlbumMetadata
from mediacloset.models.normalize import extract_year, merge_unique, none_if_blank, upgrade_artwork_url

logger = logging.getLogger(__name__)

# iTunes API endpoint
ITUNES_API_URL = "https://itunes.apple.com"

# Max results to request; only the first is used
SEARCH_LIMIT = "5"

SOURCE_TAG = "itunes"


class ITunesProvider(AlbumProvider):
    """Search the iTunes catalog with a barcode as the search term.

    Example:
        provider = ITunesProvider(client)
        album = await provider.lookup_by_barcode("602537988334")
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str = ITUNES_API_URL,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        """Initialize the provider.

        Args:
            client: Shared async HTTP client.
            base_url: API base URL (overridable for tests).
            timeout: Per-request timeout in seconds.
        """
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    @property
    def name(self) -> str:
        """Return provider name."""
        return "iTunes"

    async def lookup_by_barcode(self, barcode: str) -> AlbumMetadata:
        """Search iTunes albums for the barcode text.

        Args:
            barcode: UPC/EAN text.

        Returns:
            Album metadata built from the first result.

        Raises:
            NoResultsError: iTunes reported zero results.
            ProviderTransientError: The request or response was bad.
        """
        data = await get_json(
            self._client,
            self.name,
            f"{self._base_url}/search",
            params={"term": barcode, "entity": "album", "limit": SEARCH_LIMIT},
            timeout=self._timeout,
        )
        try:
            search = ITunesSearchResponse.from_dict(data)
        except ResponseFormatError as e:
            raise ProviderTransientError(self.name, f"unexpected response shape: {e}") from e

        if search.result_count == 0 or not search.results:
            raise NoResultsError(self.name, f"no results found for barcode {barcode}")

        return self._to_album(search.results[0])

    @staticmethod
    def _to_album(result: ITunesAlbum) -> AlbumMetadata:
        """Map an iTunes album entry into AlbumMetadata."""
        cover_url = None
        if result.artwork_url_100:
            cover_url = upgrade_artwork_url(result.artwork_url_100)
        return AlbumMetadata(
            source=SOURCE_TAG,
            artist=none_if_blank(result.artist_name),
            album=none_if_blank(result.collection_name),
            year=extract_year(result.release_date),
            genres=merge_unique([result.primary_genre_name]),
            cover_url=cover_url,
        )
