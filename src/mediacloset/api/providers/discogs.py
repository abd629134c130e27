"""Discogs database search provider.

Discogs has the richest barcode coverage for physical music releases but
requires a consumer key/secret pair. Without credentials the provider
reports itself as not configured and never touches the network.
"""

from __future__ import annotations

import logging

import httpx

from mediacloset.api.providers.provider import (
    REQUEST_TIMEOUT,
    AlbumProvider,
    NoResultsError,
    ProviderNotConfiguredError,
    ProviderTransientError,
    get_json,
)
from mediacloset.api.providers.types import DiscogsResult, DiscogsSearchResponse, ResponseFormatError
from mediacloset.models.album import AlbumMetadata
from mediacloset.models.normalize import (
    extract_year,
    first_or_none,
    merge_unique,
    none_if_blank,
    split_artist_album,
)

logger = logging.getLogger(__name__)

# Discogs API endpoint
DISCOGS_API_URL = "https://api.discogs.com"

SOURCE_TAG = "discogs"


class DiscogsProvider(AlbumProvider):
    """Search Discogs releases by barcode.

    Example:
        provider = DiscogsProvider(client, "key", "secret")
        album = await provider.lookup_by_barcode("724384260651")
        print(album.artist, album.album, album.genres)
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        consumer_key: str = "",
        consumer_secret: str = "",
        base_url: str = DISCOGS_API_URL,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        """Initialize the provider.

        Args:
            client: Shared async HTTP client.
            consumer_key: Discogs consumer key.
            consumer_secret: Discogs consumer secret.
            base_url: API base URL (overridable for tests).
            timeout: Per-request timeout in seconds.
        """
        self._client = client
        self._consumer_key = consumer_key
        self._consumer_secret = consumer_secret
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    @property
    def name(self) -> str:
        """Return provider name."""
        return "Discogs"

    @property
    def is_configured(self) -> bool:
        """Return True if both key and secret are set."""
        return bool(self._consumer_key and self._consumer_secret)

    async def lookup_by_barcode(self, barcode: str) -> AlbumMetadata:
        """Search Discogs for a release by barcode.

        Args:
            barcode: UPC/EAN text.

        Returns:
            Album metadata built from the first search result.

        Raises:
            ProviderNotConfiguredError: Key or secret missing.
            NoResultsError: No release matches the barcode.
            ProviderTransientError: The request or response was bad.
        """
        if not self.is_configured:
            raise ProviderNotConfiguredError(self.name, "API credentials not configured")

        data = await get_json(
            self._client,
            self.name,
            f"{self._base_url}/database/search",
            params={"barcode": barcode, "type": "release"},
            headers={
                "Authorization": (
                    f"Discogs key={self._consumer_key}, secret={self._consumer_secret}"
                ),
            },
            timeout=self._timeout,
        )
        try:
            search = DiscogsSearchResponse.from_dict(data)
        except ResponseFormatError as e:
            raise ProviderTransientError(self.name, f"unexpected response shape: {e}") from e

        if not search.results:
            raise NoResultsError(self.name, f"no results found for barcode {barcode}")

        logger.debug("Discogs returned %d result(s) for %s", len(search.results), barcode)
        return self._to_album(search.results[0])

    @staticmethod
    def _to_album(result: DiscogsResult) -> AlbumMetadata:
        """Map a Discogs search result into AlbumMetadata."""
        artist, album = split_artist_album(result.title)
        return AlbumMetadata(
            source=SOURCE_TAG,
            artist=artist,
            album=album,
            year=extract_year(result.year),
            label=first_or_none(list(result.label)),
            genres=merge_unique(result.genre, result.style),
            cover_url=none_if_blank(result.cover_image),
        )
