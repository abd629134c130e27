"""Wiring of the shared HTTP client, rate governor, providers and resolver."""

import logging
from typing import Any

import httpx

from mediacloset.api.providers.cover_art import CoverArtResolver
from mediacloset.api.providers.discogs import DiscogsProvider
from mediacloset.api.providers.itunes import ITunesProvider
from mediacloset.api.providers.musicbrainz import MusicBrainzProvider
from mediacloset.api.providers.omdb import OmdbProvider
from mediacloset.core.config import Settings
from mediacloset.core.rate_limit import RateGovernor
from mediacloset.core.resolver import Resolver
from mediacloset.models.album import AlbumMetadata
from mediacloset.models.movie import MovieMetadata

logger = logging.getLogger(__name__)


class MetadataService:
    """Owns one HTTP client and the resolver built on top of it.

    Providers are tried in the order Discogs, iTunes, MusicBrainz.

    Example:
        async with MetadataService(load_settings()) as service:
            album = await service.lookup_album("0724384260651")
            print(album.display_title)
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
        governor: RateGovernor | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            settings: Configuration (defaults to Settings()).
            client: HTTP client to use instead of creating one. A client
                passed in is not closed by the service.
            governor: Rate governor to share with other services.
        """
        self._settings = settings or Settings()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            headers={"User-Agent": self._settings.user_agent},
            timeout=self._settings.request_timeout,
            follow_redirects=True,
        )
        if governor is None:
            governor = (
                RateGovernor.with_defaults() if self._settings.enable_rate_limit else RateGovernor()
            )
        self._governor = governor

        timeout = self._settings.request_timeout
        cover_art = CoverArtResolver(self._client, timeout=timeout)
        self._musicbrainz = MusicBrainzProvider(
            self._client, governor, cover_art, timeout=timeout
        )
        self._omdb = OmdbProvider(self._client, self._settings.omdb_api_key, timeout=timeout)
        self._resolver = Resolver(
            [
                DiscogsProvider(
                    self._client,
                    self._settings.discogs_key,
                    self._settings.discogs_secret,
                    timeout=timeout,
                ),
                ITunesProvider(self._client, timeout=timeout),
                self._musicbrainz,
            ],
            title_provider=self._musicbrainz,
            movie_provider=self._omdb,
            lookup_timeout=self._settings.lookup_timeout,
        )
        logger.debug(
            "Service ready: providers=%s",
            ", ".join(p.name for p in self._resolver.album_providers),
        )

    @property
    def settings(self) -> Settings:
        """Return the active settings."""
        return self._settings

    @property
    def resolver(self) -> Resolver:
        """Return the resolver."""
        return self._resolver

    @property
    def governor(self) -> RateGovernor:
        """Return the rate governor."""
        return self._governor

    async def __aenter__(self) -> "MetadataService":
        """Enter async context."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Exit async context (close the HTTP client)."""
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client if the service created it."""
        if self._owns_client:
            await self._client.aclose()

    async def lookup_album(self, barcode: str, timeout: float | None = None) -> AlbumMetadata:
        """Resolve album metadata from a barcode."""
        return await self._resolver.lookup_album(barcode, timeout)

    async def lookup_album_by_title(
        self, artist: str, album: str, timeout: float | None = None
    ) -> AlbumMetadata:
        """Resolve album metadata and cover art from artist and title."""
        return await self._resolver.lookup_album_by_title(artist, album, timeout)

    async def lookup_movie(
        self,
        title: str,
        director: str | None = None,
        year: int | None = None,
        timeout: float | None = None,
    ) -> MovieMetadata:
        """Resolve movie metadata from a title."""
        return await self._resolver.lookup_movie(title, director, year, timeout)

    async def lookup_movie_by_barcode(
        self, barcode: str, timeout: float | None = None
    ) -> MovieMetadata:
        """Movie barcode lookup (always raises LookupNotImplementedError)."""
        return await self._resolver.lookup_movie_by_barcode(barcode, timeout)
