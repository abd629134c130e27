"""OMDb (Open Movie Database) provider.

Looks up movies by title with optional year filter. OMDb has no barcode
search, so this provider only serves title lookups.
"""

from __future__ import annotations

import logging

import httpx

from mediacloset.api.providers.provider import (
    REQUEST_TIMEOUT,
    NoResultsError,
    ProviderNotConfiguredError,
    ProviderTransientError,
    get_json,
)
from mediacloset.api.providers.types import OmdbResponse, ResponseFormatError
from mediacloset.models.movie import MovieMetadata
from mediacloset.models.normalize import extract_year, none_if_blank

logger = logging.getLogger(__name__)

# OMDb API endpoint
OMDB_API_URL = "https://www.omdbapi.com"

# OMDb placeholder for missing values
NOT_AVAILABLE = "N/A"

SOURCE_TAG = "omdb"


def director_matches(expected: str, actual: str) -> bool:
    """Loose, case-insensitive director comparison.

    Either name containing the other counts as a match, so "Nolan" matches
    "Christopher Nolan" and a single director matches a co-director list.
    """
    expected_lower = expected.lower()
    actual_lower = actual.lower()
    return expected_lower in actual_lower or actual_lower in expected_lower


class OmdbProvider:
    """Search OMDb for a movie by title.

    Example:
        provider = OmdbProvider(client, api_key="abc123")
        movie = await provider.search_movie("Alien", year=1979)
        print(movie.director, movie.poster_url)
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str = "",
        base_url: str = OMDB_API_URL,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        """Initialize the provider.

        Args:
            client: Shared async HTTP client.
            api_key: OMDb API key.
            base_url: API base URL (overridable for tests).
            timeout: Per-request timeout in seconds.
        """
        self._client = client
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    @property
    def name(self) -> str:
        """Return provider name."""
        return "OMDb"

    @property
    def is_configured(self) -> bool:
        """Return True if an API key is set."""
        return bool(self._api_key)

    async def search_movie(
        self,
        title: str,
        director: str | None = None,
        year: int | None = None,
    ) -> MovieMetadata:
        """Look up a movie by title.

        A director that does not match the result is only logged; the
        result is still returned.

        Args:
            title: Movie title.
            director: Expected director, used only for a mismatch warning.
            year: Release year filter.

        Returns:
            Normalized movie metadata.

        Raises:
            ProviderNotConfiguredError: API key missing or rejected.
            NoResultsError: OMDb found no matching movie.
            ProviderTransientError: The request or response was bad.
        """
        if not self.is_configured:
            raise ProviderNotConfiguredError(self.name, "API key not configured")

        params = {"apikey": self._api_key, "t": title, "plot": "short"}
        if year is not None:
            params["y"] = str(year)

        data = await get_json(
            self._client,
            self.name,
            f"{self._base_url}/",
            params=params,
            timeout=self._timeout,
        )
        try:
            result = OmdbResponse.from_dict(data)
        except ResponseFormatError as e:
            raise ProviderTransientError(self.name, f"unexpected response shape: {e}") from e

        if not result.is_found:
            message = result.error or "no results"
            if "api key" in message.lower():
                raise ProviderNotConfiguredError(self.name, message)
            raise NoResultsError(self.name, message)

        if director and not director_matches(director, result.director):
            logger.warning(
                "Director mismatch for '%s': expected '%s', got '%s'",
                title,
                director,
                result.director,
            )

        return MovieMetadata(
            title=result.title or title,
            source=SOURCE_TAG,
            year=extract_year(result.year),
            director=none_if_blank(result.director, NOT_AVAILABLE),
            genre=none_if_blank(result.genre, NOT_AVAILABLE),
            plot=none_if_blank(result.plot, NOT_AVAILABLE),
            poster_url=none_if_blank(result.poster, NOT_AVAILABLE),
        )

    async def fetch_poster_url(
        self,
        title: str,
        director: str | None = None,
        year: int | None = None,
    ) -> str | None:
        """Return just the poster URL for a movie (None if OMDb has none)."""
        movie = await self.search_movie(title, director, year)
        return movie.poster_url
