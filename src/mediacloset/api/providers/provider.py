"""Base provider protocol and typed lookup failures.

Every catalog client turns one query into one HTTP call and maps the first
result into the shared metadata shape. Failures are raised as ProviderError
subclasses so the resolver can tell "skip this provider" apart from
"nothing there" and "the call itself failed".
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

import httpx

from mediacloset.models.album import AlbumMetadata

logger = logging.getLogger(__name__)

# Request timeout in seconds
REQUEST_TIMEOUT = 5.0

# Some catalogs (MusicBrainz, Discogs) reject requests without a descriptive agent
USER_AGENT = "MediaCloset/1.0 (metadata resolver)"

# Truncate error bodies echoed into exception messages
_ERROR_BODY_LIMIT = 200


class MetadataLookupError(Exception):
    """Base class for all metadata lookup failures."""


class ProviderError(MetadataLookupError):
    """A single provider failed to produce a result.

    Attributes:
        provider: Name of the provider that failed.
    """

    def __init__(self, provider: str, message: str) -> None:
        """Initialize with provider name and message.

        Args:
            provider: Provider name.
            message: Human-readable reason.
        """
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class ProviderNotConfiguredError(ProviderError):
    """Provider credentials are missing; no network call was made."""


class NoResultsError(ProviderError):
    """Provider was reached but returned no matches."""


class ProviderTransientError(ProviderError):
    """Network failure, timeout, non-2xx status or unparsable body."""


async def get_json(
    client: httpx.AsyncClient,
    provider: str,
    url: str,
    *,
    params: Mapping[str, str] | None = None,
    headers: Mapping[str, str] | None = None,
    timeout: float = REQUEST_TIMEOUT,
) -> Any:
    """Issue one GET request and decode the JSON body.

    Redirects are followed (Cover Art Archive serves its JSON from a
    redirect target).

    Args:
        client: Shared async HTTP client.
        provider: Provider name for error reporting.
        url: Endpoint URL.
        params: Query parameters.
        headers: Extra request headers.
        timeout: Timeout for this call in seconds.

    Returns:
        Decoded JSON value.

    Raises:
        ProviderTransientError: On network errors, timeouts, non-200 status
            or a body that is not valid JSON.
    """
    try:
        response = await client.get(
            url, params=params, headers=headers, timeout=timeout, follow_redirects=True
        )
    except httpx.TimeoutException as e:
        raise ProviderTransientError(provider, f"request timed out after {timeout}s") from e
    except httpx.HTTPError as e:
        raise ProviderTransientError(provider, f"request failed: {e}") from e

    if response.status_code != httpx.codes.OK:
        body = response.text[:_ERROR_BODY_LIMIT]
        raise ProviderTransientError(
            provider, f"unexpected status code {response.status_code}: {body}"
        )

    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ProviderTransientError(provider, f"failed to parse JSON: {e}") from e


class AlbumProvider(ABC):
    """Abstract base class for album catalogs searchable by barcode.

    Subclasses implement one catalog each (Discogs, iTunes, MusicBrainz).
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the provider name for logging and error reporting."""

    @property
    def is_configured(self) -> bool:
        """Return True if the provider has the credentials it needs."""
        return True

    @abstractmethod
    async def lookup_by_barcode(self, barcode: str) -> AlbumMetadata:
        """Look up an album by barcode.

        Args:
            barcode: Barcode text to search for.

        Returns:
            Normalized metadata of the first matching release.

        Raises:
            ProviderNotConfiguredError: Credentials missing (no call made).
            NoResultsError: The catalog has no match.
            ProviderTransientError: The call failed.
        """
