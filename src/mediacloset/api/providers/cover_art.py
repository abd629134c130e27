"""Cover Art Archive resolver.

A MusicBrainz search usually returns several releases (pressings, reissues,
regional editions) and only some of them have artwork uploaded. The
resolver walks the release ids in search-result order and, for each one,
tries the direct front-cover redirect before falling back to the JSON image
listing. Cover art is best effort: failures are logged and skipped.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

import httpx

from mediacloset.api.providers.provider import REQUEST_TIMEOUT, ProviderTransientError, get_json
from mediacloset.api.providers.types import CoverArtResponse, ResponseFormatError

logger = logging.getLogger(__name__)

# Cover Art Archive endpoint
COVER_ART_URL = "https://coverartarchive.org"


class CoverArtResolver:
    """Resolve a cover image URL from candidate MusicBrainz release ids.

    Example:
        resolver = CoverArtResolver(client)
        url = await resolver.resolve(["b84ee12a-...", "f5093c06-..."])
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str = COVER_ART_URL,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        """Initialize the resolver.

        Args:
            client: Shared async HTTP client.
            base_url: Cover Art Archive base URL (overridable for tests).
            timeout: Per-request timeout in seconds.
        """
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    @property
    def name(self) -> str:
        """Return resolver name for logging."""
        return "CoverArtArchive"

    async def resolve(self, release_ids: Iterable[str]) -> str | None:
        """Return the first cover URL found across the given releases.

        Release ids are tried in the order given and never re-sorted.

        Args:
            release_ids: Candidate release MBIDs, best match first.

        Returns:
            Cover image URL, or None if no release has artwork.
        """
        tried = 0
        for release_id in release_ids:
            if not release_id:
                continue
            tried += 1
            url = await self.resolve_release(release_id)
            if url:
                logger.debug("Cover art for release %s: %s", release_id, url)
                return url

        logger.debug("No cover art found (tried %d release(s))", tried)
        return None

    async def resolve_release(self, release_id: str) -> str | None:
        """Resolve the cover URL of a single release.

        Args:
            release_id: Release MBID.

        Returns:
            Cover image URL, or None.
        """
        url = await self._fetch_front(release_id)
        if url:
            return url
        return await self._fetch_from_metadata(release_id)

    async def _fetch_front(self, release_id: str) -> str | None:
        """Follow the /front redirect and return the final asset URL.

        The body is streamed and never read; only the final URL matters.
        """
        front_url = f"{self._base_url}/release/{release_id}/front"
        try:
            async with self._client.stream(
                "GET", front_url, timeout=self._timeout, follow_redirects=True
            ) as response:
                if response.status_code == httpx.codes.OK:
                    return str(response.url)
                logger.debug(
                    "Front cover for %s returned status %d", release_id, response.status_code
                )
        except httpx.HTTPError as e:
            logger.debug("Front cover request failed for %s: %s", release_id, e)
        return None

    async def _fetch_from_metadata(self, release_id: str) -> str | None:
        """Look up the image listing and pick the front (or first) image."""
        metadata_url = f"{self._base_url}/release/{release_id}"
        try:
            data = await get_json(self._client, self.name, metadata_url, timeout=self._timeout)
            return CoverArtResponse.from_dict(data).front_image()
        except (ProviderTransientError, ResponseFormatError) as e:
            logger.debug("Cover art metadata lookup failed for %s: %s", release_id, e)
            return None
