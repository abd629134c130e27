"""Ordered fallback resolution across catalog providers.

Album barcode lookups walk the providers in a fixed order of reliability,
trying the barcode as scanned and then its cleaned form, and stop at the
first provider that answers. Results are never scored or merged across
providers. When every provider fails, the error raised carries the most
recent concrete provider failure so callers can tell a missing credential
from a network failure from an empty catalog.

Example:
    resolver = Resolver([discogs, itunes, musicbrainz], musicbrainz, omdb)
    try:
        album = await resolver.lookup_album("0724384260651", timeout=10)
    except NoMatchError as e:
        print("not found:", e.last_error)
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from mediacloset.api.providers.musicbrainz import MusicBrainzProvider
from mediacloset.api.providers.omdb import OmdbProvider
from mediacloset.api.providers.provider import (
    AlbumProvider,
    MetadataLookupError,
    NoResultsError,
    ProviderError,
    ProviderNotConfiguredError,
)
from mediacloset.core.barcode import BarcodeCandidate
from mediacloset.core.config import LOOKUP_TIMEOUT
from mediacloset.models.album import AlbumMetadata
from mediacloset.models.movie import MovieMetadata
from mediacloset.models.query import AlbumTitleQuery, BarcodeQuery, MovieQuery, ProviderQuery

logger = logging.getLogger(__name__)


class NoMatchError(MetadataLookupError):
    """Every provider was tried and none produced a result.

    Attributes:
        query: Description of what was looked up.
        last_error: Most recent concrete provider failure, if any.
        attempts: Every provider call made, in order.
    """

    def __init__(
        self,
        query: str,
        last_error: ProviderError | None = None,
        attempts: Sequence[LookupAttempt] = (),
    ) -> None:
        """Initialize with the query and the last provider error."""
        message = f"no match found for {query}"
        if last_error is not None:
            message = f"{message}: {last_error}"
        super().__init__(message)
        self.query = query
        self.last_error = last_error
        self.attempts = tuple(attempts)


class LookupCancelledError(MetadataLookupError):
    """The caller's deadline expired before the lookup finished."""


class LookupNotImplementedError(MetadataLookupError, NotImplementedError):
    """The requested kind of lookup has no provider behind it."""


class AttemptOutcome(Enum):
    """Result of one provider call."""

    FOUND = "found"
    NOT_CONFIGURED = "not_configured"
    NO_RESULTS = "no_results"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class LookupAttempt:
    """One provider call made during a resolution.

    Attributes:
        provider: Provider name.
        query: What was sent to the provider.
        outcome: How the call ended.
        error: The provider error, for failed calls.
    """

    provider: str
    query: ProviderQuery
    outcome: AttemptOutcome
    error: ProviderError | None = None


def _outcome_for(error: ProviderError) -> AttemptOutcome:
    if isinstance(error, ProviderNotConfiguredError):
        return AttemptOutcome.NOT_CONFIGURED
    if isinstance(error, NoResultsError):
        return AttemptOutcome.NO_RESULTS
    return AttemptOutcome.ERROR


class AlbumResolution:
    """State of a single barcode resolution.

    Created fresh for each request and discarded afterwards. Each provider
    is tried with the original barcode, then with the cleaned barcode if it
    differs. A provider that is not configured is skipped entirely.

    Attributes:
        candidate: The scanned barcode and its cleaned form.
        attempts: Provider calls made so far.
        last_error: Most recent provider failure.
    """

    def __init__(self, barcode: str) -> None:
        """Initialize for one scanned barcode.

        Args:
            barcode: Barcode text as scanned.
        """
        self.candidate = BarcodeCandidate.from_raw(barcode)
        self.attempts: list[LookupAttempt] = []
        self.last_error: ProviderError | None = None

    async def run(self, providers: Sequence[AlbumProvider]) -> AlbumMetadata:
        """Walk the providers in order until one answers.

        Args:
            providers: Providers in priority order.

        Returns:
            Metadata from the first provider that found the barcode.

        Raises:
            NoMatchError: All providers and forms were exhausted.
        """
        for provider in providers:
            album = await self._try_provider(provider)
            if album is not None:
                return album

        raise NoMatchError(
            f"barcode {self.candidate.original}", self.last_error, self.attempts
        )

    async def _try_provider(self, provider: AlbumProvider) -> AlbumMetadata | None:
        for query in self.candidate.forms():
            try:
                album = await provider.lookup_by_barcode(query.barcode)
            except ProviderNotConfiguredError as e:
                self._record(provider, query, e)
                logger.debug("%s not configured, skipping", provider.name)
                return None
            except ProviderError as e:
                self._record(provider, query, e)
                logger.debug("%s failed for %s: %s", provider.name, query, e)
                continue

            self.attempts.append(LookupAttempt(provider.name, query, AttemptOutcome.FOUND))
            logger.info("Found album via %s for %s", provider.name, query)
            return album
        return None

    def _record(self, provider: AlbumProvider, query: BarcodeQuery, error: ProviderError) -> None:
        self.attempts.append(LookupAttempt(provider.name, query, _outcome_for(error), error))
        self.last_error = error


class Resolver:
    """Entry point for barcode and title lookups.

    Holds the ordered album providers plus the title and movie providers.
    Every lookup runs under a deadline; when it expires the lookup is
    abandoned and LookupCancelledError is raised.
    """

    def __init__(
        self,
        album_providers: Sequence[AlbumProvider],
        title_provider: MusicBrainzProvider | None = None,
        movie_provider: OmdbProvider | None = None,
        lookup_timeout: float | None = LOOKUP_TIMEOUT,
    ) -> None:
        """Initialize the resolver.

        Args:
            album_providers: Barcode providers in priority order.
            title_provider: Provider for artist/album lookups.
            movie_provider: Provider for movie title lookups.
            lookup_timeout: Default deadline in seconds (None for no deadline).
        """
        self._album_providers = list(album_providers)
        self._title_provider = title_provider
        self._movie_provider = movie_provider
        self._lookup_timeout = lookup_timeout

    @property
    def album_providers(self) -> list[AlbumProvider]:
        """Return the barcode providers in the order they are tried."""
        return list(self._album_providers)

    def _deadline(self, timeout: float | None) -> float | None:
        return self._lookup_timeout if timeout is None else timeout

    async def lookup_album(self, barcode: str, timeout: float | None = None) -> AlbumMetadata:
        """Resolve album metadata from a scanned barcode.

        Args:
            barcode: Barcode text as scanned.
            timeout: Deadline in seconds (defaults to the resolver's).

        Returns:
            Metadata from the first provider that found the barcode.

        Raises:
            NoMatchError: No provider found the barcode.
            LookupCancelledError: The deadline expired.
        """
        resolution = AlbumResolution(barcode)
        deadline = self._deadline(timeout)
        try:
            async with asyncio.timeout(deadline):
                return await resolution.run(self._album_providers)
        except TimeoutError as e:
            raise LookupCancelledError(
                f"album lookup for barcode {barcode} exceeded {deadline}s"
            ) from e

    async def lookup_album_by_title(
        self, artist: str, album: str, timeout: float | None = None
    ) -> AlbumMetadata:
        """Resolve album metadata and cover art from artist and album title.

        Raises:
            NoMatchError: No title provider, or it found nothing.
            LookupCancelledError: The deadline expired.
        """
        query = AlbumTitleQuery(artist, album)
        if self._title_provider is None:
            raise NoMatchError(str(query))

        provider = self._title_provider
        deadline = self._deadline(timeout)
        try:
            async with asyncio.timeout(deadline):
                result = await provider.lookup_by_title(artist, album)
        except TimeoutError as e:
            raise LookupCancelledError(f"album lookup for {query} exceeded {deadline}s") from e
        except ProviderError as e:
            attempt = LookupAttempt(provider.name, query, _outcome_for(e), e)
            raise NoMatchError(str(query), e, [attempt]) from e

        logger.info("Found album via %s for %s", provider.name, query)
        return result

    async def lookup_movie(
        self,
        title: str,
        director: str | None = None,
        year: int | None = None,
        timeout: float | None = None,
    ) -> MovieMetadata:
        """Resolve movie metadata from a title.

        Raises:
            NoMatchError: No movie provider, or it found nothing.
            LookupCancelledError: The deadline expired.
        """
        query = MovieQuery(title, director, year)
        if self._movie_provider is None:
            raise NoMatchError(str(query))

        provider = self._movie_provider
        deadline = self._deadline(timeout)
        try:
            async with asyncio.timeout(deadline):
                result = await provider.search_movie(title, director, year)
        except TimeoutError as e:
            raise LookupCancelledError(f"movie lookup for {query} exceeded {deadline}s") from e
        except ProviderError as e:
            attempt = LookupAttempt(provider.name, query, _outcome_for(e), e)
            raise NoMatchError(str(query), e, [attempt]) from e

        logger.info("Found movie via %s for %s", provider.name, query)
        return result

    async def lookup_movie_by_barcode(
        self, barcode: str, timeout: float | None = None
    ) -> MovieMetadata:
        """Movie lookup by barcode has no backing catalog.

        Always raises rather than guessing from the barcode.

        Raises:
            LookupNotImplementedError: Always.
        """
        raise LookupNotImplementedError(f"movie barcode lookup not implemented (barcode {barcode})")
