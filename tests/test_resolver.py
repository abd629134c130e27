"""Tests for the ordered fallback resolver."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from conftest import make_client
from mediacloset.api.providers.discogs import DiscogsProvider
from mediacloset.api.providers.itunes import ITunesProvider
from mediacloset.api.providers.provider import (
    AlbumProvider,
    NoResultsError,
    ProviderError,
    ProviderNotConfiguredError,
    ProviderTransientError,
)
from mediacloset.core.resolver import (
    AttemptOutcome,
    LookupCancelledError,
    LookupNotImplementedError,
    NoMatchError,
    Resolver,
)
from mediacloset.models.album import AlbumMetadata
from mediacloset.models.movie import MovieMetadata


class MockProvider(AlbumProvider):
    """Mock provider for testing the fallback chain."""

    def __init__(
        self,
        name: str,
        results: dict[str, AlbumMetadata | ProviderError] | None = None,
        default: ProviderError | None = None,
        delay: float = 0.0,
    ) -> None:
        self._name = name
        self._results = results or {}
        self._default = default or NoResultsError(name, "no results")
        self._delay = delay
        self.calls: list[str] = []

    @property
    def name(self) -> str:
        return self._name

    async def lookup_by_barcode(self, barcode: str) -> AlbumMetadata:
        self.calls.append(barcode)
        if self._delay:
            await asyncio.sleep(self._delay)
        outcome = self._results.get(barcode, self._default)
        if isinstance(outcome, ProviderError):
            raise outcome
        return outcome


class TestLookupAlbum:
    """Tests for barcode resolution."""

    @pytest.mark.asyncio
    async def test_first_success_stops(self, album: AlbumMetadata) -> None:
        """Test later providers are not called after a success."""
        p1 = MockProvider("A", {"724384260651": album})
        p2 = MockProvider("B")

        result = await Resolver([p1, p2]).lookup_album("724384260651")

        assert result == album
        assert p1.calls == ["724384260651"]
        assert p2.calls == []  # Never called

    @pytest.mark.asyncio
    async def test_original_then_cleaned(self, album: AlbumMetadata) -> None:
        """Test the original barcode is tried before the cleaned one."""
        p1 = MockProvider("A", {"724384260651": album})

        result = await Resolver([p1]).lookup_album("0724384260651")

        assert result == album
        assert p1.calls == ["0724384260651", "724384260651"]

    @pytest.mark.asyncio
    async def test_provider_order(self, album: AlbumMetadata) -> None:
        """Test each provider gets both forms before the next provider."""
        p1 = MockProvider("A")
        p2 = MockProvider("B", {"724384260651": album})
        p3 = MockProvider("C")

        await Resolver([p1, p2, p3]).lookup_album("0724384260651")

        assert p1.calls == ["0724384260651", "724384260651"]
        assert p2.calls == ["0724384260651", "724384260651"]
        assert p3.calls == []

    @pytest.mark.asyncio
    async def test_not_configured_skips_provider(self, album: AlbumMetadata) -> None:
        """Test an unconfigured provider is not retried with the cleaned form."""
        p1 = MockProvider("A", default=ProviderNotConfiguredError("A", "no credentials"))
        p2 = MockProvider("B", {"0724384260651": album})

        result = await Resolver([p1, p2]).lookup_album("0724384260651")

        assert result == album
        assert p1.calls == ["0724384260651"]

    @pytest.mark.asyncio
    async def test_transient_error_tries_cleaned_form(self, album: AlbumMetadata) -> None:
        """Test a failed call moves on to the cleaned barcode."""
        p1 = MockProvider(
            "A",
            {
                "0724384260651": ProviderTransientError("A", "unexpected status code 503"),
                "724384260651": album,
            },
        )

        assert await Resolver([p1]).lookup_album("0724384260651") == album

    @pytest.mark.asyncio
    async def test_exhaustion_surfaces_last_error(self) -> None:
        """Test the most recent provider error is attached to NoMatchError."""
        last = ProviderTransientError("C", "request timed out after 5.0s")
        p1 = MockProvider("A", default=ProviderNotConfiguredError("A", "no credentials"))
        p2 = MockProvider("B")
        p3 = MockProvider("C", {"724384260651": last}, default=NoResultsError("C", "none"))

        with pytest.raises(NoMatchError) as exc_info:
            await Resolver([p1, p2, p3]).lookup_album("0724384260651")

        error = exc_info.value
        assert error.last_error is last
        assert "timed out" in str(error)
        assert [a.provider for a in error.attempts] == ["A", "B", "B", "C", "C"]
        assert [a.outcome for a in error.attempts] == [
            AttemptOutcome.NOT_CONFIGURED,
            AttemptOutcome.NO_RESULTS,
            AttemptOutcome.NO_RESULTS,
            AttemptOutcome.NO_RESULTS,
            AttemptOutcome.ERROR,
        ]

    @pytest.mark.asyncio
    async def test_only_unconfigured(self) -> None:
        """Test a lone unconfigured provider is reported as such."""
        p1 = MockProvider("A", default=ProviderNotConfiguredError("A", "no credentials"))

        with pytest.raises(NoMatchError) as exc_info:
            await Resolver([p1]).lookup_album("123")

        assert isinstance(exc_info.value.last_error, ProviderNotConfiguredError)

    @pytest.mark.asyncio
    async def test_no_providers(self) -> None:
        """Test an empty chain fails without a provider error."""
        with pytest.raises(NoMatchError) as exc_info:
            await Resolver([]).lookup_album("123")
        assert exc_info.value.last_error is None

    @pytest.mark.asyncio
    async def test_deadline_cancels_lookup(self) -> None:
        """Test an expired deadline raises LookupCancelledError."""
        slow = MockProvider("Slow", delay=10.0)
        never = MockProvider("Never")

        with pytest.raises(LookupCancelledError):
            await Resolver([slow, never]).lookup_album("123", timeout=0.05)

        assert never.calls == []

    @pytest.mark.asyncio
    async def test_default_deadline(self) -> None:
        """Test the resolver's own deadline applies when none is given."""
        slow = MockProvider("Slow", delay=10.0)

        with pytest.raises(LookupCancelledError):
            await Resolver([slow], lookup_timeout=0.05).lookup_album("123")

    @pytest.mark.asyncio
    async def test_caller_cancellation_propagates(self) -> None:
        """Test cancelling the calling task is not turned into a lookup error."""
        slow = MockProvider("Slow", delay=10.0)
        task = asyncio.create_task(Resolver([slow]).lookup_album("123"))
        await asyncio.sleep(0.01)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

    @pytest.mark.asyncio
    async def test_concurrent_lookups_independent(self, album: AlbumMetadata) -> None:
        """Test concurrent resolutions do not share attempt state."""
        other = AlbumMetadata(source="itunes", artist="Adele", album="25")
        p1 = MockProvider("A", {"111": album}, delay=0.01)
        p2 = MockProvider("B", {"222": other}, delay=0.01)
        resolver = Resolver([p1, p2])

        first, second = await asyncio.gather(
            resolver.lookup_album("111"), resolver.lookup_album("222")
        )

        assert first == album
        assert second == other


class TestTitleLookups:
    """Tests for title-based lookups."""

    @pytest.mark.asyncio
    async def test_album_by_title(self, album: AlbumMetadata) -> None:
        """Test album title lookup uses the title provider."""
        title_provider = MagicMock()
        title_provider.name = "MusicBrainz"
        title_provider.lookup_by_title = AsyncMock(return_value=album)

        result = await Resolver([], title_provider=title_provider).lookup_album_by_title(
            "Pink Floyd", "The Wall"
        )

        assert result == album
        title_provider.lookup_by_title.assert_awaited_once_with("Pink Floyd", "The Wall")

    @pytest.mark.asyncio
    async def test_album_by_title_no_results(self) -> None:
        """Test provider errors become NoMatchError with the cause attached."""
        cause = NoResultsError("MusicBrainz", "no releases found")
        title_provider = MagicMock()
        title_provider.name = "MusicBrainz"
        title_provider.lookup_by_title = AsyncMock(side_effect=cause)

        with pytest.raises(NoMatchError) as exc_info:
            await Resolver([], title_provider=title_provider).lookup_album_by_title("X", "Y")

        assert exc_info.value.last_error is cause
        assert exc_info.value.attempts[0].outcome is AttemptOutcome.NO_RESULTS

    @pytest.mark.asyncio
    async def test_album_by_title_without_provider(self) -> None:
        """Test a resolver without a title provider reports no match."""
        with pytest.raises(NoMatchError):
            await Resolver([]).lookup_album_by_title("X", "Y")

    @pytest.mark.asyncio
    async def test_movie(self) -> None:
        """Test movie lookup passes director and year through."""
        movie = MovieMetadata(title="Alien", source="omdb", year=1979)
        movie_provider = MagicMock()
        movie_provider.name = "OMDb"
        movie_provider.search_movie = AsyncMock(return_value=movie)

        result = await Resolver([], movie_provider=movie_provider).lookup_movie(
            "Alien", director="Ridley Scott", year=1979
        )

        assert result == movie
        movie_provider.search_movie.assert_awaited_once_with("Alien", "Ridley Scott", 1979)

    @pytest.mark.asyncio
    async def test_movie_not_configured(self) -> None:
        """Test a missing OMDb key surfaces as the last error."""
        movie_provider = MagicMock()
        movie_provider.name = "OMDb"
        movie_provider.search_movie = AsyncMock(
            side_effect=ProviderNotConfiguredError("OMDb", "API key not configured")
        )

        with pytest.raises(NoMatchError) as exc_info:
            await Resolver([], movie_provider=movie_provider).lookup_movie("Alien")

        assert isinstance(exc_info.value.last_error, ProviderNotConfiguredError)

    @pytest.mark.asyncio
    async def test_movie_deadline(self) -> None:
        """Test movie lookups honor the deadline."""

        async def slow(*args: object) -> MovieMetadata:
            await asyncio.sleep(10)
            return MovieMetadata(title="never", source="omdb")

        movie_provider = MagicMock()
        movie_provider.name = "OMDb"
        movie_provider.search_movie = slow

        with pytest.raises(LookupCancelledError):
            await Resolver([], movie_provider=movie_provider).lookup_movie("Alien", timeout=0.05)

    @pytest.mark.asyncio
    async def test_movie_by_barcode_not_implemented(self) -> None:
        """Test movie barcode lookup always reports not implemented."""
        with pytest.raises(LookupNotImplementedError) as exc_info:
            await Resolver([]).lookup_movie_by_barcode("085391163121")
        assert isinstance(exc_info.value, NotImplementedError)


class TestProviderChain:
    """Tests for the resolver over real provider clients."""

    @pytest.mark.asyncio
    async def test_odd_year_digits_do_not_abort(self) -> None:
        """Test superscript digits in upstream years still resolve the album."""

        def respond(request: httpx.Request) -> httpx.Response:
            if request.url.host == "api.discogs.com":
                return httpx.Response(
                    200, json={"results": [{"title": "Queen - Jazz", "year": "¹⁹⁷⁸"}]}
                )
            return httpx.Response(
                200,
                json={
                    "resultCount": 1,
                    "results": [{"artistName": "Queen", "releaseDate": "²⁰²⁰-01-01"}],
                },
            )

        async with make_client(respond) as client:
            discogs = await Resolver([DiscogsProvider(client, "k", "s")]).lookup_album("123")
            itunes = await Resolver([ITunesProvider(client)]).lookup_album("123")

        assert discogs.album == "Jazz"
        assert discogs.year is None
        assert itunes.artist == "Queen"
        assert itunes.year is None

    @pytest.mark.asyncio
    async def test_bad_body_moves_to_next_provider(self, album: AlbumMetadata) -> None:
        """Test a malformed body is recorded and the chain continues."""

        def respond(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"resultCount": "many"})

        async with make_client(respond) as client:
            itunes = ITunesProvider(client)
            fallback = MockProvider("B", {"123": album})
            result = await Resolver([itunes, fallback]).lookup_album("123")

        assert result == album
        assert fallback.calls == ["123"]
