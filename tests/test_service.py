"""Tests for service wiring and the end-to-end lookup chain."""

import httpx
import pytest

from conftest import make_client
from mediacloset.core.config import Settings
from mediacloset.core.rate_limit import MUSICBRAINZ_RATE_KEY
from mediacloset.core.resolver import NoMatchError
from mediacloset.service import MetadataService

MB_RELEASE = {
    "id": "rel-1",
    "title": "Ok Computer",
    "date": "1997-05-21",
    "country": "XE",
    "barcode": "724385522925",
    "artist-credit": [{"name": "Radiohead", "artist": {"name": "Radiohead"}}],
    "label-info": [{"label": {"name": "Parlophone"}}],
}


class CatalogHandler:
    """Fake upstream catalogs keyed by host."""

    def __init__(
        self, discogs_results: list[dict] | None = None, mb_releases: list[dict] | None = None
    ) -> None:
        self.discogs_results = discogs_results or []
        self.mb_releases = mb_releases or []
        self.hosts: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        host = request.url.host
        self.hosts.append(host)
        if host == "api.discogs.com":
            return httpx.Response(200, json={"results": self.discogs_results})
        if host == "itunes.apple.com":
            return httpx.Response(200, json={"resultCount": 0, "results": []})
        if host == "musicbrainz.org":
            return httpx.Response(200, json={"releases": self.mb_releases})
        if host == "coverartarchive.org" and request.url.path.endswith("/front"):
            return httpx.Response(200)
        return httpx.Response(404)


class TestMetadataService:
    """Tests for MetadataService construction."""

    @pytest.mark.asyncio
    async def test_provider_order(self) -> None:
        """Test providers are tried Discogs, iTunes, MusicBrainz."""
        async with MetadataService(Settings()) as service:
            names = [p.name for p in service.resolver.album_providers]
        assert names == ["Discogs", "iTunes", "MusicBrainz"]

    @pytest.mark.asyncio
    async def test_rate_limit_toggle(self) -> None:
        """Test ENABLE_RATE_LIMIT controls the MusicBrainz bucket."""
        async with MetadataService(Settings()) as limited:
            assert limited.governor.is_limited(MUSICBRAINZ_RATE_KEY) is True
        async with MetadataService(Settings(enable_rate_limit=False)) as unlimited:
            assert unlimited.governor.is_limited(MUSICBRAINZ_RATE_KEY) is False

    @pytest.mark.asyncio
    async def test_closes_own_client(self) -> None:
        """Test the service closes the client it created."""
        service = MetadataService(Settings())
        async with service:
            pass
        assert service._client.is_closed is True

    @pytest.mark.asyncio
    async def test_leaves_injected_client_open(self) -> None:
        """Test a caller-provided client is not closed."""
        client = make_client(CatalogHandler())
        async with MetadataService(Settings(), client=client):
            pass
        assert client.is_closed is False
        await client.aclose()


class TestEndToEnd:
    """Tests for full lookups against fake catalogs."""

    @pytest.mark.asyncio
    async def test_falls_through_to_musicbrainz(self) -> None:
        """Test an unconfigured Discogs and empty iTunes fall through to MusicBrainz."""
        handler = CatalogHandler(mb_releases=[MB_RELEASE])
        async with make_client(handler) as client:
            service = MetadataService(Settings(enable_rate_limit=False), client=client)
            album = await service.lookup_album("0724385522925")

        assert album.source == "musicbrainz"
        assert album.artist == "Radiohead"
        assert album.cover_url == "https://coverartarchive.org/release/rel-1/front"
        assert "api.discogs.com" not in handler.hosts
        assert handler.hosts[:3] == ["itunes.apple.com", "itunes.apple.com", "musicbrainz.org"]

    @pytest.mark.asyncio
    async def test_discogs_first_when_configured(self) -> None:
        """Test a configured Discogs answers before the other catalogs."""
        handler = CatalogHandler(discogs_results=[{"title": "Radiohead - OK Computer", "year": 1997}])
        settings = Settings(discogs_key="k", discogs_secret="s", enable_rate_limit=False)
        async with make_client(handler) as client:
            album = await MetadataService(settings, client=client).lookup_album("724385522925")

        assert album.source == "discogs"
        assert album.album == "OK Computer"
        assert handler.hosts == ["api.discogs.com"]

    @pytest.mark.asyncio
    async def test_nothing_found(self) -> None:
        """Test exhaustion reports the last provider's error."""
        handler = CatalogHandler()
        async with make_client(handler) as client:
            service = MetadataService(Settings(enable_rate_limit=False), client=client)
            with pytest.raises(NoMatchError) as exc_info:
                await service.lookup_album("724385522925")

        assert exc_info.value.last_error is not None
        assert exc_info.value.last_error.provider == "MusicBrainz"
