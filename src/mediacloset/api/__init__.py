"""HTTP clients for the upstream metadata catalogs."""

from mediacloset.api.providers import (
    AlbumProvider,
    CoverArtResolver,
    DiscogsProvider,
    ITunesProvider,
    MusicBrainzProvider,
    OmdbProvider,
)

__all__ = [
    "AlbumProvider",
    "CoverArtResolver",
    "DiscogsProvider",
    "ITunesProvider",
    "MusicBrainzProvider",
    "OmdbProvider",
]
