"""Catalog providers with a shared metadata shape.

Album barcode lookups, in order of reliability for music data:
1. Discogs - best music database, needs credentials
2. iTunes Search API - no auth required
3. MusicBrainz + Cover Art Archive - comprehensive, weak barcode support

Movie title lookups use OMDb.
"""

from mediacloset.api.providers.provider import (
    REQUEST_TIMEOUT,
    USER_AGENT,
    AlbumProvider,
    MetadataLookupError,
    NoResultsError,
    ProviderError,
    ProviderNotConfiguredError,
    ProviderTransientError,
    get_json,
)
from mediacloset.api.providers.types import ResponseFormatError
from mediacloset.api.providers.cover_art import CoverArtResolver
from mediacloset.api.providers.discogs import DiscogsProvider
from mediacloset.api.providers.itunes import ITunesProvider
from mediacloset.api.providers.musicbrainz import MusicBrainzProvider
from mediacloset.api.providers.omdb import OmdbProvider

__all__ = [
    "REQUEST_TIMEOUT",
    "USER_AGENT",
    "AlbumProvider",
    "CoverArtResolver",
    "DiscogsProvider",
    "ITunesProvider",
    "MetadataLookupError",
    "MusicBrainzProvider",
    "NoResultsError",
    "OmdbProvider",
    "ProviderError",
    "ProviderNotConfiguredError",
    "ProviderTransientError",
    "ResponseFormatError",
    "get_json",
]
