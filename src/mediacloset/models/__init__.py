"""Data models for normalized album and movie metadata."""

from mediacloset.models.album import AlbumMetadata
from mediacloset.models.movie import MovieMetadata
from mediacloset.models.query import (
    AlbumTitleQuery,
    BarcodeQuery,
    MovieQuery,
    ProviderQuery,
)

__all__ = [
    "AlbumMetadata",
    "MovieMetadata",
    "AlbumTitleQuery",
    "BarcodeQuery",
    "MovieQuery",
    "ProviderQuery",
]
