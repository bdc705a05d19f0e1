"""Shared base models and the indexer error hierarchy."""

from .base import ExplorerModel, StrictBaseModel
from .exceptions import (
    DecodeError,
    FetchError,
    IndexerError,
    InsufficientDataError,
    StorageError,
)

__all__ = [
    "DecodeError",
    "ExplorerModel",
    "FetchError",
    "IndexerError",
    "InsufficientDataError",
    "StorageError",
    "StrictBaseModel",
]
