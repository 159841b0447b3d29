# ragsync/core/__init__.py
"""
Core contracts shared across ragsync: the Chunk model, errors,
configuration loading, paths and the HTTP client factory.
"""

from ragsync.core.chunk import Chunk
from ragsync.core.exceptions import (
    CacheError,
    ChunkingError,
    EmbeddingError,
    MetadataError,
    RagSyncError,
    StoreError,
    StoreUnavailableError,
)
from ragsync.core.paths import SyncPaths

__all__ = [
    "Chunk",
    "RagSyncError",
    "CacheError",
    "ChunkingError",
    "EmbeddingError",
    "MetadataError",
    "StoreError",
    "StoreUnavailableError",
    "SyncPaths",
]
