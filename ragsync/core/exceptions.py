# ragsync/core/exceptions.py
"""
Exception hierarchy for ragsync.

Collaborator failures are caught only where a safe degradation exists
(file cache load, chunk diff lookup). Everything else propagates to the
sync executor, which fails the current file and moves on.
"""

from __future__ import annotations


class RagSyncError(Exception):
    """Base class for all ragsync errors."""

    pass


class CacheError(RagSyncError):
    """The file change cache could not be persisted."""

    pass


class ChunkingError(RagSyncError):
    """A chunker failed or produced invalid output."""

    pass


class EmbeddingError(RagSyncError):
    """An embedder failed or returned vectors of the wrong shape."""

    pass


class MetadataError(RagSyncError):
    """Record metadata cannot be stored as flat scalar values."""

    pass


class StoreError(RagSyncError):
    """A vector store operation failed."""

    pass


class StoreUnavailableError(StoreError):
    """The vector store could not be reached before any file was processed."""

    pass


__all__ = [
    "RagSyncError",
    "CacheError",
    "ChunkingError",
    "EmbeddingError",
    "MetadataError",
    "StoreError",
    "StoreUnavailableError",
]
