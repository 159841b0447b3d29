# ragsync/ingestion/cache/__init__.py
"""Persisted per-file fingerprint cache."""

from .manager import FileChangeCache
from .schema import FileCacheEntry, FileCacheState

__all__ = ["FileChangeCache", "FileCacheEntry", "FileCacheState"]
