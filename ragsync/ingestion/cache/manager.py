# ragsync/ingestion/cache/manager.py
"""
File change cache.

Decides whether a source file needs any work at all by comparing its
current content fingerprint with the one recorded after its last
successful sync.

Key responsibilities:
- Load the cache (missing or unreadable file means an empty cache)
- Answer has_changed / cached_chunk_count
- Persist the full mapping after every successful file

Key non-responsibilities:
- NO vector store access
- NO chunking or embedding
"""

from __future__ import annotations

import json
import os
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

from ragsync.core.exceptions import CacheError
from ragsync.core.paths import SyncPaths
from ragsync.logging.logger import get_logger
from ragsync.logging.tags import CACHE

from .schema import FileCacheEntry, FileCacheState

logger = get_logger(__name__)


class FileChangeCache:
    """
    Manages the persisted path -> FileCacheEntry mapping.

    Usage:
        cache = FileChangeCache()
        cache.load()

        if cache.has_changed(path, fingerprint):
            ...  # sync the file
            cache.record_success(path, fingerprint, chunk_count)
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        """
        Args:
            path: Location of the cache file. If None, uses SyncPaths.file_cache()
        """
        self._path = Path(path) if path is not None else SyncPaths.file_cache()
        self._state: Optional[FileCacheState] = None

    @property
    def path(self) -> Path:
        return self._path

    @property
    def state(self) -> FileCacheState:
        """Current state, loading if necessary."""
        if self._state is None:
            self.load()
        assert self._state is not None
        return self._state

    def load(self) -> Dict[str, FileCacheEntry]:
        """
        Load the cache from disk.

        Never raises: a missing, unreadable or invalid cache file yields
        an empty mapping, which makes the next run reprocess every file.
        """
        if not self._path.exists():
            logger.info(f"{CACHE} No file cache at {self._path}, starting empty")
            self._state = FileCacheState()
            return self.entries()

        try:
            with self._path.open("r", encoding="utf-8") as f:
                data = json.load(f)
            self._state = FileCacheState.model_validate(data)
            logger.debug(f"{CACHE} Loaded {len(self._state.files)} entries from {self._path}")
        except Exception as e:
            logger.warning(f"{CACHE} Failed to load file cache, starting empty: {e}")
            self._state = FileCacheState()

        return self.entries()

    def entries(self) -> Dict[str, FileCacheEntry]:
        """Copy of the current mapping."""
        return dict(self.state.files)

    def get(self, path: str) -> Optional[FileCacheEntry]:
        return self.state.files.get(str(path))

    def has_changed(self, path: str, fingerprint: str) -> bool:
        """True if there is no entry for path or its fingerprint differs."""
        entry = self.get(path)
        if entry is None:
            return True
        return entry.fingerprint != fingerprint

    def cached_chunk_count(self, path: str) -> Optional[int]:
        entry = self.get(path)
        return entry.chunk_count if entry is not None else None

    def record_success(self, path: str, fingerprint: str, chunk_count: int) -> None:
        """
        Create or overwrite the entry for path and persist the full mapping.

        The write is durable before this returns.

        Raises:
            CacheError: If the cache file cannot be written
        """
        self.state.files[str(path)] = FileCacheEntry(
            fingerprint=fingerprint,
            last_processed=datetime.utcnow(),
            chunk_count=chunk_count,
        )
        self._save()

    def clear(self) -> int:
        """Drop every entry. Returns the number removed."""
        count = len(self.state.files)
        self._state = FileCacheState()
        if self._path.exists():
            self._path.unlink()
        logger.info(f"{CACHE} Cleared {count} entries")
        return count

    def _save(self) -> None:
        state = self.state
        state.updated_at = datetime.utcnow()

        temp_path = self._path.with_suffix(".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with temp_path.open("w", encoding="utf-8") as f:
                json.dump(state.model_dump(mode="json"), f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            temp_path.replace(self._path)
        except OSError as e:
            if temp_path.exists():
                temp_path.unlink()
            raise CacheError(f"Failed to write file cache {self._path}: {e}") from e

        logger.debug(f"{CACHE} Saved {len(state.files)} entries to {self._path}")


__all__ = ["FileChangeCache"]
