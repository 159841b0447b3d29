# ragsync/ingestion/cache/schema.py
"""
Schema for the persisted file change cache (.ragsync/file_cache.json).

The cache is a speed-up, not a source of truth: the vector store is
authoritative. An entry only exists for a path whose last sync run
completed successfully.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field

CACHE_SCHEMA_VERSION = 1


class FileCacheEntry(BaseModel):
    """Per-file entry, keyed by source path."""

    model_config = ConfigDict(extra="forbid")

    fingerprint: str = Field(..., description="SHA-256 of the whole file content (sha256:...)")
    last_processed: datetime = Field(
        default_factory=datetime.utcnow, description="When the file last synced successfully"
    )
    chunk_count: int = Field(..., ge=0, description="Chunks indexed for the file at that time")


class FileCacheState(BaseModel):
    """Root model of file_cache.json."""

    model_config = ConfigDict(extra="forbid")

    schema_version: int = Field(default=CACHE_SCHEMA_VERSION)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
    files: Dict[str, FileCacheEntry] = Field(default_factory=dict)


__all__ = ["CACHE_SCHEMA_VERSION", "FileCacheEntry", "FileCacheState"]
