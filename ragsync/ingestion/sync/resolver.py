# ragsync/ingestion/sync/resolver.py
"""
Chunk-level diff against the vector store.

Given the current chunks of one source file, the resolver decides:
- which chunks are already stored with a usable vector (reusable)
- which chunks must be embedded (needs_embedding)
- which stored records of this source no longer correspond to any
  current chunk (stale_ids)

Lookups go through batched point reads by id, never a full scan. If a
lookup fails the resolver degrades to "nothing is stored yet" unless
fail_on_lookup_error is set.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from ragsync.core.chunk import Chunk
from ragsync.core.exceptions import StoreError
from ragsync.ingestion.hashing import DEFAULT_ID_BATCH_SIZE, compute_chunk_ids
from ragsync.logging.logger import get_logger
from ragsync.logging.tags import SYNC
from ragsync.vector_db.base import StoredRecord, VectorStore, batched

logger = get_logger(__name__)

DEFAULT_LOOKUP_BATCH_SIZE = 100


@dataclass(frozen=True)
class PendingChunk:
    """A chunk that has to be embedded."""

    chunk_id: str
    chunk: Chunk


@dataclass(frozen=True)
class ReusableChunk:
    """A chunk whose stored vector can be reused as-is."""

    chunk_id: str
    chunk: Chunk
    vector: List[float]


@dataclass
class ChunkDiff:
    """
    Result of diffing one source's chunks against the store.

    ids is aligned with the input chunk list. Chunks with identical text
    share an id and appear once across needs_embedding and reusable.
    """

    source: str
    ids: List[str] = field(default_factory=list)
    needs_embedding: List[PendingChunk] = field(default_factory=list)
    reusable: List[ReusableChunk] = field(default_factory=list)
    stale_ids: List[str] = field(default_factory=list)
    lookup_failed: bool = False

    @property
    def current_ids(self) -> List[str]:
        """Distinct current ids in first-seen order."""
        return list(dict.fromkeys(self.ids))


class ChunkDiffResolver:
    """
    Usage:
        resolver = ChunkDiffResolver(store, "documents")
        diff = resolver.resolve("docs/a.md", chunks)
    """

    def __init__(
        self,
        store: VectorStore,
        collection: str,
        id_batch_size: int = DEFAULT_ID_BATCH_SIZE,
        lookup_batch_size: int = DEFAULT_LOOKUP_BATCH_SIZE,
        fail_on_lookup_error: bool = False,
        max_workers: Optional[int] = None,
    ) -> None:
        if lookup_batch_size <= 0:
            raise ValueError("lookup_batch_size must be positive")

        self.store = store
        self.collection = collection
        self.id_batch_size = id_batch_size
        self.lookup_batch_size = lookup_batch_size
        self.fail_on_lookup_error = fail_on_lookup_error
        self.max_workers = max_workers

    def resolve(self, source: str, chunks: Sequence[Chunk]) -> ChunkDiff:
        ids = compute_chunk_ids(
            [c.content for c in chunks],
            source,
            batch_size=self.id_batch_size,
            max_workers=self.max_workers,
        )
        diff = ChunkDiff(source=source, ids=ids)

        unique: Dict[str, Chunk] = {}
        for chunk_id, chunk in zip(ids, chunks):
            unique.setdefault(chunk_id, chunk)

        existing = self._lookup_existing(source, list(unique), diff)

        for chunk_id, chunk in unique.items():
            record = existing.get(chunk_id)
            if record is not None and record.has_vector:
                diff.reusable.append(ReusableChunk(chunk_id, chunk, list(record.vector)))
            else:
                diff.needs_embedding.append(PendingChunk(chunk_id, chunk))

        diff.stale_ids = self._find_stale(source, set(unique), diff)

        logger.debug(
            f"{SYNC} {source}: {len(diff.reusable)} reusable, "
            f"{len(diff.needs_embedding)} to embed, {len(diff.stale_ids)} stale"
        )
        return diff

    def _lookup_existing(
        self, source: str, ids: List[str], diff: ChunkDiff
    ) -> Dict[str, StoredRecord]:
        existing: Dict[str, StoredRecord] = {}
        try:
            for batch in batched(ids, self.lookup_batch_size):
                existing.update(
                    self.store.get_by_ids(self.collection, batch, include_embeddings=True)
                )
        except Exception as e:
            self._lookup_failed(source, "id lookup", e, diff)
            return {}
        return existing

    def _find_stale(self, source: str, current: set, diff: ChunkDiff) -> List[str]:
        if diff.lookup_failed:
            return []

        try:
            stored = self.store.get_by_source(self.collection, source)
        except Exception as e:
            self._lookup_failed(source, "source lookup", e, diff)
            return []

        stale = [r.id for r in stored if r.id not in current]
        return list(dict.fromkeys(stale))

    def _lookup_failed(self, source: str, what: str, error: Exception, diff: ChunkDiff) -> None:
        if self.fail_on_lookup_error:
            raise StoreError(f"Store {what} failed for {source}: {error}") from error

        diff.lookup_failed = True
        logger.warning(
            f"{SYNC} Store {what} failed for {source}, treating all chunks as new: {error}"
        )


__all__ = [
    "ChunkDiff",
    "ChunkDiffResolver",
    "PendingChunk",
    "ReusableChunk",
    "DEFAULT_LOOKUP_BATCH_SIZE",
]
