# ragsync/ingestion/sync/reconciler.py
"""
Applies a chunk diff to the vector store.

Order of operations for one source:
1. Nothing new and nothing stale -> no store call at all
2. Upsert freshly embedded records
3. Delete stale ids

Upsert always runs before delete, so a crash in between leaves extra
records behind but never loses current ones.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

from ragsync.core.chunk import Chunk
from ragsync.logging.logger import get_logger
from ragsync.logging.tags import SYNC
from ragsync.vector_db.base import StoredRecord, VectorStore, flatten_metadata

logger = get_logger(__name__)


@dataclass(frozen=True)
class EmbeddedChunk:
    """A chunk paired with its vector, fresh or reused."""

    chunk_id: str
    chunk: Chunk
    vector: List[float]
    reused: bool = False

    def to_record(self) -> StoredRecord:
        metadata = dict(self.chunk.metadata)
        metadata["source"] = self.chunk.source
        return StoredRecord(
            id=self.chunk_id,
            vector=list(self.vector),
            document=self.chunk.content,
            metadata=flatten_metadata(metadata),
        )


@dataclass
class ReconcileResult:
    ids: List[str] = field(default_factory=list)
    upserted: List[str] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)

    @property
    def touched_store(self) -> bool:
        return bool(self.upserted or self.deleted)


class StoreReconciler:
    def __init__(self, store: VectorStore) -> None:
        self.store = store

    def reconcile(
        self,
        collection: str,
        embedded: Sequence[EmbeddedChunk],
        stale_ids: Sequence[str],
    ) -> ReconcileResult:
        """
        Bring the store's records for one source in line with embedded.

        Reused chunks are already stored under the same id with the same
        content, so only fresh ones are written.

        Returns:
            ReconcileResult whose ids are all ids now current for the source
        """
        current = list(dict.fromkeys(e.chunk_id for e in embedded))
        fresh = [e for e in embedded if not e.reused]
        current_set = set(current)
        stale = [i for i in dict.fromkeys(stale_ids) if i not in current_set]

        result = ReconcileResult(ids=current)

        if not fresh and not stale:
            logger.debug(f"{SYNC} Store already current, skipping writes")
            return result

        if fresh:
            # Build every record first so metadata errors surface before any write
            records = [e.to_record() for e in fresh]
            self.store.upsert(collection, records)
            result.upserted = [r.id for r in records]

        if stale:
            self.store.delete(collection, stale)
            result.deleted = stale

        logger.info(
            f"{SYNC} Reconciled {collection}: {len(result.upserted)} upserted, "
            f"{len(result.deleted)} deleted, {len(current)} current"
        )
        return result


__all__ = ["EmbeddedChunk", "ReconcileResult", "StoreReconciler"]
