# ragsync/vector_db/memory.py
"""
In-process vector store.

Holds records in dicts and records every mutating call, which makes it
the store of choice for tests that assert exactly what was upserted and
deleted.
"""

from __future__ import annotations

import copy
from typing import Dict, List, Optional

from ragsync.core.exceptions import StoreError
from ragsync.logging.logger import get_logger
from ragsync.logging.tags import VECTOR_DB

from .base import StoredRecord

logger = get_logger(__name__)


class InMemoryVectorStore:
    def __init__(self) -> None:
        self._collections: Dict[str, Dict[str, StoredRecord]] = {}
        self._dimensions: Dict[str, int] = {}
        self.upsert_calls: List[List[str]] = []
        self.delete_calls: List[List[str]] = []
        self.lookup_calls: List[List[str]] = []

    def check_connection(self) -> None:
        return None

    def ensure_collection(self, collection: str, dimension: Optional[int] = None) -> None:
        self._collections.setdefault(collection, {})
        if dimension is not None:
            self._dimensions.setdefault(collection, dimension)

    def list_collections(self) -> List[str]:
        return sorted(self._collections)

    def get_by_ids(
        self, collection: str, ids: List[str], include_embeddings: bool = False
    ) -> Dict[str, StoredRecord]:
        self.lookup_calls.append(list(ids))
        records = self._collections.get(collection, {})

        found: Dict[str, StoredRecord] = {}
        for id_ in ids:
            record = records.get(id_)
            if record is None:
                continue
            found[id_] = StoredRecord(
                id=record.id,
                vector=list(record.vector) if include_embeddings and record.vector else None,
                document=record.document,
                metadata=dict(record.metadata),
            )
        return found

    def get_by_source(self, collection: str, source: str) -> List[StoredRecord]:
        records = self._collections.get(collection, {})
        return [
            StoredRecord(id=r.id, vector=None, document=r.document, metadata=dict(r.metadata))
            for r in records.values()
            if r.metadata.get("source") == source
        ]

    def upsert(self, collection: str, records: List[StoredRecord]) -> None:
        if not records:
            return

        dim = self._dimensions.get(collection)
        for record in records:
            if not record.has_vector:
                raise StoreError(f"Record {record.id} has no vector")
            if dim is None:
                dim = len(record.vector)
            elif len(record.vector) != dim:
                raise StoreError(
                    f"Dimension mismatch for {record.id}: expected {dim}, got {len(record.vector)}"
                )

        self.ensure_collection(collection, dim)
        target = self._collections[collection]
        for record in records:
            target[record.id] = copy.deepcopy(record)

        self.upsert_calls.append([r.id for r in records])
        logger.debug(f"{VECTOR_DB} Upserted {len(records)} records into {collection}")

    def delete(self, collection: str, ids: List[str]) -> int:
        if not ids:
            return 0

        records = self._collections.get(collection, {})
        removed = 0
        for id_ in ids:
            if records.pop(id_, None) is not None:
                removed += 1

        self.delete_calls.append(list(ids))
        logger.debug(f"{VECTOR_DB} Deleted {removed} records from {collection}")
        return removed

    def count(self, collection: str) -> int:
        return len(self._collections.get(collection, {}))

    def all_ids(self, collection: str) -> List[str]:
        return sorted(self._collections.get(collection, {}))


__all__ = ["InMemoryVectorStore"]
