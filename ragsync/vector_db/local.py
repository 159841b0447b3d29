# ragsync/vector_db/local.py
"""
File-backed vector store.

Storage layout per collection:
    {path}/{collection}/vectors-{generation}.npy  - float32 matrix, one row per record
    {path}/{collection}/records.json              - ids, documents and metadata, same
                                                    row order, plus the name of the
                                                    vectors file they belong to

Collections are loaded on first use and rewritten after every mutation.
A save writes a new vectors file first, then replaces records.json in one
step. records.json is the commit point: until it is replaced, readers see
the previous generation intact. Older vectors files are removed afterwards.

A collection that fails to load is not marked as loaded. Every later call
retries the load and raises, so a write can never replace records that
were not read.
"""

from __future__ import annotations

import json
import os
import uuid
from pathlib import Path
from typing import Dict, List, Optional, Set

import numpy as np

from ragsync.core.exceptions import StoreError, StoreUnavailableError
from ragsync.core.paths import SyncPaths
from ragsync.logging.logger import get_logger
from ragsync.logging.tags import VECTOR_DB

from .base import StoredRecord
from .memory import InMemoryVectorStore

logger = get_logger(__name__)

RECORDS_FILE = "records.json"
VECTORS_PREFIX = "vectors-"
VECTORS_SUFFIX = ".npy"


def _vectors_name(generation: str) -> str:
    return f"{VECTORS_PREFIX}{generation}{VECTORS_SUFFIX}"


class LocalVectorStore(InMemoryVectorStore):
    """
    Usage:
        store = LocalVectorStore(path=".ragsync/vector_db")
        store.upsert("docs", records)
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        super().__init__()
        self.path = Path(path) if path is not None else SyncPaths.vector_db()
        self._loaded: Set[str] = set()

    def check_connection(self) -> None:
        try:
            self.path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreUnavailableError(f"Cannot create local vector store at {self.path}: {e}") from e

    def _collection_dir(self, collection: str) -> Path:
        return self.path / collection

    def _load(self, collection: str) -> None:
        if collection in self._loaded:
            return

        directory = self._collection_dir(collection)
        records_path = directory / RECORDS_FILE
        if not records_path.exists():
            self._loaded.add(collection)
            return

        try:
            with records_path.open("r", encoding="utf-8") as f:
                manifest = json.load(f)
            rows = manifest["records"]
            vectors = np.load(str(directory / manifest["vectors"]))
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise StoreError(f"Failed to load collection {collection}: {e}") from e

        if vectors.ndim != 2 or len(vectors) != len(rows):
            raise StoreError(
                f"Collection {collection} is inconsistent: "
                f"{len(rows)} records but {len(vectors)} vectors"
            )

        records: Dict[str, StoredRecord] = {}
        for i, row in enumerate(rows):
            records[row["id"]] = StoredRecord(
                id=row["id"],
                vector=vectors[i].tolist(),
                document=row.get("document", ""),
                metadata=row.get("metadata", {}),
            )

        self._collections[collection] = records
        if len(vectors):
            self._dimensions[collection] = int(vectors.shape[1])
        self._loaded.add(collection)
        logger.debug(f"{VECTOR_DB} Loaded {len(records)} records for {collection}")

    def _save(self, collection: str) -> None:
        records = list(self._collections.get(collection, {}).values())
        directory = self._collection_dir(collection)
        directory.mkdir(parents=True, exist_ok=True)

        dim = self._dimensions.get(collection, 0)
        if records:
            vectors = np.asarray([r.vector for r in records], dtype=np.float32)
        else:
            vectors = np.zeros((0, dim), dtype=np.float32)

        vectors_name = _vectors_name(uuid.uuid4().hex[:12])
        manifest = {
            "vectors": vectors_name,
            "records": [
                {"id": r.id, "document": r.document, "metadata": r.metadata} for r in records
            ],
        }

        vectors_path = directory / vectors_name
        records_tmp = directory / (RECORDS_FILE + ".tmp")
        try:
            with vectors_path.open("wb") as f:
                np.save(f, vectors)
                f.flush()
                os.fsync(f.fileno())
            with records_tmp.open("w", encoding="utf-8") as f:
                json.dump(manifest, f)
                f.flush()
                os.fsync(f.fileno())
            records_tmp.replace(directory / RECORDS_FILE)
        except OSError as e:
            for leftover in (vectors_path, records_tmp):
                if leftover.exists():
                    leftover.unlink()
            raise StoreError(f"Failed to save collection {collection}: {e}") from e

        for old in directory.glob(f"{VECTORS_PREFIX}*{VECTORS_SUFFIX}"):
            if old.name != vectors_name:
                try:
                    old.unlink()
                except OSError as e:
                    logger.warning(f"{VECTOR_DB} Could not remove old vectors file {old}: {e}")

    def ensure_collection(self, collection: str, dimension: Optional[int] = None) -> None:
        self._load(collection)
        super().ensure_collection(collection, dimension)

    def list_collections(self) -> List[str]:
        on_disk = set()
        if self.path.exists():
            on_disk = {p.name for p in self.path.iterdir() if (p / RECORDS_FILE).exists()}
        return sorted(on_disk | set(self._collections))

    def get_by_ids(
        self, collection: str, ids: List[str], include_embeddings: bool = False
    ) -> Dict[str, StoredRecord]:
        self._load(collection)
        return super().get_by_ids(collection, ids, include_embeddings)

    def get_by_source(self, collection: str, source: str) -> List[StoredRecord]:
        self._load(collection)
        return super().get_by_source(collection, source)

    def upsert(self, collection: str, records: List[StoredRecord]) -> None:
        if not records:
            return
        self._load(collection)
        super().upsert(collection, records)
        self._save(collection)

    def delete(self, collection: str, ids: List[str]) -> int:
        if not ids:
            return 0
        self._load(collection)
        removed = super().delete(collection, ids)
        if removed:
            self._save(collection)
        return removed

    def count(self, collection: str) -> int:
        self._load(collection)
        return super().count(collection)


__all__ = ["LocalVectorStore"]
