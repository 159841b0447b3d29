# ragsync/vector_db/qdrant.py
"""
Qdrant vector store.

Qdrant point ids must be unsigned integers or UUIDs, so each chunk id is
mapped to a deterministic UUID (first 16 bytes of its SHA-256) and the
original chunk id is kept in the payload.

Payload layout:
    chunk_id   - the content-addressed chunk id
    document   - chunk text
    <metadata> - flat metadata keys, including "source"
"""

from __future__ import annotations

import hashlib
import warnings
from typing import Any, Dict, List, Optional
from uuid import UUID

from qdrant_client import QdrantClient
from qdrant_client.models import (
    Distance,
    FieldCondition,
    Filter,
    MatchValue,
    PayloadSchemaType,
    PointIdsList,
    PointStruct,
    VectorParams,
)

from ragsync.core.exceptions import StoreError, StoreUnavailableError
from ragsync.logging.logger import get_logger
from ragsync.logging.tags import VECTOR_DB

from .base import StoredRecord, batched

logger = get_logger(__name__)

CHUNK_ID_KEY = "chunk_id"
DOCUMENT_KEY = "document"
RESERVED_KEYS = (CHUNK_ID_KEY, DOCUMENT_KEY)
SCROLL_PAGE_SIZE = 256
WRITE_BATCH_SIZE = 256


def chunk_id_to_point_id(chunk_id: str) -> str:
    """Deterministic UUID string for a chunk id."""
    return str(UUID(bytes=hashlib.sha256(chunk_id.encode("utf-8")).digest()[:16]))


class QdrantVectorStore:
    """
    Usage:
        store = QdrantVectorStore(url="http://localhost:6333")
        store.check_connection()
    """

    def __init__(
        self,
        url: str = "http://localhost:6333",
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        client: Optional[QdrantClient] = None,
    ) -> None:
        if client is None:
            # qdrant-client warns about api keys over http; keep it to this call
            with warnings.catch_warnings():
                warnings.simplefilter("ignore")
                client = QdrantClient(url=url, api_key=api_key, timeout=int(timeout))
        self.client = client
        self.url = url
        self._known_collections: set[str] = set()

    def check_connection(self) -> None:
        """
        Raises:
            StoreUnavailableError: If Qdrant cannot be reached
        """
        try:
            self.client.get_collections()
        except Exception as e:
            raise StoreUnavailableError(f"Qdrant at {self.url} is unavailable: {e}") from e

    def _exists(self, collection: str) -> bool:
        if collection in self._known_collections:
            return True
        if self.client.collection_exists(collection_name=collection):
            self._known_collections.add(collection)
            return True
        return False

    def ensure_collection(self, collection: str, dimension: Optional[int] = None) -> None:
        if self._exists(collection):
            return
        if dimension is None:
            raise StoreError(f"Cannot create collection {collection} without a vector dimension")

        self.client.create_collection(
            collection_name=collection,
            vectors_config=VectorParams(size=dimension, distance=Distance.COSINE),
        )
        self.client.create_payload_index(
            collection_name=collection,
            field_name="source",
            field_schema=PayloadSchemaType.KEYWORD,
        )
        self._known_collections.add(collection)
        logger.info(f"{VECTOR_DB} Created collection {collection} (dim={dimension}, cosine)")

    def list_collections(self) -> List[str]:
        return sorted(c.name for c in self.client.get_collections().collections)

    @staticmethod
    def _to_record(point: Any) -> StoredRecord:
        payload = dict(point.payload or {})
        chunk_id = payload.pop(CHUNK_ID_KEY, str(point.id))
        document = payload.pop(DOCUMENT_KEY, "")

        vector = point.vector
        if isinstance(vector, dict):
            vector = next(iter(vector.values()), None)

        return StoredRecord(
            id=chunk_id,
            vector=list(vector) if vector else None,
            document=document,
            metadata=payload,
        )

    def get_by_ids(
        self, collection: str, ids: List[str], include_embeddings: bool = False
    ) -> Dict[str, StoredRecord]:
        if not ids or not self._exists(collection):
            return {}

        points = self.client.retrieve(
            collection_name=collection,
            ids=[chunk_id_to_point_id(i) for i in ids],
            with_payload=True,
            with_vectors=include_embeddings,
        )

        found: Dict[str, StoredRecord] = {}
        for point in points:
            record = self._to_record(point)
            found[record.id] = record
        return found

    def get_by_source(self, collection: str, source: str) -> List[StoredRecord]:
        if not self._exists(collection):
            return []

        source_filter = Filter(must=[FieldCondition(key="source", match=MatchValue(value=source))])
        records: List[StoredRecord] = []
        offset = None

        while True:
            points, offset = self.client.scroll(
                collection_name=collection,
                scroll_filter=source_filter,
                limit=SCROLL_PAGE_SIZE,
                offset=offset,
                with_payload=True,
                with_vectors=False,
            )
            records.extend(self._to_record(p) for p in points)
            if offset is None:
                break

        return records

    def upsert(self, collection: str, records: List[StoredRecord]) -> None:
        if not records:
            return

        self.ensure_collection(collection, len(records[0].vector or []))

        points = []
        for record in records:
            payload = {
                k: v for k, v in record.metadata.items() if k not in RESERVED_KEYS
            }
            payload[CHUNK_ID_KEY] = record.id
            payload[DOCUMENT_KEY] = record.document
            points.append(
                PointStruct(
                    id=chunk_id_to_point_id(record.id),
                    vector=list(record.vector or []),
                    payload=payload,
                )
            )

        try:
            for batch in batched(points, WRITE_BATCH_SIZE):
                self.client.upsert(collection_name=collection, points=batch, wait=True)
        except Exception as e:
            raise StoreError(f"Upsert into {collection} failed: {e}") from e

        logger.debug(f"{VECTOR_DB} Upserted {len(points)} points into {collection}")

    def delete(self, collection: str, ids: List[str]) -> int:
        if not ids or not self._exists(collection):
            return 0

        point_ids = [chunk_id_to_point_id(i) for i in ids]
        try:
            for batch in batched(point_ids, WRITE_BATCH_SIZE):
                self.client.delete(
                    collection_name=collection,
                    points_selector=PointIdsList(points=batch),
                    wait=True,
                )
        except Exception as e:
            raise StoreError(f"Delete from {collection} failed: {e}") from e

        logger.debug(f"{VECTOR_DB} Deleted {len(ids)} points from {collection}")
        return len(ids)

    def count(self, collection: str) -> int:
        if not self._exists(collection):
            return 0
        return self.client.count(collection_name=collection, exact=True).count


__all__ = ["QdrantVectorStore", "chunk_id_to_point_id"]
