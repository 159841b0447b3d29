# ragsync/vector_db/base.py
"""
Vector store contract used by the sync engine.

Every store keeps, per collection, a set of StoredRecords keyed by chunk
id. The sync engine only ever looks records up by id or by source, and
mutates them with upsert (insert or overwrite) and delete by id.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Protocol, runtime_checkable

from ragsync.core.exceptions import MetadataError

Scalar = (str, int, float, bool)


@dataclass
class StoredRecord:
    """One record as held by the store."""

    id: str
    vector: Optional[List[float]]
    document: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def source(self) -> Optional[str]:
        return self.metadata.get("source")

    @property
    def has_vector(self) -> bool:
        return self.vector is not None and len(self.vector) > 0


@runtime_checkable
class VectorStore(Protocol):
    """
    Store operations consumed by the sync engine.

    get_by_ids has partial-result semantics: ids that are not stored are
    simply absent from the returned mapping.
    """

    def check_connection(self) -> None: ...

    def ensure_collection(self, collection: str, dimension: Optional[int] = None) -> None: ...

    def get_by_ids(
        self, collection: str, ids: List[str], include_embeddings: bool = False
    ) -> Dict[str, StoredRecord]: ...

    def get_by_source(self, collection: str, source: str) -> List[StoredRecord]: ...

    def upsert(self, collection: str, records: List[StoredRecord]) -> None: ...

    def delete(self, collection: str, ids: List[str]) -> int: ...

    def count(self, collection: str) -> int: ...

    def list_collections(self) -> List[str]: ...


def flatten_metadata(metadata: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    """
    Flatten metadata to scalar values.

    Nested dicts become dotted keys ({"a": {"b": 1}} -> {"a.b": 1}).
    None values are dropped.

    Raises:
        MetadataError: For any other non-scalar value (lists, objects)
    """
    flat: Dict[str, Any] = {}

    for key, value in metadata.items():
        full_key = f"{prefix}{key}"
        if value is None:
            continue
        if isinstance(value, dict):
            flat.update(flatten_metadata(value, prefix=f"{full_key}."))
        elif isinstance(value, Scalar):
            flat[full_key] = value
        else:
            raise MetadataError(
                f"Metadata '{full_key}' has unsupported type {type(value).__name__}"
            )

    return flat


def batched(items: List[Any], size: int) -> Iterable[List[Any]]:
    for i in range(0, len(items), size):
        yield items[i : i + size]


__all__ = ["StoredRecord", "VectorStore", "flatten_metadata", "batched"]
