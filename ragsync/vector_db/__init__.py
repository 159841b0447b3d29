# ragsync/vector_db/__init__.py
"""
Vector store backends.

QdrantVectorStore is imported lazily by create_vector_store so that the
memory and local stores do not need a Qdrant client at import time.
"""

from .base import StoredRecord, VectorStore, flatten_metadata
from .factory import create_vector_store
from .local import LocalVectorStore
from .memory import InMemoryVectorStore

__all__ = [
    "StoredRecord",
    "VectorStore",
    "flatten_metadata",
    "create_vector_store",
    "InMemoryVectorStore",
    "LocalVectorStore",
]
