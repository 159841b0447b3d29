# ragsync/vector_db/factory.py
from __future__ import annotations

import os

from ragsync.config.schema import VectorDBConfig
from ragsync.logging.logger import get_logger
from ragsync.logging.tags import VECTOR_DB

from .base import VectorStore

logger = get_logger(__name__)


def create_vector_store(config: VectorDBConfig) -> VectorStore:
    """Build the store named by config.plugin."""
    if config.plugin == "memory":
        from .memory import InMemoryVectorStore

        store: VectorStore = InMemoryVectorStore()
    elif config.plugin == "local":
        from .local import LocalVectorStore

        store = LocalVectorStore(path=config.path)
    else:
        from .qdrant import QdrantVectorStore

        api_key = os.getenv(config.api_key_env) if config.api_key_env else None
        store = QdrantVectorStore(url=config.url, api_key=api_key, timeout=config.timeout)

    logger.info(f"{VECTOR_DB} Using {config.plugin} vector store")
    return store


__all__ = ["create_vector_store"]
