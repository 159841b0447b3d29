# ragsync/embedding/factory.py
from __future__ import annotations

from typing import Any

from ragsync.config.schema import EmbeddingConfig
from ragsync.logging.logger import get_logger
from ragsync.logging.tags import EMBEDDING

from .base import Embedder
from .hashing import HashEmbedder
from .http import HTTPEmbedder

logger = get_logger(__name__)


def create_embedder(config: EmbeddingConfig, **client_kwargs: Any) -> Embedder:
    """
    Build the embedder named by config.provider.

    Raises:
        EmbeddingError: If the provider cannot be configured (e.g. missing API key)
    """
    if config.provider == "hash":
        embedder: Embedder = HashEmbedder(dimension=config.dimension)
    else:
        embedder = HTTPEmbedder(
            model=config.model,
            base_url=config.base_url,
            api_key_env=config.api_key_env,
            batch_size=config.batch_size,
            max_workers=config.max_workers,
            timeout=config.timeout,
            rate_limit_retries=config.rate_limit_retries,
            **client_kwargs,
        )

    logger.info(f"{EMBEDDING} Using embedder {embedder.embedding_id}")
    return embedder


__all__ = ["create_embedder"]
