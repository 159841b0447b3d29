# ragsync/config/__init__.py
from ragsync.config.loader import load_sync_config
from ragsync.config.schema import (
    ChunkingConfig,
    DiscoveryConfig,
    EmbeddingConfig,
    SyncConfig,
    SyncOptions,
    VectorDBConfig,
)

__all__ = [
    "load_sync_config",
    "SyncConfig",
    "DiscoveryConfig",
    "ChunkingConfig",
    "EmbeddingConfig",
    "VectorDBConfig",
    "SyncOptions",
]
