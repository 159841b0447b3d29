# ragsync/config/schema.py
"""
Configuration schema for a sync run.

Example YAML:
    collection: my_docs

    discovery:
      extensions: [.txt, .md]
      recursive: true
      max_depth: 10

    chunking:
      chunk_size: 1000
      chunk_overlap: 200

    embedding:
      provider: openai
      model: text-embedding-3-small
      base_url: https://api.openai.com/v1
      api_key_env: OPENAI_API_KEY
      batch_size: 96

    vector_db:
      plugin: qdrant
      url: http://localhost:6333

    sync:
      lookup_batch_size: 100
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class DiscoveryConfig(BaseModel):
    """Which files under the given paths are synced."""

    model_config = ConfigDict(extra="forbid")

    extensions: List[str] = Field(
        default_factory=lambda: [".txt", ".md"],
        description="Extension allow-list",
    )
    recursive: bool = Field(default=False, description="Descend into subdirectories")
    max_depth: int = Field(default=10, ge=0, description="Maximum directory depth when recursive")

    @field_validator("extensions", mode="before")
    @classmethod
    def normalize_extensions(cls, v: List[str]) -> List[str]:
        """Ensure all extensions start with a dot and are lowercase."""
        if not isinstance(v, list):
            return v

        normalized = []
        for ext in v:
            norm_ext = str(ext).lower()
            if not norm_ext.startswith("."):
                norm_ext = f".{norm_ext}"
            normalized.append(norm_ext)
        return normalized


class ChunkingConfig(BaseModel):
    """Recursive chunker parameters."""

    model_config = ConfigDict(extra="forbid")

    chunk_size: int = Field(default=1000, gt=0, description="Target chunk size in characters")
    chunk_overlap: int = Field(default=200, ge=0, description="Overlap between chunks in characters")

    @model_validator(mode="after")
    def check_overlap(self) -> "ChunkingConfig":
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError("chunk_overlap must be smaller than chunk_size")
        return self


class EmbeddingConfig(BaseModel):
    """Embedding backend."""

    model_config = ConfigDict(extra="forbid")

    provider: Literal["hash", "openai"] = Field(default="hash", description="Embedding provider")
    model: str = Field(default="text-embedding-3-small", description="Model name")
    base_url: str = Field(default="https://api.openai.com/v1", description="API base URL")
    api_key_env: Optional[str] = Field(
        default="OPENAI_API_KEY", description="Environment variable holding the API key"
    )
    dimension: int = Field(default=384, gt=0, description="Vector size for the hash provider")
    batch_size: int = Field(default=96, gt=0, description="Texts per embedding request")
    max_workers: int = Field(default=1, gt=0, description="Concurrent embedding requests")
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    rate_limit_retries: int = Field(
        default=3, ge=0, description="Retries of a rate-limited request before giving up"
    )

    @property
    def embedding_id(self) -> str:
        """Composite ID: provider:model."""
        if self.provider == "hash":
            return f"hash:{self.dimension}"
        return f"{self.provider}:{self.model}"


class VectorDBConfig(BaseModel):
    """Vector store backend."""

    model_config = ConfigDict(extra="forbid")

    plugin: Literal["memory", "local", "qdrant"] = Field(default="local", description="Store plugin")
    url: str = Field(default="http://localhost:6333", description="Qdrant URL")
    api_key_env: Optional[str] = Field(
        default=None, description="Environment variable holding the Qdrant API key"
    )
    path: Optional[Path] = Field(default=None, description="Directory for the local store")
    timeout: float = Field(default=10.0, gt=0, description="Request timeout in seconds")


class SyncOptions(BaseModel):
    """Tuning for the chunk-level diff."""

    model_config = ConfigDict(extra="forbid")

    id_batch_size: int = Field(default=100, gt=0, description="Chunks hashed per parallel batch")
    lookup_batch_size: int = Field(default=100, gt=0, description="Ids per store point lookup")
    fail_on_lookup_error: bool = Field(
        default=False,
        description="Fail the file instead of re-embedding everything when the lookup fails",
    )


class SyncConfig(BaseModel):
    """Top-level configuration for ragsync."""

    model_config = ConfigDict(extra="forbid")

    collection: str = Field(default="documents", min_length=1, description="Target collection")
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    chunking: ChunkingConfig = Field(default_factory=ChunkingConfig)
    embedding: EmbeddingConfig = Field(default_factory=EmbeddingConfig)
    vector_db: VectorDBConfig = Field(default_factory=VectorDBConfig)
    sync: SyncOptions = Field(default_factory=SyncOptions)
    cache_path: Optional[Path] = Field(default=None, description="File change cache location")


__all__ = [
    "DiscoveryConfig",
    "ChunkingConfig",
    "EmbeddingConfig",
    "VectorDBConfig",
    "SyncOptions",
    "SyncConfig",
]
