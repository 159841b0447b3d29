# ragsync/core/chunk.py
"""
Chunk - the unit of text that gets embedded and stored.

A chunk is a contiguous slice of one source file's text. Chunks are
produced by a Chunker, live for the duration of one sync run, and are
identified in the vector store by a content address (see
ragsync.ingestion.hashing.compute_chunk_id), never by their position.
"""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, Field


class Chunk(BaseModel):
    """
    Canonical chunk model.

    The chunk index is informational only: it is NOT part of the chunk's
    identity, so a chunk that moves within its file keeps its id.
    """

    source: str = Field(..., description="Source identifier (file path) owning this chunk")
    content: str = Field(..., description="Chunk text content")
    chunk_index: int = Field(default=0, description="Position of this chunk within its source")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Chunk metadata")


__all__ = ["Chunk"]
