# ragsync/ingestion/hashing.py
"""
Content hashing for incremental sync.

Two kinds of identity live here:

- File fingerprints (compute_bytes_hash): SHA-256 over the whole file,
  used only by the file change cache.
- Chunk ids (compute_chunk_id): the content address of a chunk, used as the
  vector store record id AND as the chunk-level diff key.

A chunk id is a pure function of (chunk text, source). It must be computed
the same way when writing and when diffing; adding any other input (chunk
index, a normalised path) silently breaks deduplication.
"""

from __future__ import annotations

import hashlib
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

# Truncated hex digest length of a chunk id.
CHUNK_ID_LENGTH = 36

DEFAULT_ID_BATCH_SIZE = 100


def compute_bytes_hash(data: bytes) -> str:
    """
    Compute the SHA-256 fingerprint of a file's raw bytes.

    Returns:
        SHA-256 hash as hex string with "sha256:" prefix
    """
    return f"sha256:{hashlib.sha256(data).hexdigest()}"


def compute_chunk_id(chunk_text: str, source: str) -> str:
    """
    Compute the content address of a chunk.

    id = hex(sha256(chunk_text || source))[:36]

    Identical text from the same source always yields the same id, so two
    identical chunks in one file collapse to a single stored record.

    Args:
        chunk_text: The chunk's text
        source: Source identifier (file path) the chunk belongs to

    Returns:
        36 character lowercase hex string
    """
    hasher = hashlib.sha256()
    hasher.update(chunk_text.encode("utf-8"))
    hasher.update(source.encode("utf-8"))
    return hasher.hexdigest()[:CHUNK_ID_LENGTH]


def _compute_batch(texts: Sequence[str], source: str) -> List[str]:
    return [compute_chunk_id(text, source) for text in texts]


def compute_chunk_ids(
    texts: Sequence[str],
    source: str,
    batch_size: int = DEFAULT_ID_BATCH_SIZE,
    max_workers: Optional[int] = None,
) -> List[str]:
    """
    Compute chunk ids for many texts of one source.

    Batches are hashed in parallel; the result is in input order and is
    identical to calling compute_chunk_id on each text.

    Args:
        texts: Chunk texts in chunker order
        source: Source identifier shared by all texts
        batch_size: Texts per parallel batch
        max_workers: Thread pool size (None = executor default)
    """
    if batch_size <= 0:
        raise ValueError("batch_size must be positive")

    if len(texts) <= batch_size:
        return _compute_batch(texts, source)

    batches = [texts[i : i + batch_size] for i in range(0, len(texts), batch_size)]

    ids: List[str] = []
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        for batch_ids in executor.map(_compute_batch, batches, [source] * len(batches)):
            ids.extend(batch_ids)

    return ids


__all__ = [
    "CHUNK_ID_LENGTH",
    "compute_bytes_hash",
    "compute_chunk_id",
    "compute_chunk_ids",
]
