# ragsync/embedding/hashing.py
"""
Deterministic offline embedder.

Seeds a random generator from the SHA-256 of the text, so identical text
always maps to the identical unit vector. Useful for tests and for
exercising the sync pipeline without an embedding API.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import List

import numpy as np


@dataclass
class HashEmbedder:
    dimension: int = 384

    @property
    def embedding_id(self) -> str:
        return f"hash:{self.dimension}"

    def embed(self, text: str) -> List[float]:
        seed = int.from_bytes(hashlib.sha256(text.encode("utf-8")).digest()[:8], "big")
        rng = np.random.default_rng(seed)
        vec = rng.standard_normal(self.dimension).astype(np.float32)
        norm = np.linalg.norm(vec)
        if norm > 0:
            vec = vec / norm
        return vec.tolist()

    def embed_batch(self, texts: List[str]) -> List[List[float]]:
        return [self.embed(t) for t in texts]


__all__ = ["HashEmbedder"]
