# ragsync/embedding/base.py
from __future__ import annotations

from typing import List, Protocol, runtime_checkable


@runtime_checkable
class Embedder(Protocol):
    """
    Text -> fixed-length float vector.

    Identical text must yield a semantically stable vector so that a
    stored embedding can be reused instead of recomputed.
    """

    @property
    def embedding_id(self) -> str: ...

    def embed(self, text: str) -> List[float]: ...

    def embed_batch(self, texts: List[str]) -> List[List[float]]:
        """Embed texts, returning one vector per input in the same order."""
        ...


__all__ = ["Embedder"]
