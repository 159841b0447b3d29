# ragsync/ingestion/chunking/base.py
"""
Chunker protocol.

A chunker turns one source file's text into an ordered list of Chunks.
It must be deterministic: identical input yields identical chunks, which
is what lets unchanged chunks keep their content address between runs.

The chunker_id identifies the parameters that affect output
(format "{plugin_name}:{param1}:{param2}:...").
"""

from __future__ import annotations

from typing import Any, Dict, List, Protocol, runtime_checkable

from ragsync.core.chunk import Chunk


@runtime_checkable
class Chunker(Protocol):
    """Protocol for chunking plugins."""

    plugin_name: str

    @property
    def chunker_id(self) -> str: ...

    def chunk_text(self, text: str, base_meta: Dict[str, Any]) -> List[Chunk]:
        """
        Split text into chunks.

        Args:
            text: Full text of one source file
            base_meta: Metadata copied onto every chunk; must contain "source"
        """
        ...


__all__ = ["Chunker", "Chunk"]
