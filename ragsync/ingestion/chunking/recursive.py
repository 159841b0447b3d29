# ragsync/ingestion/chunking/recursive.py
"""
Recursive character text splitter.

1. Try to split on paragraphs (\n\n)
2. If chunks still too big, split on lines (\n)
3. If still too big, split on sentences (. ) and clauses (, )
4. If still too big, split on words ( )
5. Last resort: split on characters

Overlap is added afterwards by prefixing each chunk with the tail of the
previous one, trimmed to a word boundary.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from ragsync.core.chunk import Chunk
from ragsync.core.exceptions import ChunkingError


@dataclass
class RecursiveChunker:
    """
    Recursive character text splitter with overlap support.

    Args:
        chunk_size: Target chunk size in characters (default: 1000)
        chunk_overlap: Overlap between chunks in characters (default: 200)
        separators: Separators to try, in order of preference
    """

    plugin_name: str = "recursive"
    chunk_size: int = 1000
    chunk_overlap: int = 200
    separators: List[str] = field(default_factory=lambda: ["\n\n", "\n", ". ", ", ", " ", ""])

    def __post_init__(self) -> None:
        if self.chunk_size <= 0:
            raise ChunkingError("chunk_size must be positive")
        if self.chunk_overlap < 0 or self.chunk_overlap >= self.chunk_size:
            raise ChunkingError("chunk_overlap must be in [0, chunk_size)")

    @property
    def chunker_id(self) -> str:
        """Format: "recursive:{chunk_size}:{chunk_overlap}"."""
        return f"{self.plugin_name}:{self.chunk_size}:{self.chunk_overlap}"

    def _split_text(self, text: str, separators: List[str]) -> List[str]:
        if not text:
            return []

        if len(text) <= self.chunk_size:
            return [text.strip()] if text.strip() else []

        for i, sep in enumerate(separators):
            if sep == "":
                return self._hard_split(text)

            if sep not in text:
                continue

            parts = text.split(sep)
            chunks: List[str] = []
            current = ""

            for j, part in enumerate(parts):
                # Keep the separator on every part but the last
                part_with_sep = part + sep if j < len(parts) - 1 else part

                if len(current) + len(part_with_sep) <= self.chunk_size:
                    current += part_with_sep
                    continue

                if current.strip():
                    chunks.append(current.strip())

                if len(part_with_sep) > self.chunk_size:
                    chunks.extend(self._split_text(part_with_sep, separators[i + 1 :]))
                    current = ""
                else:
                    current = part_with_sep

            if current.strip():
                chunks.append(current.strip())

            return chunks

        return self._hard_split(text)

    def _hard_split(self, text: str) -> List[str]:
        chunks = []
        for i in range(0, len(text), self.chunk_size):
            chunk = text[i : i + self.chunk_size].strip()
            if chunk:
                chunks.append(chunk)
        return chunks

    def _add_overlap(self, chunks: List[str]) -> List[str]:
        if not chunks or self.chunk_overlap <= 0:
            return chunks

        result = [chunks[0]]

        for i in range(1, len(chunks)):
            overlap_text = chunks[i - 1][-self.chunk_overlap :]

            # Prefer a word boundary
            space_idx = overlap_text.find(" ")
            if space_idx > 0:
                overlap_text = overlap_text[space_idx + 1 :]

            result.append(f"{overlap_text} {chunks[i]}".strip())

        return result

    def chunk_text(self, text: str, base_meta: Dict[str, Any]) -> List[Chunk]:
        """
        Chunk text using recursive splitting with overlap.

        Args:
            text: Raw text to chunk
            base_meta: Base metadata; "source" is required

        Returns:
            List of Chunk objects in text order
        """
        source = base_meta.get("source")
        if not source:
            raise ChunkingError("base_meta must contain a 'source'")

        raw_chunks = self._split_text(text, self.separators)

        chunks: List[Chunk] = []
        for i, content in enumerate(self._add_overlap(raw_chunks)):
            chunks.append(
                Chunk(
                    source=str(source),
                    content=content,
                    chunk_index=i,
                    metadata=dict(base_meta),
                )
            )

        return chunks


__all__ = ["RecursiveChunker"]
