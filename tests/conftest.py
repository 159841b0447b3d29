# tests/conftest.py
"""
Shared fixtures and collaborator doubles.

Every test runs against a throwaway workspace so that nothing touches
the real .ragsync directory of the checkout.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Set

import pytest

from ragsync.core.chunk import Chunk
from ragsync.core.paths import SyncPaths
from ragsync.embedding.hashing import HashEmbedder
from ragsync.ingestion.cache.manager import FileChangeCache
from ragsync.ingestion.sync.executor import SyncExecutor
from ragsync.vector_db.memory import InMemoryVectorStore


class LineChunker:
    """One chunk per non-empty line; makes chunk boundaries obvious in tests."""

    plugin_name = "lines"

    @property
    def chunker_id(self) -> str:
        return "lines"

    def chunk_text(self, text: str, base_meta: Dict[str, Any]) -> List[Chunk]:
        lines = [line.strip() for line in text.splitlines() if line.strip()]
        return [
            Chunk(source=base_meta["source"], content=line, chunk_index=i, metadata=dict(base_meta))
            for i, line in enumerate(lines)
        ]


class CountingEmbedder(HashEmbedder):
    """HashEmbedder that records every text it was asked to embed."""

    def __init__(self, dimension: int = 8):
        super().__init__(dimension=dimension)
        self.embedded: List[str] = []
        self._fail_texts: Set[str] = set()

    def fail_on(self, text: str) -> None:
        self._fail_texts.add(text)

    def embed_batch(self, texts: List[str]) -> List[List[float]]:
        for text in texts:
            if text in self._fail_texts:
                raise RuntimeError(f"embedding failed for {text!r}")
        self.embedded.extend(texts)
        return super().embed_batch(texts)


@pytest.fixture(autouse=True)
def workspace(tmp_path: Path):
    ws = tmp_path / ".ragsync"
    SyncPaths.set_workspace(ws)
    yield ws
    SyncPaths.reset()


@pytest.fixture
def store() -> InMemoryVectorStore:
    return InMemoryVectorStore()


@pytest.fixture
def embedder() -> CountingEmbedder:
    return CountingEmbedder()


@pytest.fixture
def cache(workspace: Path) -> FileChangeCache:
    return FileChangeCache(workspace / "file_cache.json")


@pytest.fixture
def make_executor(store, embedder, cache):
    def _make(**kwargs) -> SyncExecutor:
        options = dict(
            cache=cache,
            vector_store=store,
            embedder=embedder,
            chunker=LineChunker(),
            collection="docs",
        )
        options.update(kwargs)
        return SyncExecutor(**options)

    return _make
