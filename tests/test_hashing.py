# tests/test_hashing.py
"""
Tests for ragsync.ingestion.hashing.
"""

import hashlib
from pathlib import Path

import pytest

from ragsync.ingestion.discovery import SourceFile
from ragsync.ingestion.hashing import (
    CHUNK_ID_LENGTH,
    compute_bytes_hash,
    compute_chunk_id,
    compute_chunk_ids,
)

pytestmark = pytest.mark.tier1


class TestComputeBytesHash:
    def test_prefixed_sha256(self):
        result = compute_bytes_hash(b"hello world")

        assert result == "sha256:" + hashlib.sha256(b"hello world").hexdigest()
        assert len(result) == 71

    def test_matches_loaded_file_fingerprint(self, tmp_path: Path):
        test_file = tmp_path / "test.md"
        test_file.write_bytes(b"# title\n\nbody\n")

        assert SourceFile.load(test_file).fingerprint == compute_bytes_hash(b"# title\n\nbody\n")

    def test_different_content_different_hash(self):
        assert compute_bytes_hash(b"content A") != compute_bytes_hash(b"content B")


class TestComputeChunkId:
    def test_is_truncated_sha256_of_text_then_source(self):
        expected = hashlib.sha256("chunk text".encode() + "docs/a.md".encode()).hexdigest()[:36]

        assert compute_chunk_id("chunk text", "docs/a.md") == expected

    def test_length(self):
        assert len(compute_chunk_id("x", "y")) == CHUNK_ID_LENGTH == 36

    def test_deterministic(self):
        assert compute_chunk_id("same", "f.txt") == compute_chunk_id("same", "f.txt")

    def test_salted_by_source(self):
        assert compute_chunk_id("same", "a.txt") != compute_chunk_id("same", "b.txt")

    def test_changes_with_text(self):
        assert compute_chunk_id("one", "a.txt") != compute_chunk_id("two", "a.txt")


class TestComputeChunkIds:
    @pytest.mark.parametrize("batch_size", [1, 3, 100])
    def test_batching_does_not_change_result(self, batch_size: int):
        texts = [f"chunk number {i}" for i in range(25)]

        ids = compute_chunk_ids(texts, "src.md", batch_size=batch_size, max_workers=4)

        assert ids == [compute_chunk_id(t, "src.md") for t in texts]

    def test_duplicate_texts_share_an_id(self):
        ids = compute_chunk_ids(["a", "b", "a"], "src.md")

        assert ids[0] == ids[2]
        assert ids[0] != ids[1]

    def test_empty_input(self):
        assert compute_chunk_ids([], "src.md") == []

    def test_rejects_non_positive_batch_size(self):
        with pytest.raises(ValueError):
            compute_chunk_ids(["a"], "src.md", batch_size=0)
