# tests/test_file_cache.py
"""
Tests for ragsync.ingestion.cache.

Key tests verify that:
1. A missing or corrupt cache loads as empty instead of failing
2. record_success persists before returning
3. has_changed compares fingerprints per path
"""

import json
from pathlib import Path

import pytest

from ragsync.core.exceptions import CacheError
from ragsync.core.paths import SyncPaths
from ragsync.ingestion.cache import FileCacheState, FileChangeCache

pytestmark = pytest.mark.tier1


class TestLoad:
    def test_missing_file_is_empty(self, tmp_path: Path):
        cache = FileChangeCache(tmp_path / "nope.json")

        assert cache.load() == {}

    def test_corrupt_json_is_empty(self, tmp_path: Path):
        path = tmp_path / "file_cache.json"
        path.write_text("{not json", encoding="utf-8")

        assert FileChangeCache(path).load() == {}

    def test_wrong_shape_is_empty(self, tmp_path: Path):
        path = tmp_path / "file_cache.json"
        path.write_text(json.dumps({"files": {"a.md": {"oops": 1}}}), encoding="utf-8")

        assert FileChangeCache(path).load() == {}

    def test_default_location_is_workspace(self, workspace: Path):
        assert FileChangeCache().path == SyncPaths.file_cache() == workspace / "file_cache.json"


class TestRecordSuccess:
    def test_persists_immediately(self, tmp_path: Path):
        path = tmp_path / "sub" / "file_cache.json"
        cache = FileChangeCache(path)
        cache.load()

        cache.record_success("docs/a.md", "sha256:abc", 3)

        assert path.exists()
        reloaded = FileChangeCache(path).load()
        assert reloaded["docs/a.md"].fingerprint == "sha256:abc"
        assert reloaded["docs/a.md"].chunk_count == 3

    def test_overwrites_entry(self, tmp_path: Path):
        cache = FileChangeCache(tmp_path / "c.json")
        cache.record_success("a.md", "sha256:1", 3)
        cache.record_success("a.md", "sha256:2", 5)

        assert cache.get("a.md").fingerprint == "sha256:2"
        assert cache.cached_chunk_count("a.md") == 5

    def test_file_is_valid_state(self, tmp_path: Path):
        path = tmp_path / "c.json"
        FileChangeCache(path).record_success("a.md", "sha256:1", 2)

        state = FileCacheState.model_validate(json.loads(path.read_text(encoding="utf-8")))

        assert set(state.files) == {"a.md"}
        assert not path.with_suffix(".tmp").exists()

    def test_write_failure_raises_cache_error(self, tmp_path: Path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        cache = FileChangeCache(blocker / "file_cache.json")

        with pytest.raises(CacheError):
            cache.record_success("a.md", "sha256:1", 1)


class TestQueries:
    def test_has_changed(self, tmp_path: Path):
        cache = FileChangeCache(tmp_path / "c.json")
        cache.record_success("a.md", "sha256:1", 1)

        assert cache.has_changed("a.md", "sha256:1") is False
        assert cache.has_changed("a.md", "sha256:2") is True
        assert cache.has_changed("b.md", "sha256:1") is True

    def test_cached_chunk_count_unknown_path(self, tmp_path: Path):
        assert FileChangeCache(tmp_path / "c.json").cached_chunk_count("x.md") is None

    def test_clear_removes_file(self, tmp_path: Path):
        path = tmp_path / "c.json"
        cache = FileChangeCache(path)
        cache.record_success("a.md", "sha256:1", 1)
        cache.record_success("b.md", "sha256:2", 2)

        assert cache.clear() == 2
        assert not path.exists()
        assert cache.entries() == {}

