# tests/test_executor.py
"""
End-to-end tests for ragsync.ingestion.sync.executor.

Key tests verify that:
1. Unchanged files cost no chunking, embedding or store writes
2. A changed file re-embeds only changed chunks and deletes vanished ones
3. Failures leave the file cache untouched so the next run retries
4. Summary totals only count completed files
"""

import json
from pathlib import Path
from typing import List

import httpx
import numpy as np
import pytest

from ragsync.core.exceptions import StoreUnavailableError
from ragsync.config.schema import SyncConfig, VectorDBConfig
from ragsync.embedding.hashing import HashEmbedder
from ragsync.embedding.http import HTTPEmbedder
from ragsync.ingestion.hashing import compute_bytes_hash, compute_chunk_id
from ragsync.ingestion.sync.executor import FileStage, SyncSummary, run_sync
from ragsync.vector_db.local import LocalVectorStore
from ragsync.vector_db.memory import InMemoryVectorStore

pytestmark = pytest.mark.tier2


def _write(path: Path, *lines: str) -> str:
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return str(path)


def _ids(source: str, *texts: str) -> List[str]:
    return sorted(compute_chunk_id(t, source) for t in texts)


def _writes(store: InMemoryVectorStore) -> int:
    return len(store.upsert_calls) + len(store.delete_calls)


class ClosableEmbedder(HashEmbedder):
    def __init__(self):
        super().__init__(dimension=8)
        self.closed = False

    def close(self):
        self.closed = True


class FailingUpsertStore(InMemoryVectorStore):
    def upsert(self, collection, records):
        raise ConnectionError("write refused")


class TestScenarios:
    def test_initial_index(self, tmp_path, make_executor, store, cache):
        f = _write(tmp_path / "f.md", "c1", "c2", "c3")

        summary = make_executor().run(f)

        assert store.all_ids("docs") == _ids(f, "c1", "c2", "c3")
        entry = cache.get(f)
        assert entry.fingerprint == compute_bytes_hash((tmp_path / "f.md").read_bytes())
        assert entry.chunk_count == 3
        assert summary.files_processed == 1
        assert summary.chunks_embedded == 3
        assert summary.chunks_total == 3

    def test_rerun_without_edits_is_noop(self, tmp_path, make_executor, store, cache, embedder):
        f = _write(tmp_path / "f.md", "c1", "c2", "c3")
        make_executor().run(f)
        fingerprint = cache.get(f).fingerprint
        writes, embedded = _writes(store), len(embedder.embedded)

        summary = make_executor().run(f)

        assert _writes(store) == writes
        assert len(embedder.embedded) == embedded
        assert cache.get(f).fingerprint == fingerprint
        assert summary.files_skipped == 1
        assert summary.chunks_total == 3
        assert summary.outcomes[0].stage == FileStage.SKIPPED

    def test_middle_chunk_edit(self, tmp_path, make_executor, store, embedder):
        f = _write(tmp_path / "f.md", "c1", "c2", "c3")
        make_executor().run(f)
        upserts, deletes = len(store.upsert_calls), len(store.delete_calls)
        embedder.embedded.clear()

        _write(tmp_path / "f.md", "c1", "c2 edited", "c3")
        summary = make_executor().run(f)

        assert store.upsert_calls[upserts:] == [[compute_chunk_id("c2 edited", f)]]
        assert store.delete_calls[deletes:] == [[compute_chunk_id("c2", f)]]
        assert embedder.embedded == ["c2 edited"]
        assert store.count("docs") == 3
        assert summary.chunks_reused == 2
        assert summary.chunks_embedded == 1
        assert summary.chunks_deleted == 1

    def test_truncation(self, tmp_path, make_executor, store, cache):
        f = _write(tmp_path / "f.md", "c1", "c2", "c3")
        make_executor().run(f)
        upserts = len(store.upsert_calls)

        _write(tmp_path / "f.md", "c1")
        make_executor().run(f)

        assert len(store.upsert_calls) == upserts
        assert sorted(store.delete_calls[-1]) == _ids(f, "c2", "c3")
        assert store.all_ids("docs") == _ids(f, "c1")
        assert cache.cached_chunk_count(f) == 1


class TestProperties:
    def test_change_isolation(self, tmp_path, make_executor, store):
        f = _write(tmp_path / "f.md", "a", "b", "c", "d")
        make_executor().run(f)
        upserts, deletes = len(store.upsert_calls), len(store.delete_calls)

        _write(tmp_path / "f.md", "a", "x", "c", "y", "z")
        make_executor().run(f)

        upserted = sorted(i for call in store.upsert_calls[upserts:] for i in call)
        deleted = sorted(i for call in store.delete_calls[deletes:] for i in call)
        before, after = set(_ids(f, "a", "b", "c", "d")), set(_ids(f, "a", "x", "c", "y", "z"))
        assert deleted == sorted(before - after)
        assert upserted == sorted(after - before)

    def test_dedup(self, tmp_path, make_executor, store, embedder):
        f = _write(tmp_path / "f.md", "same", "other", "same")

        summary = make_executor().run(f)

        assert store.count("docs") == 2
        assert embedder.embedded == ["same", "other"]
        assert summary.chunks_total == 2

    def test_same_text_in_two_files_is_two_records(self, tmp_path, make_executor, store):
        a = _write(tmp_path / "a.md", "shared")
        b = _write(tmp_path / "b.md", "shared")

        make_executor().run([a, b])

        assert store.all_ids("docs") == sorted(
            [compute_chunk_id("shared", a), compute_chunk_id("shared", b)]
        )

    @pytest.mark.parametrize("damage", ["delete", "corrupt"])
    def test_cache_miss_safety(self, tmp_path, make_executor, store, cache, embedder, damage):
        f = _write(tmp_path / "f.md", "c1", "c2")
        make_executor().run(f)
        writes = _writes(store)
        embedder.embedded.clear()

        if damage == "delete":
            cache.path.unlink()
        else:
            cache.path.write_text("\x00garbage", encoding="utf-8")

        summary = make_executor().run(f)

        assert summary.files_processed == 1
        assert summary.chunks_reused == 2
        assert embedder.embedded == []
        assert _writes(store) == writes
        assert cache.cached_chunk_count(f) == 2

    def test_force_bypasses_cache_but_reuses_chunks(self, tmp_path, make_executor, store, embedder):
        f = _write(tmp_path / "f.md", "c1", "c2")
        make_executor().run(f)
        embedder.embedded.clear()

        summary = make_executor().run(f, force=True)

        assert summary.files_processed == 1
        assert summary.files_skipped == 0
        assert embedder.embedded == []
        assert len(store.upsert_calls) == 1


class TestFailures:
    def test_embedding_failure_leaves_cache_untouched(self, tmp_path, make_executor, cache, embedder):
        good = _write(tmp_path / "a.md", "fine")
        bad = _write(tmp_path / "b.md", "explode")
        embedder.fail_on("explode")

        summary = make_executor().run([good, bad])

        assert summary.files_processed == 1
        assert summary.files_failed == 1
        assert cache.get(bad) is None
        assert cache.get(good) is not None
        assert summary.chunks_total == 1
        failed = [o for o in summary.outcomes if o.error]
        assert failed[0].stage == FileStage.DIFFED
        assert "explode" in summary.errors[0]

    def test_failed_file_is_retried_next_run(self, tmp_path, make_executor, cache, embedder):
        f = _write(tmp_path / "f.md", "explode")
        embedder.fail_on("explode")
        make_executor().run(f)

        embedder._fail_texts.clear()
        summary = make_executor().run(f)

        assert summary.files_processed == 1
        assert cache.cached_chunk_count(f) == 1

    def test_store_write_failure(self, tmp_path, make_executor, cache):
        f = _write(tmp_path / "f.md", "c1")

        summary = make_executor(vector_store=FailingUpsertStore()).run(f)

        assert summary.files_failed == 1
        assert summary.outcomes[0].stage == FileStage.EMBEDDED
        assert cache.get(f) is None

    def test_embedding_timeout_leaves_cache_untouched(self, tmp_path, make_executor, cache):
        f = _write(tmp_path / "f.md", "c1", "c2")
        make_executor().run(f)
        before = cache.get(f)

        def timing_out(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        slow = HTTPEmbedder(
            model="m", api_key="k", batch_size=4, transport=httpx.MockTransport(timing_out)
        )
        _write(tmp_path / "f.md", "c1", "c2 edited", "c3")
        summary = make_executor(embedder=slow).run(f)

        assert summary.files_failed == 1
        assert summary.outcomes[0].stage == FileStage.DIFFED
        assert "timed out" in summary.errors[0]
        assert cache.get(f) == before

    def test_unreadable_local_collection_keeps_other_files(self, tmp_path, make_executor, cache):
        store = LocalVectorStore(path=tmp_path / "vdb")
        a = _write(tmp_path / "a.md", "a1", "a2")
        b = _write(tmp_path / "b.md", "b1", "b2", "b3")
        make_executor(vector_store=store).run([a, b])
        directory = tmp_path / "vdb" / "docs"
        manifest = json.loads((directory / "records.json").read_text(encoding="utf-8"))
        vectors_path = directory / manifest["vectors"]
        vectors = np.load(str(vectors_path))
        np.save(str(vectors_path), np.vstack([vectors, vectors[:1]]))
        records_before = (directory / "records.json").read_bytes()
        a_before = cache.get(a)

        _write(tmp_path / "a.md", "a1", "a2 edited")
        summary = make_executor(vector_store=LocalVectorStore(path=tmp_path / "vdb")).run([a, b])

        assert summary.files_failed == 1
        assert summary.files_skipped == 1
        assert summary.outcomes[0].path == a and summary.outcomes[0].error
        assert cache.get(a) == a_before
        assert (directory / "records.json").read_bytes() == records_before

        np.save(str(vectors_path), vectors)
        reopened = LocalVectorStore(path=tmp_path / "vdb")
        assert len(reopened.get_by_source("docs", b)) == 3

    def test_unreadable_file(self, tmp_path, make_executor):
        path = tmp_path / "bin.txt"
        path.write_bytes(b"\xff\xfe")
        ok = _write(tmp_path / "ok.txt", "hello")

        summary = make_executor().run([str(path), ok])

        assert summary.files_failed == 1
        assert summary.files_processed == 1

    def test_missing_path_is_reported(self, tmp_path, make_executor):
        summary = make_executor().run(tmp_path / "missing")

        assert summary.files_discovered == 0
        assert len(summary.errors) == 1
        assert summary.ok is False


class TestEmptyFile:
    def test_emptied_file_removes_all_records(self, tmp_path, make_executor, store, cache):
        f = _write(tmp_path / "f.md", "c1", "c2")
        make_executor().run(f)

        (tmp_path / "f.md").write_text("", encoding="utf-8")
        summary = make_executor().run(f)

        assert store.count("docs") == 0
        assert cache.cached_chunk_count(f) == 0
        assert summary.chunks_deleted == 2


class TestSyncSummary:
    def test_str_format(self):
        summary = SyncSummary(
            files_discovered=4,
            files_processed=2,
            files_skipped=1,
            files_failed=1,
            chunks_embedded=5,
            chunks_reused=7,
            chunks_deleted=2,
            chunks_total=12,
        )

        assert str(summary) == (
            "discovered 4, processed 2, skipped 1, failed 1; "
            "chunks: 5 embedded, 7 reused, 2 deleted, 12 indexed"
        )

    def test_duration_zero_until_finished(self):
        assert SyncSummary().duration_seconds == 0.0


class TestRunSync:
    def test_builds_from_config(self, tmp_path, workspace, embedder):
        docs = tmp_path / "docs"
        (docs / "nested").mkdir(parents=True)
        _write(docs / "a.md", "alpha")
        _write(docs / "nested" / "b.txt", "beta")
        config = SyncConfig(collection="notes")
        config.discovery.recursive = True
        store = InMemoryVectorStore()

        summary = run_sync([docs], config, vector_store=store, embedder=embedder)

        assert summary.files_processed == 2
        assert store.count("notes") == 2
        assert (workspace / "file_cache.json").exists()

    def test_local_store_round_trip(self, tmp_path, workspace):
        f = _write(tmp_path / "f.md", "hello world")
        config = SyncConfig(vector_db=VectorDBConfig(plugin="local"))

        first = run_sync(f, config)
        second = run_sync(f, config)

        assert first.files_processed == 1
        assert second.files_skipped == 1
        assert (workspace / "vector_db" / "documents" / "records.json").exists()

    def test_unavailable_store_is_fatal(self, tmp_path):
        class DownStore(InMemoryVectorStore):
            def check_connection(self):
                raise StoreUnavailableError("down")

        with pytest.raises(StoreUnavailableError):
            run_sync(_write(tmp_path / "f.md", "x"), vector_store=DownStore())

    def test_closes_embedder_it_builds(self, tmp_path, monkeypatch):
        built: List[ClosableEmbedder] = []

        def fake_create_embedder(config):
            built.append(ClosableEmbedder())
            return built[-1]

        monkeypatch.setattr("ragsync.embedding.factory.create_embedder", fake_create_embedder)

        run_sync(_write(tmp_path / "f.md", "x"), vector_store=InMemoryVectorStore())

        assert len(built) == 1 and built[0].closed

    def test_leaves_passed_embedder_open(self, tmp_path):
        embedder = ClosableEmbedder()

        run_sync(_write(tmp_path / "f.md", "x"), vector_store=InMemoryVectorStore(), embedder=embedder)

        assert embedder.closed is False
