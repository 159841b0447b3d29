# ragsync/ingestion/sync/executor.py
"""
Executor for incremental sync.

Per file:
    DISCOVERED -> (fingerprint unchanged) -> SKIPPED
    DISCOVERED -> LOADED -> CHUNKED -> DIFFED -> EMBEDDED -> RECONCILED -> CACHE_UPDATED

Files are processed one at a time. A failure at any step ends that
file's pipeline without touching its cache entry, so the next run
retries it from scratch; the run itself continues with the next file.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from ragsync.config.schema import SyncConfig
from ragsync.core.exceptions import EmbeddingError
from ragsync.embedding.base import Embedder
from ragsync.ingestion.cache.manager import FileChangeCache
from ragsync.ingestion.chunking.base import Chunker
from ragsync.ingestion.discovery import FileScanner, SourceFile
from ragsync.ingestion.hashing import DEFAULT_ID_BATCH_SIZE
from ragsync.logging.logger import get_logger
from ragsync.logging.tags import SYNC
from ragsync.vector_db.base import VectorStore

from .reconciler import EmbeddedChunk, StoreReconciler
from .resolver import DEFAULT_LOOKUP_BATCH_SIZE, ChunkDiff, ChunkDiffResolver

logger = get_logger(__name__)

ProgressCallback = Callable[[int, int, str], None]


class FileStage(str, Enum):
    DISCOVERED = "discovered"
    SKIPPED = "skipped"
    LOADED = "loaded"
    CHUNKED = "chunked"
    DIFFED = "diffed"
    EMBEDDED = "embedded"
    RECONCILED = "reconciled"
    CACHE_UPDATED = "cache_updated"


@dataclass
class FileOutcome:
    """What happened to one file; stage is the last stage reached."""

    path: str
    stage: FileStage = FileStage.DISCOVERED
    chunks_total: int = 0
    chunks_new: int = 0
    chunks_reused: int = 0
    chunks_deleted: int = 0
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.stage in (FileStage.SKIPPED, FileStage.CACHE_UPDATED)


@dataclass
class SyncSummary:
    """Summary of a sync run. Chunk totals only count completed files."""

    files_discovered: int = 0
    files_skipped: int = 0
    files_processed: int = 0
    files_failed: int = 0
    chunks_reused: int = 0
    chunks_embedded: int = 0
    chunks_deleted: int = 0
    chunks_total: int = 0
    errors: List[str] = field(default_factory=list)
    outcomes: List[FileOutcome] = field(default_factory=list)
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: Optional[datetime] = None

    @property
    def duration_seconds(self) -> float:
        if self.finished_at is None:
            return 0.0
        return (self.finished_at - self.started_at).total_seconds()

    @property
    def ok(self) -> bool:
        return self.files_failed == 0 and not self.errors

    def __str__(self) -> str:
        return (
            f"discovered {self.files_discovered}, processed {self.files_processed}, "
            f"skipped {self.files_skipped}, failed {self.files_failed}; "
            f"chunks: {self.chunks_embedded} embedded, {self.chunks_reused} reused, "
            f"{self.chunks_deleted} deleted, {self.chunks_total} indexed"
        )


class SyncExecutor:
    """
    Runs the incremental sync pipeline over a set of paths.

    Usage:
        executor = SyncExecutor(
            cache=FileChangeCache(),
            vector_store=store,
            embedder=embedder,
            chunker=RecursiveChunker(),
            collection="documents",
        )
        summary = executor.run(["./docs"])
    """

    def __init__(
        self,
        *,
        cache: FileChangeCache,
        vector_store: VectorStore,
        embedder: Embedder,
        chunker: Chunker,
        collection: str,
        scanner: Optional[FileScanner] = None,
        id_batch_size: int = DEFAULT_ID_BATCH_SIZE,
        lookup_batch_size: int = DEFAULT_LOOKUP_BATCH_SIZE,
        fail_on_lookup_error: bool = False,
    ) -> None:
        self.cache = cache
        self.vector_store = vector_store
        self.embedder = embedder
        self.chunker = chunker
        self.collection = collection
        self.scanner = scanner or FileScanner()
        self.resolver = ChunkDiffResolver(
            vector_store,
            collection,
            id_batch_size=id_batch_size,
            lookup_batch_size=lookup_batch_size,
            fail_on_lookup_error=fail_on_lookup_error,
        )
        self.reconciler = StoreReconciler(vector_store)

    def run(
        self,
        paths: Union[str, Path, Sequence[Union[str, Path]]],
        force: bool = False,
        on_progress: Optional[ProgressCallback] = None,
    ) -> SyncSummary:
        """
        Sync every discovered file.

        Args:
            paths: Files and/or directories to sync
            force: Ignore the file cache (chunk-level reuse still applies)
            on_progress: Optional callback(current, total, path)
        """
        summary = SyncSummary()

        scan_result = self.scanner.scan(paths)
        summary.files_discovered = scan_result.total_scanned
        for path, error in scan_result.errors:
            summary.errors.append(f"Scan error: {path}: {error}")

        self.cache.load()

        total = len(scan_result.files)
        for i, path in enumerate(scan_result.files, start=1):
            if on_progress:
                on_progress(i, total, path)

            outcome = self._sync_file(path, force)
            summary.outcomes.append(outcome)

            if outcome.error is not None:
                summary.files_failed += 1
                summary.errors.append(f"{path}: {outcome.error}")
                continue

            if outcome.stage == FileStage.SKIPPED:
                summary.files_skipped += 1
            else:
                summary.files_processed += 1
                summary.chunks_embedded += outcome.chunks_new
                summary.chunks_reused += outcome.chunks_reused
                summary.chunks_deleted += outcome.chunks_deleted
            summary.chunks_total += outcome.chunks_total

        summary.finished_at = datetime.now(timezone.utc)
        logger.info(f"{SYNC} Sync complete in {summary.duration_seconds:.2f}s: {summary}")
        return summary

    def _sync_file(self, path: str, force: bool) -> FileOutcome:
        outcome = FileOutcome(path=path)

        try:
            source = SourceFile.load(path)

            if not force and not self.cache.has_changed(source.path, source.fingerprint):
                outcome.stage = FileStage.SKIPPED
                outcome.chunks_total = self.cache.cached_chunk_count(source.path) or 0
                logger.debug(f"{SYNC} Unchanged, skipping {path}")
                return outcome
            outcome.stage = FileStage.LOADED

            chunks = self.chunker.chunk_text(source.content, {"source": source.path})
            outcome.stage = FileStage.CHUNKED

            diff = self.resolver.resolve(source.path, chunks)
            outcome.stage = FileStage.DIFFED

            embedded = self._embed(diff)
            outcome.stage = FileStage.EMBEDDED

            result = self.reconciler.reconcile(self.collection, embedded, diff.stale_ids)
            outcome.stage = FileStage.RECONCILED

            self.cache.record_success(source.path, source.fingerprint, len(result.ids))
            outcome.stage = FileStage.CACHE_UPDATED

            outcome.chunks_total = len(result.ids)
            outcome.chunks_new = len(result.upserted)
            outcome.chunks_reused = len(diff.reusable)
            outcome.chunks_deleted = len(result.deleted)
            logger.info(
                f"{SYNC} {path}: {outcome.chunks_new} new, {outcome.chunks_reused} reused, "
                f"{outcome.chunks_deleted} deleted"
            )
        except Exception as e:
            outcome.error = str(e) or type(e).__name__
            logger.error(f"{SYNC} Failed to sync {path} at stage {outcome.stage.value}: {e}")

        return outcome

    def _embed(self, diff: ChunkDiff) -> List[EmbeddedChunk]:
        """Embed what the diff says is missing and merge with reused vectors."""
        fresh: List[EmbeddedChunk] = []
        pending = diff.needs_embedding

        if pending:
            t0 = time.perf_counter()
            vectors = self.embedder.embed_batch([p.chunk.content for p in pending])
            if len(vectors) != len(pending):
                raise EmbeddingError(
                    f"Embedder returned {len(vectors)} vectors for {len(pending)} chunks"
                )
            for p, vector in zip(pending, vectors):
                if not vector:
                    raise EmbeddingError(f"Empty vector for chunk {p.chunk_id}")
                fresh.append(EmbeddedChunk(p.chunk_id, p.chunk, list(vector)))
            logger.debug(
                f"{SYNC} Embedded {len(pending)} chunks in {time.perf_counter() - t0:.2f}s"
            )

        reused = [EmbeddedChunk(r.chunk_id, r.chunk, r.vector, reused=True) for r in diff.reusable]

        by_id = {e.chunk_id: e for e in reused + fresh}
        return [by_id[i] for i in diff.current_ids]


def run_sync(
    paths: Union[str, Path, Sequence[Union[str, Path]]],
    config: Optional[SyncConfig] = None,
    *,
    force: bool = False,
    vector_store: Optional[VectorStore] = None,
    embedder: Optional[Embedder] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> SyncSummary:
    """
    Convenience function to run a sync from configuration.

    Collaborators not passed in are built from config, and an embedder
    built here is closed when the run ends. The store is checked before
    any file is touched.

    Raises:
        StoreUnavailableError: If the vector store cannot be reached
        EmbeddingError: If the embedder cannot be configured
    """
    from ragsync.embedding.factory import create_embedder
    from ragsync.ingestion.chunking.recursive import RecursiveChunker
    from ragsync.vector_db.factory import create_vector_store

    config = config or SyncConfig()

    if vector_store is None:
        vector_store = create_vector_store(config.vector_db)
    vector_store.check_connection()

    owns_embedder = embedder is None
    if embedder is None:
        embedder = create_embedder(config.embedding)

    try:
        executor = SyncExecutor(
            cache=FileChangeCache(config.cache_path),
            vector_store=vector_store,
            embedder=embedder,
            chunker=RecursiveChunker(
                chunk_size=config.chunking.chunk_size,
                chunk_overlap=config.chunking.chunk_overlap,
            ),
            collection=config.collection,
            scanner=FileScanner(
                extensions=config.discovery.extensions,
                recursive=config.discovery.recursive,
                max_depth=config.discovery.max_depth,
            ),
            id_batch_size=config.sync.id_batch_size,
            lookup_batch_size=config.sync.lookup_batch_size,
            fail_on_lookup_error=config.sync.fail_on_lookup_error,
        )
        return executor.run(paths, force=force, on_progress=on_progress)
    finally:
        close = getattr(embedder, "close", None)
        if owns_embedder and close is not None:
            close()


__all__ = [
    "FileStage",
    "FileOutcome",
    "SyncSummary",
    "SyncExecutor",
    "run_sync",
]
