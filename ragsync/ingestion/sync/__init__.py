# ragsync/ingestion/sync/__init__.py
"""Chunk-level incremental sync: diff, reconcile, orchestrate."""

from .executor import FileOutcome, FileStage, SyncExecutor, SyncSummary, run_sync
from .reconciler import EmbeddedChunk, ReconcileResult, StoreReconciler
from .resolver import ChunkDiff, ChunkDiffResolver, PendingChunk, ReusableChunk

__all__ = [
    "ChunkDiff",
    "ChunkDiffResolver",
    "PendingChunk",
    "ReusableChunk",
    "EmbeddedChunk",
    "ReconcileResult",
    "StoreReconciler",
    "FileOutcome",
    "FileStage",
    "SyncExecutor",
    "SyncSummary",
    "run_sync",
]
