# ragsync/__init__.py
"""
ragsync - incremental, content-addressed sync of text files into a vector store.

Unchanged files cost one read and one hash; changed files re-embed only
the chunks whose content changed, and chunks that disappeared from a file
are deleted from the store.

Usage:
    from ragsync import run_sync, SyncConfig

    summary = run_sync(["./docs"], SyncConfig(collection="docs"))
    print(summary)
"""

from ragsync.config.schema import SyncConfig
from ragsync.ingestion.sync.executor import SyncExecutor, SyncSummary, run_sync

__version__ = "0.1.0"

__all__ = ["SyncConfig", "SyncExecutor", "SyncSummary", "run_sync", "__version__"]
