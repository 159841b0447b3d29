# ragsync/cli/commands/status.py
"""
Status command: what the file cache remembers and what the store holds.

Usage:
    ragsync status
    ragsync status --config sync.yaml
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ragsync.cli.commands._config import load_or_exit
from ragsync.cli.ui import ui
from ragsync.ingestion.cache.manager import FileChangeCache
from ragsync.vector_db.factory import create_vector_store


def command(config_path: Optional[Path] = None) -> None:
    config = load_or_exit(config_path)

    ui.header("ragsync status", f"Collection '{config.collection}'")

    cache = FileChangeCache(config.cache_path)
    entries = cache.load()

    ui.section(f"File cache ({cache.path})")
    if entries:
        rows = [
            [
                path,
                entry.fingerprint.removeprefix("sha256:")[:12],
                str(entry.chunk_count),
                entry.last_processed.strftime("%Y-%m-%d %H:%M:%S"),
            ]
            for path, entry in sorted(entries.items())
        ]
        ui.table(["Path", "Fingerprint", "Chunks", "Last processed"], rows, right_align=(2,))
    else:
        ui.info("No files cached yet")

    ui.section(f"Vector store ({config.vector_db.plugin})")
    try:
        store = create_vector_store(config.vector_db)
        store.check_connection()
        count = store.count(config.collection)
    except Exception as e:
        ui.error(f"Store unavailable: {e}")
        return

    cached_total = sum(e.chunk_count for e in entries.values())
    ui.print(f"{count} records in '{config.collection}' ({cached_total} expected from cache)")
    if count != cached_total:
        ui.warning("Store and cache disagree", detail="run 'ragsync sync --force' to reconcile")
