# ragsync/cli/commands/cache.py
"""
Clear the file change cache so the next sync re-processes every file.

Chunk-level diffing still reuses stored embeddings, so this is cheap on
the embedding side.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from ragsync.cli.commands._config import load_or_exit
from ragsync.cli.ui import ui
from ragsync.ingestion.cache.manager import FileChangeCache


def command(config_path: Optional[Path] = None, yes: bool = False) -> None:
    config = load_or_exit(config_path)
    cache = FileChangeCache(config.cache_path)

    if not cache.path.exists():
        ui.info(f"No file cache at {cache.path}")
        return

    if not yes and not typer.confirm(f"Delete file cache {cache.path}?"):
        ui.info("Aborted")
        raise typer.Exit(1)

    count = cache.clear()
    ui.success(f"Cleared {count} cached files")
