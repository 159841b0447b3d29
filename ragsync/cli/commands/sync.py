# ragsync/cli/commands/sync.py
"""
Sync command.

Usage:
    ragsync sync ./docs
    ragsync sync ./docs README.md --recursive --collection notes
    ragsync sync ./docs --force
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn

from ragsync.cli.commands._config import load_or_exit
from ragsync.cli.ui import console, ui
from ragsync.core.config import ConfigError
from ragsync.core.exceptions import RagSyncError
from ragsync.ingestion.sync.executor import SyncSummary, run_sync
from ragsync.logging.logger import configure_logging, get_logger
from ragsync.logging.tags import CLI

logger = get_logger(__name__)


def _show_summary(summary: SyncSummary) -> None:
    ui.table(
        ["Metric", "Count"],
        [
            ["Files discovered", str(summary.files_discovered)],
            ["Files processed", str(summary.files_processed)],
            ["Files skipped (unchanged)", str(summary.files_skipped)],
            ["Files failed", str(summary.files_failed)],
            ["Chunks embedded", str(summary.chunks_embedded)],
            ["Chunks reused", str(summary.chunks_reused)],
            ["Chunks deleted", str(summary.chunks_deleted)],
            ["Chunks indexed", str(summary.chunks_total)],
        ],
        right_align=(1,),
    )

    for error in summary.errors:
        ui.error(error)

    if summary.ok:
        ui.success(f"Sync complete in {summary.duration_seconds:.2f}s")
    else:
        ui.warning("Sync finished with errors", detail=f"{len(summary.errors)} errors")


def command(
    paths: List[Path],
    config_path: Optional[Path] = None,
    collection: Optional[str] = None,
    recursive: Optional[bool] = None,
    force: bool = False,
    verbose: bool = False,
) -> None:
    configure_logging(logging.DEBUG if verbose else logging.WARNING)

    config = load_or_exit(config_path)
    if collection:
        config.collection = collection
    if recursive is not None:
        config.discovery.recursive = recursive

    ui.header("ragsync", f"Syncing into '{config.collection}' ({config.vector_db.plugin})")
    if force:
        ui.info("Force mode: file cache ignored")

    try:
        with Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task("Syncing", total=None)

            def on_progress(current: int, total: int, path: str) -> None:
                progress.update(task, total=total, completed=current - 1, description=path)

            summary = run_sync(
                [str(p) for p in paths], config, force=force, on_progress=on_progress
            )
    except (RagSyncError, ConfigError) as e:
        logger.error(f"{CLI} Sync aborted: {e}")
        ui.error(f"Sync aborted: {e}")
        raise typer.Exit(2)

    _show_summary(summary)

    if summary.files_failed:
        raise typer.Exit(1)
