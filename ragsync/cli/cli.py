# ragsync/cli/cli.py
"""
ragsync CLI.

Commands:
    ragsync sync          Sync files into the vector store
    ragsync status        Show the file cache and store record count
    ragsync clear-cache   Forget every cached file fingerprint

NOTE: Commands use lazy loading - imports only happen when a command is invoked.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

app = typer.Typer(
    name="ragsync",
    help="ragsync - incremental sync of text files into a vector store.",
    no_args_is_help=True,
    add_completion=False,
)


@app.command("sync")
def sync(
    paths: List[Path] = typer.Argument(..., help="Files or directories to sync."),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to config YAML."),
    collection: Optional[str] = typer.Option(None, "--collection", "-c", help="Collection name."),
    recursive: Optional[bool] = typer.Option(
        None, "--recursive/--no-recursive", "-r", help="Descend into subdirectories."
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Ignore the file cache."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    """Sync files into the vector store."""
    from ragsync.cli.commands import sync as mod

    mod.command(
        paths=paths,
        config_path=config,
        collection=collection,
        recursive=recursive,
        force=force,
        verbose=verbose,
    )


@app.command("status")
def status(
    config: Optional[Path] = typer.Option(None, "--config", help="Path to config YAML."),
) -> None:
    """Show cached files and the store's record count."""
    from ragsync.cli.commands import status as mod

    mod.command(config_path=config)


@app.command("clear-cache")
def clear_cache(
    config: Optional[Path] = typer.Option(None, "--config", help="Path to config YAML."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Don't ask for confirmation."),
) -> None:
    """Delete the file cache so the next sync re-processes every file."""
    from ragsync.cli.commands import cache as mod

    mod.command(config_path=config, yes=yes)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
