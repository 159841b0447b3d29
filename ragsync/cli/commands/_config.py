# ragsync/cli/commands/_config.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from ragsync.cli.ui import ui
from ragsync.config.loader import load_sync_config
from ragsync.config.schema import SyncConfig
from ragsync.core.config import ConfigError


def load_or_exit(config_path: Optional[Path]) -> SyncConfig:
    """Load configuration, turning config errors into exit code 2."""
    try:
        return load_sync_config(config_path)
    except ConfigError as e:
        ui.error(str(e))
        raise typer.Exit(2)
