# ragsync/config/loader.py
"""
Loader for the sync configuration.

Thin wrapper around ragsync.core.config that adds the default lookup:
no explicit path and no workspace config means built-in defaults.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from ragsync.config.schema import SyncConfig
from ragsync.core.config import load_config
from ragsync.core.paths import SyncPaths
from ragsync.logging.logger import get_logger

logger = get_logger(__name__)


def load_sync_config(path: Optional[Union[str, Path]] = None) -> SyncConfig:
    """
    Load the sync configuration.

    Args:
        path: Explicit YAML path. Missing explicit paths are an error.

    Returns:
        Validated SyncConfig

    Raises:
        ConfigNotFoundError: If an explicit path doesn't exist
        ConfigParseError / ConfigValidationError: If the file is invalid
    """
    if path is not None:
        return load_config(path, SyncConfig)

    workspace_config = SyncPaths.config()
    if workspace_config.exists():
        return load_config(workspace_config, SyncConfig)

    logger.debug("No config file found, using defaults")
    return SyncConfig()


__all__ = ["load_sync_config"]
