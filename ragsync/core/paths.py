# ragsync/core/paths.py
"""
Central path management for ragsync.

All components that need a default file location use this module.

Design principles:
- Workspace-relative by default ({CWD}/.ragsync/)
- Easy to override for testing
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class SyncPaths:
    """
    Central path management.

    Usage:
        from ragsync.core.paths import SyncPaths

        cache_path = SyncPaths.file_cache()

        # Override workspace for testing
        SyncPaths.set_workspace("/tmp/test_ragsync")
    """

    _workspace_override: Optional[Path] = None

    @classmethod
    def set_workspace(cls, path: Optional[str | Path]) -> None:
        """
        Override the workspace root.

        Pass None to reset to default (CWD).
        """
        if path is None:
            cls._workspace_override = None
        else:
            cls._workspace_override = Path(path)

    @classmethod
    def reset(cls) -> None:
        """Reset to default workspace (CWD). Useful in tests."""
        cls._workspace_override = None

    @classmethod
    def workspace(cls) -> Path:
        """
        The .ragsync workspace directory.

        Default: {CWD}/.ragsync/
        """
        if cls._workspace_override is not None:
            return cls._workspace_override
        return Path.cwd() / ".ragsync"

    @classmethod
    def config(cls) -> Path:
        """
        Default config file path.

        Location: {workspace}/config.yaml
        """
        return cls.workspace() / "config.yaml"

    @classmethod
    def file_cache(cls) -> Path:
        """
        Persisted file change cache.

        Location: {workspace}/file_cache.json
        """
        return cls.workspace() / "file_cache.json"

    @classmethod
    def vector_db(cls) -> Path:
        """
        Local vector store directory.

        Location: {workspace}/vector_db/
        """
        return cls.workspace() / "vector_db"


__all__ = ["SyncPaths"]
