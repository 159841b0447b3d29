# ragsync/cli/__init__.py
from ragsync.cli.cli import app

__all__ = ["app"]
