# ragsync/cli/commands/__init__.py
"""CLI command implementations, imported lazily by ragsync.cli.cli."""
