# ragsync/logging/__init__.py
"""
Logging helpers for ragsync.

    from ragsync.logging.logger import get_logger
    from ragsync.logging.tags import SYNC

    logger = get_logger(__name__)
    logger.info(f"{SYNC} Starting run")
"""

from ragsync.logging.logger import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
