# ragsync/embedding/__init__.py
"""Embedding backends."""

from .base import Embedder
from .factory import create_embedder
from .hashing import HashEmbedder
from .http import HTTPEmbedder

__all__ = ["Embedder", "HTTPEmbedder", "HashEmbedder", "create_embedder"]
