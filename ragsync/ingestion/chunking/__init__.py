# ragsync/ingestion/chunking/__init__.py
from ragsync.ingestion.chunking.base import Chunker
from ragsync.ingestion.chunking.recursive import RecursiveChunker

__all__ = ["Chunker", "RecursiveChunker"]
