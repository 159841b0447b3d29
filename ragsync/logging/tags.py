# ragsync/logging/tags.py
"""
Logging subsystem tags.

Used as message prefixes so log output stays searchable per subsystem.
"""

INGEST = "[INGEST]"
CACHE = "[CACHE]"
CHUNKING = "[CHUNKING]"
EMBEDDING = "[EMBEDDING]"
VECTOR_DB = "[VECTOR_DB]"
SYNC = "[SYNC]"
CLI = "[CLI]"
