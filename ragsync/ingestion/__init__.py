# ragsync/ingestion/__init__.py
"""
Ingestion side of ragsync: discovery, hashing, chunking, the file change
cache and the chunk-level sync engine.
"""
