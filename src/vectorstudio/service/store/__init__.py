"""Vector store access for Chroma.

This package provides a unified interface for Chroma operations:
- Configuration management (ChromaConfig)
- Client creation
- Collection lifecycle (VectorStore)
- Item CRUD and nearest-neighbour queries (CollectionHandle)

Usage:
    from vectorstudio.service.store import VectorStore, create_chroma_client

    store = VectorStore(create_chroma_client())
"""

from vectorstudio.service.store.client import (
    CollectionHandle,
    VectorStore,
    create_chroma_client,
    translate_store_errors,
)
from vectorstudio.service.store.config import ChromaConfig

__all__ = [
    "ChromaConfig",
    "CollectionHandle",
    "VectorStore",
    "create_chroma_client",
    "translate_store_errors",
]
