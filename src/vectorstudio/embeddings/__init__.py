"""Embedding service abstraction layer for vectorstudio.

This package provides a unified interface for multiple embedding providers:
- OllamaEmbeddings: Local embeddings via Ollama
- GeminiEmbeddings: Google Gemini API

All services implement the EmbeddingService protocol.

Usage:
    from vectorstudio.embeddings import get_embedding_service

    # Create service from environment config
    service = get_embedding_service()

    # Or with explicit config
    service = get_embedding_service({"service": "ollama", "model": "nomic-embed-text"})
"""

from vectorstudio.embeddings.base import EmbeddingService, FanOutMixin
from vectorstudio.embeddings.factory import get_embedding_service
from vectorstudio.embeddings.gemini import GeminiEmbeddings
from vectorstudio.embeddings.ollama import OllamaEmbeddings

__all__ = [
    "EmbeddingService",
    "FanOutMixin",
    "OllamaEmbeddings",
    "GeminiEmbeddings",
    "get_embedding_service",
]
