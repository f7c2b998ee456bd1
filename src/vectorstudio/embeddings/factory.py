"""Factory function for creating embedding service instances."""

import logging
import os

from dotenv import load_dotenv

from vectorstudio.constants import DEFAULT_EMBEDDING_CONCURRENCY, DEFAULT_OLLAMA_HOST
from vectorstudio.embeddings.base import EmbeddingService
from vectorstudio.embeddings.gemini import GeminiEmbeddings
from vectorstudio.embeddings.ollama import OllamaEmbeddings

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def get_embedding_service(config: dict | None = None) -> EmbeddingService:
    """Factory function to create an embedding service instance.

    Args:
        config: Optional configuration dictionary. If None, uses environment variables.
                Expected keys:
                - 'service': Service type (default: from EMBEDDING_SERVICE env, or "ollama")
                - 'host': Ollama host URL (default: from OLLAMA_HOST env)
                - 'model': Embedding model name (default: from EMBEDDING_MODEL env)
                - 'max_workers': Concurrent requests (default: from EMBEDDING_CONCURRENCY env)

    Returns:
        EmbeddingService: An instance implementing the EmbeddingService protocol.
    """
    if config is None:
        config = {}

    # Read service type from config, then env, then default to ollama
    service_type = config.get("service", os.getenv("EMBEDDING_SERVICE", "ollama"))
    model = config.get("model", os.getenv("EMBEDDING_MODEL"))
    max_workers = int(
        config.get(
            "max_workers",
            os.getenv("EMBEDDING_CONCURRENCY", str(DEFAULT_EMBEDDING_CONCURRENCY)),
        )
    )

    if service_type == "ollama":
        host = config.get("host", os.getenv("OLLAMA_HOST", DEFAULT_OLLAMA_HOST))
        return OllamaEmbeddings(host=host, model=model, max_workers=max_workers)

    if service_type == "gemini":
        return GeminiEmbeddings(model=model, max_workers=max_workers)

    raise ValueError(f"Unsupported embedding service type: {service_type}")
