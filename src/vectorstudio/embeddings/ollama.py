"""Ollama embedding service implementation."""

import logging

import ollama

from vectorstudio.constants import DEFAULT_EMBEDDING_CONCURRENCY, get_embedding_model
from vectorstudio.embeddings.base import FanOutMixin
from vectorstudio.service.errors import EmbeddingServiceError

logger = logging.getLogger(__name__)


class OllamaEmbeddings(FanOutMixin):
    """Ollama embedding service implementation.

    Each text is posted separately to the /api/embeddings endpoint as
    {model, prompt} and the returned {embedding} vector is collected.
    """

    def __init__(
        self,
        host: str,
        model: str | None = None,
        max_workers: int = DEFAULT_EMBEDDING_CONCURRENCY,
    ) -> None:
        """Initialize the Ollama embedding service.

        Args:
            host: The Ollama server host URL (e.g., "http://localhost:11434")
            model: The embedding model name. If None, uses EMBEDDING_MODEL env var
                   or the service default.
            max_workers: Maximum concurrent embedding requests
        """
        self.host = host
        self.model = model or get_embedding_model("ollama")
        self.max_workers = max_workers
        logger.info(f"🧮 Initializing OllamaEmbeddings: host={host}, model={self.model}")
        # Configure the Ollama client with the specified host
        self.client = ollama.Client(host=host)

    def _embed_one(self, text: str) -> list[float]:
        response = self.client.embeddings(model=self.model, prompt=text)
        embedding = response["embedding"]
        if not embedding:
            raise EmbeddingServiceError(
                f"Ollama returned an empty embedding for model {self.model}"
            )
        return list(embedding)

    def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for a list of texts using Ollama.

        Args:
            texts: List of text strings to embed

        Returns:
            list[list[float]]: List of embedding vectors in input order

        Raises:
            EmbeddingServiceError: If Ollama is unreachable or rejects any text
        """
        return self.fan_out(texts, self._embed_one)
