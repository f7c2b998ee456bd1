"""Google Gemini embedding service implementation."""

import logging

from google import genai

from vectorstudio.constants import DEFAULT_EMBEDDING_CONCURRENCY, get_embedding_model
from vectorstudio.embeddings.base import FanOutMixin

logger = logging.getLogger(__name__)


class GeminiEmbeddings(FanOutMixin):
    """Google Gemini embedding service implementation.

    The API key is automatically retrieved from the GEMINI_API_KEY environment variable.
    """

    def __init__(
        self,
        model: str | None = None,
        max_workers: int = DEFAULT_EMBEDDING_CONCURRENCY,
    ) -> None:
        """Initialize the Gemini embedding service.

        Args:
            model: The embedding model name (e.g., "text-embedding-004")
            max_workers: Maximum concurrent embedding requests
        """
        self.model = model or get_embedding_model("gemini")
        self.max_workers = max_workers
        logger.info(f"🧮 Initializing GeminiEmbeddings: model={self.model}")
        # The client gets the API key from the GEMINI_API_KEY environment variable
        self.client = genai.Client()

    def _embed_one(self, text: str) -> list[float]:
        response = self.client.models.embed_content(model=self.model, contents=[text])
        return list(response.embeddings[0].values)

    def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for a list of texts using Gemini.

        Args:
            texts: List of text strings to embed

        Returns:
            list[list[float]]: List of embedding vectors in input order
        """
        return self.fan_out(texts, self._embed_one)
