"""Base protocol and shared fan-out for embedding services."""

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Protocol

from vectorstudio.service.errors import EmbeddingServiceError

logger = logging.getLogger(__name__)


class EmbeddingService(Protocol):
    """Protocol defining the interface for embedding services.

    Implementations turn texts into fixed-length vectors, one vector per
    input text, in input order.
    """

    def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for a list of texts.

        Args:
            texts: List of text strings to embed

        Returns:
            list[list[float]]: One embedding vector per input text, in order

        Raises:
            EmbeddingServiceError: If any single text fails to embed
        """
        ...


class FanOutMixin:
    """Mixin embedding texts one request at a time on a bounded thread pool.

    Results come back in input order. The first failure aborts the whole
    call; no partial result is returned.
    """

    max_workers: int = 1
    model: str = ""

    def fan_out(
        self, texts: list[str], embed_one: Callable[[str], list[float]]
    ) -> list[list[float]]:
        """Run embed_one over texts with at most max_workers concurrent requests.

        Args:
            texts: Texts to embed
            embed_one: Callable producing the embedding for one text

        Returns:
            list[list[float]]: Embeddings in the order of texts

        Raises:
            EmbeddingServiceError: Wrapping the first underlying failure
        """
        if not texts:
            return []

        workers = max(1, min(self.max_workers, len(texts)))
        try:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                embeddings = list(executor.map(embed_one, texts))
        except EmbeddingServiceError:
            raise
        except Exception as e:
            logger.error(f"❌ Embedding request failed with {self.model}: {e}")
            raise EmbeddingServiceError(f"Failed to get embeddings: {e}") from e

        logger.info(f"✅ Generated {len(embeddings)} embeddings with {self.model}")
        return embeddings
