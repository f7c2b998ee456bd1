"""Similarity queries with score normalization and related-document expansion."""

import logging
from dataclasses import replace
from typing import Any

from vectorstudio.constants import DEFAULT_TOP_K, RELATED_TOP_K
from vectorstudio.embeddings.base import EmbeddingService
from vectorstudio.service.models import QueryResult, RetrievalResult
from vectorstudio.service.store import VectorStore
from vectorstudio.service.utils import similarity_score

logger = logging.getLogger(__name__)


class QueryService:
    """Runs similarity queries against a collection.

    Distances from the store are cosine distances (0 = identical) and are
    turned into integer similarity percentages. Optionally a second query,
    seeded with the best primary result's content, returns related documents.
    """

    def __init__(self, store: VectorStore, embedder: EmbeddingService) -> None:
        self.store = store
        self.embedder = embedder

    def _search(
        self,
        collection_name: str,
        query_text: str,
        k: int,
        where: dict[str, Any] | None,
    ) -> list[QueryResult]:
        embedding = self.embedder.embed([query_text])[0]
        collection = self.store.get_collection(collection_name)
        return collection.query(embedding, k, where=where or None)

    def query(
        self,
        collection_name: str,
        query_text: str,
        k: int = DEFAULT_TOP_K,
        where: dict[str, Any] | None = None,
        include_related: bool = False,
    ) -> RetrievalResult:
        """Query a collection for the chunks nearest to query_text.

        Args:
            collection_name: Collection to search
            query_text: The text to search for
            k: Number of primary results
            where: Optional metadata filter applied to both passes
            include_related: Also fetch documents related to the top result

        Returns:
            RetrievalResult: Primary results nearest first; related results,
                excluding ids already in the primary set, or None
        """
        logger.info(f"🔍 Querying '{collection_name}' (k={k}): '{query_text[:100]}'")
        results = self._search(collection_name, query_text, k, where)
        primary = [replace(r, similarity_score=similarity_score(r.distance)) for r in results]

        related = None
        if include_related and primary:
            related = self._related(collection_name, primary, where)

        logger.info(
            f"✅ Query returned {len(primary)} result(s)"
            + (f" and {len(related)} related" if related else "")
        )
        return RetrievalResult(primary=primary, related=related)

    def _related(
        self,
        collection_name: str,
        primary: list[QueryResult],
        where: dict[str, Any] | None,
    ) -> list[QueryResult] | None:
        seed = primary[0].page_content
        if not seed:
            return None

        try:
            candidates = self._search(collection_name, seed, RELATED_TOP_K, where)
        except Exception as e:
            logger.warning(f"⚠️ Error fetching related documents: {e}", exc_info=True)
            return None

        primary_ids = {r.id for r in primary}
        related = [
            replace(doc, similarity_score=similarity_score(doc.distance), is_related=True)
            for doc in candidates
            if doc.id not in primary_ids
        ]
        return related or None
