"""Thin adapter over the Chroma client for collection and item operations."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import chromadb
import httpx
from chromadb.api import ClientAPI
from chromadb.errors import NotFoundError

from vectorstudio.service.errors import CollectionNotFound, StoreUnavailable
from vectorstudio.service.models import QueryResult
from vectorstudio.service.store.config import ChromaConfig

logger = logging.getLogger(__name__)

# Chroma rejects distance-function changes on an existing collection
_IMMUTABLE_METADATA_PREFIX = "hnsw:"
DISTANCE_METADATA_KEY = "hnsw:space"


@contextmanager
def translate_store_errors(action: str) -> Iterator[None]:
    """Map Chroma and transport failures onto the studio error types.

    Args:
        action: Description of the operation, used in error messages
    """
    try:
        yield
    except NotFoundError as e:
        raise CollectionNotFound(str(e)) from e
    except (httpx.TransportError, ConnectionError) as e:
        raise StoreUnavailable(f"Vector store unavailable during {action}: {e}") from e


def create_chroma_client(url: str | None = None) -> ClientAPI:
    """Create a Chroma HTTP client.

    Args:
        url: Chroma server URL (defaults to value from ChromaConfig.get_url())

    Returns:
        ClientAPI: Connected Chroma client

    Raises:
        StoreUnavailable: If the server cannot be reached
    """
    if url is None:
        url = ChromaConfig.get_url()

    host, port, ssl = ChromaConfig.parse_url(url)
    headers = {}
    token = ChromaConfig.get_auth_token()
    if token:
        headers["Authorization"] = f"Bearer {token}"

    logger.info(f"🔌 Connecting to Chroma at {url}")
    with translate_store_errors("connect"):
        try:
            return chromadb.HttpClient(host=host, port=port, ssl=ssl, headers=headers)
        except ValueError as e:
            # chromadb reports an unreachable server as a ValueError on connect
            raise StoreUnavailable(f"Could not connect to Chroma at {url}: {e}") from e


def _to_vector(values: Any) -> list[float]:
    if hasattr(values, "tolist"):
        values = values.tolist()
    return [float(v) for v in values]


def _column(result: Any, key: str) -> list:
    value = result.get(key) if result is not None else None
    return [] if value is None else list(value)


def _configured_space(collection: Any) -> str | None:
    config = getattr(collection, "configuration_json", None)
    if not isinstance(config, dict):
        return None
    for section in ("hnsw", "spann"):
        index = config.get(section)
        if isinstance(index, dict) and index.get("space"):
            return index["space"]
    return None


class CollectionHandle:
    """Item-level operations on one Chroma collection."""

    def __init__(self, collection: Any) -> None:
        self._collection = collection

    @property
    def name(self) -> str:
        return self._collection.name

    @property
    def metadata(self) -> dict[str, Any]:
        """Collection metadata, including the index distance space.

        Chroma drops hnsw: keys from the stored metadata on modify, so the
        space is read back from the index configuration when it is missing.
        """
        metadata = dict(self._collection.metadata or {})
        if DISTANCE_METADATA_KEY not in metadata:
            space = _configured_space(self._collection)
            if space:
                metadata[DISTANCE_METADATA_KEY] = space
        return metadata

    def count(self) -> int:
        with translate_store_errors(f"count on '{self.name}'"):
            return self._collection.count()

    def add(
        self,
        ids: list[str],
        embeddings: list[list[float]],
        metadatas: list[dict[str, Any]],
        documents: list[str],
    ) -> None:
        with translate_store_errors(f"add to '{self.name}'"):
            self._collection.add(
                ids=ids, embeddings=embeddings, metadatas=metadatas, documents=documents
            )

    def get(
        self,
        ids: list[str] | None = None,
        where: dict[str, Any] | None = None,
        include: list[str] | None = None,
    ) -> dict[str, list]:
        """Fetch stored items.

        Returns:
            dict: Columns "ids", "documents", "metadatas", "embeddings" as plain lists
        """
        kwargs: dict[str, Any] = {}
        if ids is not None:
            kwargs["ids"] = ids
        if where:
            kwargs["where"] = where
        if include is not None:
            kwargs["include"] = include

        with translate_store_errors(f"get from '{self.name}'"):
            result = self._collection.get(**kwargs)

        return {
            "ids": _column(result, "ids"),
            "documents": _column(result, "documents"),
            "metadatas": [dict(m or {}) for m in _column(result, "metadatas")],
            "embeddings": [_to_vector(e) for e in _column(result, "embeddings")],
        }

    def get_ids(self) -> set[str]:
        """Return every id stored in the collection."""
        return set(self.get(include=[])["ids"])

    def query(
        self,
        query_embedding: list[float],
        k: int,
        where: dict[str, Any] | None = None,
    ) -> list[QueryResult]:
        """Run a nearest-neighbour query.

        Args:
            query_embedding: The query vector
            k: Number of results to return
            where: Optional metadata filter

        Returns:
            list[QueryResult]: Results nearest first, with distances and embeddings
        """
        with translate_store_errors(f"query on '{self.name}'"):
            result = self._collection.query(
                query_embeddings=[query_embedding],
                n_results=k,
                where=where or None,
                include=["embeddings", "documents", "distances", "metadatas"],
            )

        documents = _column(result, "documents")
        if not documents:
            return []

        rows = list(documents[0] or [])
        metadatas = (_column(result, "metadatas") or [[]])[0] or []
        distances = (_column(result, "distances") or [[]])[0]
        embeddings = (_column(result, "embeddings") or [[]])[0]
        distances = [] if distances is None else list(distances)
        embeddings = [] if embeddings is None else list(embeddings)

        results = []
        for i, document in enumerate(rows):
            results.append(
                QueryResult(
                    page_content=document or "",
                    metadata=dict(metadatas[i] or {}) if i < len(metadatas) else {},
                    embedding=_to_vector(embeddings[i]) if i < len(embeddings) else None,
                    distance=float(distances[i]) if i < len(distances) else None,
                )
            )
        return results

    def update(
        self,
        ids: list[str],
        embeddings: list[list[float]],
        documents: list[str],
        metadatas: list[dict[str, Any]],
    ) -> None:
        with translate_store_errors(f"update in '{self.name}'"):
            self._collection.update(
                ids=ids, embeddings=embeddings, documents=documents, metadatas=metadatas
            )

    def delete(self, where: dict[str, Any]) -> None:
        with translate_store_errors(f"delete from '{self.name}'"):
            self._collection.delete(where=where)

    def modify_metadata(self, metadata: dict[str, Any]) -> None:
        """Replace the collection metadata, leaving index settings untouched."""
        mutable = {
            key: value
            for key, value in metadata.items()
            if not key.startswith(_IMMUTABLE_METADATA_PREFIX) and value is not None
        }
        with translate_store_errors(f"modify metadata of '{self.name}'"):
            self._collection.modify(metadata=mutable)


class VectorStore:
    """Collection lifecycle operations against an injected Chroma client."""

    def __init__(self, client: ClientAPI) -> None:
        self.client = client

    @classmethod
    def from_env(cls) -> "VectorStore":
        """Build a store connected to the Chroma server configured in the environment."""
        return cls(create_chroma_client())

    def heartbeat(self) -> int:
        with translate_store_errors("heartbeat"):
            return self.client.heartbeat()

    def list_collections(self) -> list[str]:
        """Return the names of all collections, sorted."""
        with translate_store_errors("list collections"):
            collections = self.client.list_collections()
        names = [c if isinstance(c, str) else c.name for c in collections]
        return sorted(names)

    def collection_exists(self, name: str) -> bool:
        return name in self.list_collections()

    def get_collection(self, name: str) -> CollectionHandle:
        """Open an existing collection.

        Raises:
            CollectionNotFound: If the collection does not exist
        """
        with translate_store_errors(f"get collection '{name}'"):
            return CollectionHandle(self.client.get_collection(name=name))

    def create_or_get_collection(self, name: str, metadata: dict[str, Any]) -> CollectionHandle:
        with translate_store_errors(f"create collection '{name}'"):
            return CollectionHandle(
                self.client.get_or_create_collection(name=name, metadata=metadata)
            )

    def delete_collection(self, name: str) -> None:
        with translate_store_errors(f"delete collection '{name}'"):
            self.client.delete_collection(name=name)
