"""Collection lifecycle and document ingestion for one named collection."""

import logging
import uuid
from collections.abc import Callable
from datetime import datetime
from enum import Enum
from typing import Any

from vectorstudio.constants import (
    DEFAULT_CHUNK_OVERLAP,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_COLLECTION_NAME,
    DEFAULT_DIMENSION,
    DEFAULT_PERSIST_DIRECTORY,
    DISTANCE_SPACE,
)
from vectorstudio.embeddings.base import EmbeddingService
from vectorstudio.service.chunking import TextSplitter, calculate_chunk_ids
from vectorstudio.service.errors import (
    CollectionNotFound,
    CollectionStateError,
    DocumentNotFound,
    ValidationError,
)
from vectorstudio.service.models import (
    CollectionInfo,
    Document,
    Metadata,
    QueryResult,
    clean_metadata,
)
from vectorstudio.service.store import CollectionHandle, VectorStore
from vectorstudio.service.utils import run_non_fatal, utc_now

logger = logging.getLogger(__name__)


class CollectionState(Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    DELETED = "deleted"


class CollectionManager:
    """Owns the lifecycle of one collection and the documents stored in it.

    The manager starts uninitialized; initialize() creates or opens the
    collection. After delete_collection() no further operation is valid.
    Chunk contents are never cached: the store is the source of truth.
    """

    def __init__(
        self,
        store: VectorStore,
        embedder: EmbeddingService,
        collection_name: str = DEFAULT_COLLECTION_NAME,
        persist_directory: str = DEFAULT_PERSIST_DIRECTORY,
        dimension: int = DEFAULT_DIMENSION,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        chunk_overlap: int = DEFAULT_CHUNK_OVERLAP,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the manager.

        Args:
            store: Vector store adapter
            embedder: Embedding service used for documents and updates
            collection_name: Name of the managed collection
            persist_directory: Directory recorded in new collection metadata
            dimension: Embedding dimension recorded in new collection metadata
            chunk_size: Characters per chunk when splitting documents
            chunk_overlap: Characters shared by consecutive chunks
            clock: Source of the created/updated timestamps
        """
        self.store = store
        self.embedder = embedder
        self.collection_name = collection_name
        self.persist_directory = persist_directory
        self.dimension = dimension
        self.text_splitter = TextSplitter(chunk_size=chunk_size, chunk_overlap=chunk_overlap)
        self.clock = clock
        self.state = CollectionState.UNINITIALIZED
        self._collection: CollectionHandle | None = None

    def _now(self) -> str:
        return self.clock().isoformat()

    def _require_initialized(self) -> CollectionHandle:
        if self.state is CollectionState.DELETED:
            raise CollectionStateError(f"Collection '{self.collection_name}' has been deleted")
        if self.state is CollectionState.UNINITIALIZED or self._collection is None:
            raise CollectionStateError(
                f"Collection '{self.collection_name}' is not initialized; call initialize() first"
            )
        return self._collection

    def initialize(self) -> None:
        """Create the collection if absent, otherwise open it.

        New collections get cosine distance, the persist directory, the
        dimension and equal created/updated timestamps. Existing collections
        missing a created timestamp get both timestamps backfilled. Calling
        this again does not reset timestamps.
        """
        if self.state is CollectionState.DELETED:
            raise CollectionStateError(f"Collection '{self.collection_name}' has been deleted")

        if self.store.collection_exists(self.collection_name):
            collection = self.store.get_collection(self.collection_name)
            metadata = collection.metadata
            if not metadata.get("created"):
                now = self._now()
                logger.info(f"🕒 Backfilling timestamps for '{self.collection_name}'")
                collection.modify_metadata({**metadata, "created": now, "updated": now})
        else:
            now = self._now()
            logger.info(
                f"📁 Creating collection '{self.collection_name}' (dimension={self.dimension})"
            )
            collection = self.store.create_or_get_collection(
                self.collection_name,
                {
                    "hnsw:space": DISTANCE_SPACE,
                    "persist_directory": self.persist_directory,
                    "dimension": self.dimension,
                    "created": now,
                    "updated": now,
                },
            )

        self._collection = collection
        self.state = CollectionState.INITIALIZED

    def _refresh_collection(self) -> CollectionHandle:
        # Handles cache metadata, so reopen to see the latest values
        self._collection = self.store.get_collection(self.collection_name)
        return self._collection

    def _touch_updated(self) -> None:
        collection = self._refresh_collection()
        collection.modify_metadata({**collection.metadata, "updated": self._now()})

    def add_documents(self, documents: list[Document], update_existing: bool = True) -> int:
        """Chunk, identify, embed and insert documents.

        A single document that already carries an id is stored as-is;
        anything else is split and assigned chunk ids. With update_existing,
        chunks whose id is already stored are skipped before embedding.

        Args:
            documents: Documents to add
            update_existing: Skip chunks whose id already exists in the store

        Returns:
            int: Number of chunks inserted
        """
        collection = self._require_initialized()
        if not documents:
            return 0

        should_split = len(documents) > 1 or not documents[0].metadata.get("id")
        if should_split:
            chunks = calculate_chunk_ids(self.text_splitter.split_documents(documents))
        else:
            chunks = list(documents)

        if update_existing:
            existing_ids = collection.get_ids()
            chunks = [c for c in chunks if str(c.metadata["id"]) not in existing_ids]

        if not chunks:
            logger.info(f"ℹ️ No new chunks to add to '{self.collection_name}'")
            return 0

        self._add_chunks(collection, chunks)
        logger.info(f"✅ Added {len(chunks)} chunk(s) to '{self.collection_name}'")
        run_non_fatal("Refreshing collection timestamp", self._touch_updated)
        return len(chunks)

    def _add_chunks(self, collection: CollectionHandle, chunks: list[Document]) -> None:
        try:
            metadatas = [clean_metadata(c.metadata) for c in chunks]
        except TypeError as e:
            raise ValidationError(str(e)) from e

        embeddings = self.embedder.embed([c.page_content for c in chunks])
        collection.add(
            ids=[str(c.metadata["id"]) for c in chunks],
            embeddings=embeddings,
            metadatas=metadatas,
            documents=[c.page_content for c in chunks],
        )

    def add_text_document(self, content: str, metadata: Metadata | None = None) -> str:
        """Store a single text snippet without chunking.

        Args:
            content: The snippet text
            metadata: Optional user metadata; "source" defaults to "user-input"

        Returns:
            str: The id of the stored snippet
        """
        metadata = dict(metadata or {})
        doc_id = str(metadata.get("id") or uuid.uuid4())
        metadata.setdefault("source", "user-input")
        metadata.setdefault("timestamp", self._now())
        metadata["id"] = doc_id

        self.add_documents([Document(page_content=content, metadata=metadata)])
        return doc_id

    def update_document(self, doc_id: str, new_text: str) -> None:
        """Replace a chunk's content and embedding, keeping its metadata.

        Raises:
            DocumentNotFound: If no stored chunk has this id
        """
        collection = self._require_initialized()
        existing = collection.get(where={"id": doc_id}, include=["metadatas"])
        if not existing["ids"]:
            raise DocumentNotFound(f"Document not found: {doc_id}")

        embedding = self.embedder.embed([new_text])[0]
        metadata = existing["metadatas"][0] if existing["metadatas"] else {}
        collection.update(
            ids=[existing["ids"][0]],
            embeddings=[embedding],
            documents=[new_text],
            metadatas=[metadata],
        )
        logger.info(f"✏️ Updated document '{doc_id}' in '{self.collection_name}'")
        run_non_fatal("Refreshing collection timestamp", self._touch_updated)

    def delete_document(self, doc_id: str) -> None:
        """Delete the chunk carrying this id."""
        self._require_initialized().delete(where={"id": doc_id})
        logger.info(f"🗑️ Deleted document '{doc_id}' from '{self.collection_name}'")
        run_non_fatal("Refreshing collection timestamp", self._touch_updated)

    def delete_collection(self) -> None:
        """Remove the collection and all its chunks. Terminal for this manager."""
        self._require_initialized()
        self.store.delete_collection(self.collection_name)
        self._collection = None
        self.state = CollectionState.DELETED
        logger.info(f"🗑️ Deleted collection '{self.collection_name}'")

    def get_collection_info(self) -> CollectionInfo:
        """Return name, live count, dimension and metadata of the collection."""
        self._require_initialized()
        return describe_collection(self.collection_name, self._refresh_collection())

    def update_metadata(self, metadata: dict[str, Any]) -> dict[str, Any]:
        """Merge user metadata into the collection metadata.

        The created timestamp is kept (or set if missing) and updated is set
        to now.

        Returns:
            dict: The metadata that was written
        """
        self._require_initialized()
        collection = self._refresh_collection()
        existing = collection.metadata
        now = self._now()
        merged = {
            **existing,
            **metadata,
            "updated": now,
            "created": existing.get("created") or now,
        }
        try:
            collection.modify_metadata(clean_metadata(merged))
        except TypeError as e:
            raise ValidationError(str(e)) from e
        return self._refresh_collection().metadata

    def get_all_documents(self) -> list[QueryResult]:
        """Return every stored chunk with content, metadata and embedding."""
        results = self._require_initialized().get(include=["embeddings", "documents", "metadatas"])
        documents = []
        for i, content in enumerate(results["documents"]):
            metadata = results["metadatas"][i] if i < len(results["metadatas"]) else {}
            if not metadata.get("id"):
                metadata = {**metadata, "id": str(uuid.uuid4())}
            embedding = results["embeddings"][i] if i < len(results["embeddings"]) else None
            documents.append(
                QueryResult(page_content=content or "", metadata=metadata, embedding=embedding)
            )
        return documents


def describe_collection(name: str, collection: CollectionHandle) -> CollectionInfo:
    """Build a CollectionInfo from an open collection without modifying it."""
    metadata = collection.metadata
    dimension = metadata.get("dimension")
    return CollectionInfo(
        name=name,
        count=collection.count(),
        dimension=dimension if isinstance(dimension, int) else DEFAULT_DIMENSION,
        metadata=metadata,
    )


def open_collection(
    store: VectorStore,
    embedder: EmbeddingService,
    name: str,
    **kwargs: Any,
) -> CollectionManager:
    """Build a manager for an existing collection and initialize it.

    Raises:
        CollectionNotFound: If the collection does not exist
    """
    if not store.collection_exists(name):
        raise CollectionNotFound(f"Collection '{name}' does not exist")
    manager = CollectionManager(store, embedder, collection_name=name, **kwargs)
    manager.initialize()
    return manager
