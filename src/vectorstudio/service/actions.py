"""Administrative operations exposed to the web API, CLI and MCP server.

Every method returns an envelope dict: {"success": True, ...} on success or
{"success": False, "error": message, "code": kind} on failure. Exceptions
never escape these methods.
"""

import logging
import os
import re
from collections.abc import Callable
from functools import wraps
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from vectorstudio.constants import (
    COLLECTION_NAME_PATTERN,
    DEFAULT_DIMENSION,
    DEFAULT_INGEST_CHUNK_OVERLAP,
    DEFAULT_INGEST_CHUNK_SIZE,
    DEFAULT_TOP_K,
    PROCESSING_METHODS,
    get_reserved_collections,
)
from vectorstudio.embeddings import EmbeddingService, get_embedding_service
from vectorstudio.service.errors import (
    CollectionAlreadyExists,
    CollectionNotFound,
    StudioError,
    ValidationError,
)
from vectorstudio.service.ingest import load_file_documents
from vectorstudio.service.manager import CollectionManager, describe_collection, open_collection
from vectorstudio.service.models import Document
from vectorstudio.service.retrieval import QueryService
from vectorstudio.service.store import ChromaConfig, VectorStore
from vectorstudio.service.utils import utc_now

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

_NAME_RE = re.compile(COLLECTION_NAME_PATTERN)


def failure(error: Exception) -> dict[str, Any]:
    """Build the failure envelope for an exception."""
    code = error.code if isinstance(error, StudioError) else "internal"
    return {"success": False, "error": str(error) or type(error).__name__, "code": code}


def envelope(label: str) -> Callable:
    """Decorator converting any exception raised by an action into a failure envelope.

    Args:
        label: Human-readable action name used in log messages
    """

    def decorator(func: Callable[..., dict[str, Any]]) -> Callable[..., dict[str, Any]]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> dict[str, Any]:
            try:
                return func(*args, **kwargs)
            except ValidationError as e:
                logger.warning(f"❌ {label}: {e}")
                return failure(e)
            except StudioError as e:
                logger.error(f"❌ {label} failed: {e}")
                return failure(e)
            except Exception as e:
                logger.error(f"❌ {label} failed: {type(e).__name__}: {e}", exc_info=True)
                return failure(e)

        return wrapper

    return decorator


def require_text(value: Any, message: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(message)
    return value.strip()


def validate_collection_name(name: Any) -> str:
    """Check a collection name is present and matches the allowed pattern.

    Returns:
        str: The trimmed name
    """
    name = require_text(name, "Collection name is required")
    if not _NAME_RE.match(name):
        raise ValidationError(
            "Collection name may only contain letters, numbers, underscores and hyphens"
        )
    return name


class StudioActions:
    """Collection and document administration with uniform result envelopes."""

    def __init__(
        self,
        store: VectorStore,
        embedder: EmbeddingService,
        reserved_collections: set[str] | None = None,
        persist_directory: str | None = None,
        clock: Callable = utc_now,
    ) -> None:
        """Initialize the actions.

        Args:
            store: Vector store adapter
            embedder: Embedding service
            reserved_collections: Names hidden from list_collections
            persist_directory: Directory recorded in new collection metadata
            clock: Timestamp source passed to collection managers
        """
        self.store = store
        self.embedder = embedder
        self.reserved_collections = (
            get_reserved_collections() if reserved_collections is None else reserved_collections
        )
        self.persist_directory = persist_directory or ChromaConfig.get_persist_directory()
        self.clock = clock
        self.query_service = QueryService(store, embedder)

    @classmethod
    def from_env(cls) -> "StudioActions":
        """Build actions from the Chroma and embedding settings in the environment."""
        return cls(store=VectorStore.from_env(), embedder=get_embedding_service())

    def _open(self, name: str, **kwargs: Any) -> CollectionManager:
        return open_collection(
            self.store,
            self.embedder,
            name,
            persist_directory=self.persist_directory,
            clock=self.clock,
            **kwargs,
        )

    @envelope("Test connection")
    def test_connection(self) -> dict[str, Any]:
        heartbeat = self.store.heartbeat()
        return {"success": True, "data": {"heartbeat": heartbeat}}

    @envelope("Create collection")
    def create_collection(self, name: str, dimension: int = DEFAULT_DIMENSION) -> dict[str, Any]:
        name = validate_collection_name(name)
        try:
            dimension = int(dimension)
        except (TypeError, ValueError) as e:
            raise ValidationError("Dimension must be an integer") from e
        if dimension <= 0:
            raise ValidationError("Dimension must be positive")

        if self.store.collection_exists(name):
            raise CollectionAlreadyExists(f"Collection '{name}' already exists")

        manager = CollectionManager(
            self.store,
            self.embedder,
            collection_name=name,
            persist_directory=self.persist_directory,
            dimension=dimension,
            clock=self.clock,
        )
        manager.initialize()
        logger.info(f"✅ Created collection '{name}'")
        return {"success": True, "data": manager.get_collection_info().to_dict()}

    @envelope("Delete collection")
    def delete_collection(self, name: str) -> dict[str, Any]:
        manager = self._open(validate_collection_name(name))
        manager.delete_collection()
        return {"success": True}

    @envelope("List collections")
    def list_collections(self) -> dict[str, Any]:
        """List non-reserved collections. Read-only: no timestamps are backfilled."""
        infos = []
        for name in self.store.list_collections():
            if name in self.reserved_collections:
                continue
            try:
                collection = self.store.get_collection(name)
                infos.append(describe_collection(name, collection).to_dict())
            except CollectionNotFound:
                logger.warning(f"⚠️ Collection '{name}' disappeared while listing, skipping")
        logger.info(f"📂 Found {len(infos)} collection(s)")
        return {"success": True, "data": infos}

    @envelope("Get collection info")
    def get_collection_info(self, name: str) -> dict[str, Any]:
        manager = self._open(validate_collection_name(name))
        return {"success": True, "data": manager.get_collection_info().to_dict()}

    @envelope("Update collection metadata")
    def update_collection_metadata(self, name: str, metadata: Any) -> dict[str, Any]:
        name = validate_collection_name(name)
        if not isinstance(metadata, dict):
            raise ValidationError("Invalid metadata format")
        manager = self._open(name)
        return {"success": True, "data": manager.update_metadata(metadata)}

    @envelope("Get documents")
    def get_all_documents(self, collection_name: str) -> dict[str, Any]:
        manager = self._open(validate_collection_name(collection_name))
        return {"success": True, "data": [d.to_dict() for d in manager.get_all_documents()]}

    @envelope("Query collection")
    def query_collection(
        self,
        name: str,
        query: str,
        k: int = DEFAULT_TOP_K,
        where: dict[str, Any] | None = None,
        include_related: bool = False,
    ) -> dict[str, Any]:
        name = validate_collection_name(name)
        query = require_text(query, "Query text is required")
        try:
            k = int(k)
        except (TypeError, ValueError) as e:
            raise ValidationError("Number of results must be an integer") from e
        if k <= 0:
            raise ValidationError("Number of results must be positive")
        if where is not None and not isinstance(where, dict):
            raise ValidationError("Filter must be an object")

        self._open(name)
        result = self.query_service.query(
            name, query, k=k, where=where, include_related=include_related
        )

        response: dict[str, Any] = {
            "success": True,
            "data": [r.to_dict() for r in result.primary],
        }
        if result.related:
            response["related"] = [r.to_dict() for r in result.related]
        return response

    @envelope("Add document")
    def add_document(self, collection_name: str, document: dict[str, Any]) -> dict[str, Any]:
        collection_name = validate_collection_name(collection_name)
        if not isinstance(document, dict):
            raise ValidationError("Document content is required")
        content = require_text(document.get("content"), "Document content is required")
        metadata = document.get("metadata") or {}
        if not isinstance(metadata, dict):
            raise ValidationError("Invalid metadata format")

        manager = self._open(collection_name)
        try:
            doc_id = manager.add_text_document(content, metadata)
        except TypeError as e:
            raise ValidationError(str(e)) from e
        return {"success": True, "id": doc_id}

    @envelope("Update document")
    def update_document(
        self, collection_name: str, doc_id: str, new_content: str
    ) -> dict[str, Any]:
        collection_name = validate_collection_name(collection_name)
        doc_id = require_text(doc_id, "Document ID is required")
        new_content = require_text(new_content, "Document content is required")

        self._open(collection_name).update_document(doc_id, new_content)
        return {"success": True}

    @envelope("Delete document")
    def delete_document(self, collection_name: str, doc_id: str) -> dict[str, Any]:
        collection_name = validate_collection_name(collection_name)
        doc_id = require_text(doc_id, "Document ID is required")

        self._open(collection_name).delete_document(doc_id)
        return {"success": True}

    @envelope("Ingest files")
    def ingest_files(
        self,
        collection_name: str,
        file_refs: list[str | os.PathLike],
        chunk_size: int = DEFAULT_INGEST_CHUNK_SIZE,
        chunk_overlap: int = DEFAULT_INGEST_CHUNK_OVERLAP,
        processing_method: str = "default",
    ) -> dict[str, Any]:
        """Read files, chunk them and add the chunks to a collection.

        Files are processed in order; the first failing file stops the run
        and is named in the error. Files before it stay ingested.
        """
        collection_name = validate_collection_name(collection_name)
        if not file_refs:
            raise ValidationError("At least one file is required")
        if processing_method not in PROCESSING_METHODS:
            raise ValidationError(f"Unknown processing method '{processing_method}'")
        try:
            chunk_size, chunk_overlap = int(chunk_size), int(chunk_overlap)
        except (TypeError, ValueError) as e:
            raise ValidationError("Chunk size and overlap must be integers") from e

        manager = self._open(collection_name, chunk_size=chunk_size, chunk_overlap=chunk_overlap)

        chunks_added = 0
        files = []
        for ref in file_refs:
            path = Path(ref)
            base_metadata = {
                "uploaded_at": self.clock().isoformat(),
                "processing_method": processing_method,
                "chunk_size": chunk_size,
                "chunk_overlap": chunk_overlap,
            }
            try:
                documents: list[Document] = load_file_documents(path, base_metadata)
                added = manager.add_documents(documents)
            except StudioError as e:
                raise type(e)(f"Error processing file {path.name}: {e}") from e
            except Exception as e:
                raise StudioError(f"Error processing file {path.name}: {e}") from e

            logger.info(f"✅ Ingested {path.name}: {added} new chunk(s)")
            chunks_added += added
            files.append({"filename": path.name, "chunks": added})

        return {"success": True, "data": {"files": files, "chunks_added": chunks_added}}
