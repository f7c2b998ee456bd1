"""Application-wide constants and defaults for Vector Studio.

This module provides a single source of truth for configuration defaults,
magic numbers, and other constants used throughout the application.
"""

import os

# =============================================================================
# File Upload Limits
# =============================================================================
MAX_UPLOAD_SIZE_BYTES = 50 * 1024 * 1024  # 50MB
ALLOWED_UPLOAD_EXTENSIONS = {"pdf", "txt", "md", "markdown", "csv", "json"}

# =============================================================================
# Collections
# =============================================================================
COLLECTION_NAME_PATTERN = r"^[a-zA-Z0-9_-]+$"
DEFAULT_COLLECTION_NAME = "default_collection"
DEFAULT_PERSIST_DIRECTORY = "./chroma_db"
DEFAULT_DIMENSION = 1536
DISTANCE_SPACE = "cosine"

# =============================================================================
# Chunking
# =============================================================================
DEFAULT_CHUNK_SIZE = 800
DEFAULT_CHUNK_OVERLAP = 80
# Upload processing uses larger windows than interactive adds
DEFAULT_INGEST_CHUNK_SIZE = 1000
DEFAULT_INGEST_CHUNK_OVERLAP = 200
PROCESSING_METHODS = {
    "default": "Default Text Splitting",
    "recursive": "Recursive Character Splitting",
    "markdown": "Markdown Aware",
}

# =============================================================================
# Retrieval
# =============================================================================
DEFAULT_TOP_K = 5  # Default number of results for vector search
RELATED_TOP_K = 3  # Results requested by the related-documents pass

# =============================================================================
# Display Settings
# =============================================================================
CONTENT_PREVIEW_LENGTH = 200  # Characters to show in content previews

# =============================================================================
# Default URLs and Hosts
# =============================================================================
DEFAULT_OLLAMA_HOST = "http://localhost:11434"
DEFAULT_CHROMA_URL = "http://localhost:8000"
DEFAULT_UPLOAD_FOLDER = "/tmp/vectorstudio_uploads"

# =============================================================================
# Embedding Model Defaults
# =============================================================================
EMBEDDING_DEFAULTS = {
    "ollama": "mxbai-embed-large",
    "gemini": "text-embedding-004",
}
DEFAULT_EMBEDDING_CONCURRENCY = 4


def get_embedding_model(service: str | None = None) -> str:
    """Get the default embedding model for a given embedding service.

    Checks the EMBEDDING_MODEL environment variable first, then falls back
    to service-specific defaults.

    Args:
        service: The embedding service name ("ollama" or "gemini").
                If None, uses EMBEDDING_SERVICE env var or defaults to "ollama".

    Returns:
        str: The embedding model name to use.
    """
    # Environment variable takes precedence
    env_model = os.getenv("EMBEDDING_MODEL")
    if env_model:
        return env_model

    # Determine service if not provided
    if service is None:
        service = os.getenv("EMBEDDING_SERVICE", "ollama")

    # Return service-specific default
    return EMBEDDING_DEFAULTS.get(service, EMBEDDING_DEFAULTS["ollama"])


def get_reserved_collections() -> set[str]:
    """Get collection names hidden from listings.

    Returns:
        set[str]: Names from STUDIO_RESERVED_COLLECTIONS (comma separated),
            defaulting to the internal default collection.
    """
    raw = os.getenv("STUDIO_RESERVED_COLLECTIONS", DEFAULT_COLLECTION_NAME)
    return {name.strip() for name in raw.split(",") if name.strip()}
