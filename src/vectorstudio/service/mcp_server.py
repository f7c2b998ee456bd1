"""FastMCP server exposing collection search and document storage as tools."""

import logging
import os
from typing import Any

from dotenv import load_dotenv
from fastmcp import FastMCP

from vectorstudio.constants import DEFAULT_TOP_K
from vectorstudio.service.actions import StudioActions

# Configure logging
log_level = os.getenv("LOG_LEVEL", "DEBUG")
logging.basicConfig(
    level=getattr(logging, log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()
logger.debug("Environment variables loaded for MCP server")

# Create FastMCP instance
mcp = FastMCP("Vector Studio")

_actions: StudioActions | None = None


def get_actions() -> StudioActions:
    """Return the shared actions, building them from the environment on first use."""
    global _actions
    if _actions is None:
        _actions = StudioActions.from_env()
    return _actions


def set_actions(actions: StudioActions | None) -> None:
    """Replace the shared actions (used by tests and embedding applications)."""
    global _actions
    _actions = actions


def _failed(result: dict[str, Any], tool: str) -> bool:
    if result.get("success"):
        return False
    logger.error(f"❌ MCP Tool {tool}: {result.get('error')}")
    return True


async def list_collections_impl() -> list[dict[str, Any]]:
    """List collections with their counts and metadata, or an empty list on failure."""
    logger.info("📂 MCP Tool list_collections: Fetching available collections")
    result = get_actions().list_collections()
    if _failed(result, "list_collections"):
        return []
    logger.info(f"✅ MCP Tool: Found {len(result['data'])} collections")
    return result["data"]


async def query_collection_impl(
    collection: str,
    query: str,
    top_k: int = DEFAULT_TOP_K,
    where: dict[str, Any] | None = None,
    include_related: bool = False,
) -> dict[str, Any]:
    """Run a similarity query and return the envelope without embeddings."""
    logger.debug(
        f"MCP Tool: Parameters - query='{query[:100]}...', "
        f"top_k={top_k}, collection={collection}"
    )
    result = get_actions().query_collection(
        collection, query, k=top_k, where=where, include_related=include_related
    )
    if _failed(result, "query_collection"):
        return result

    # Vectors are large and useless to a language model client
    for key in ("data", "related"):
        if key in result:
            result[key] = [{k: v for k, v in r.items() if k != "embedding"} for r in result[key]]
    logger.info(f"✅ MCP Tool: Returning {len(result['data'])} results to MCP client")
    return result


async def add_document_impl(
    collection: str,
    content: str,
    metadata: dict[str, Any] | None = None,
) -> dict[str, Any]:
    logger.info(f"📥 MCP Tool add_document: Storing a snippet in '{collection}'")
    result = get_actions().add_document(collection, {"content": content, "metadata": metadata})
    if not _failed(result, "add_document"):
        logger.info(f"✅ MCP Tool: Stored document {result['id']}")
    return result


async def get_collection_info_impl(collection: str) -> dict[str, Any]:
    result = get_actions().get_collection_info(collection)
    _failed(result, "get_collection_info")
    return result


@mcp.tool()
async def list_collections() -> list[dict[str, Any]]:
    """
    Lists all available document collections in the vector store, with
    their document counts, embedding dimension and metadata.

    Use this tool to discover what collections exist before querying
    or storing documents.
    """
    return await list_collections_impl()


@mcp.tool()
async def query_collection(
    collection: str,
    query: str,
    top_k: int = DEFAULT_TOP_K,
    where: dict[str, Any] | None = None,
    include_related: bool = False,
) -> dict[str, Any]:
    """
    Searches a collection for text chunks that are semantically similar to
    the query. Returns the top_k most relevant chunks with a 0-100
    similarity score. Use this tool to find information to answer a user's
    question.

    Args:
        collection: Name of the collection to search
        query: The search query text
        top_k: Number of top results to return (default: 5)
        where: Optional metadata filter, e.g. {"source": "paper.pdf"}
        include_related: Also return documents related to the best match
    """
    return await query_collection_impl(collection, query, top_k, where, include_related)


@mcp.tool()
async def add_document(
    collection: str,
    content: str,
    metadata: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Stores a text snippet in a collection. The snippet is embedded and
    stored as a single document; its id is returned.

    Args:
        collection: Name of an existing collection
        content: The text to store
        metadata: Optional flat metadata (string, number or boolean values)
    """
    return await add_document_impl(collection, content, metadata)


@mcp.tool()
async def get_collection_info(collection: str) -> dict[str, Any]:
    """
    Returns the document count, embedding dimension and metadata of a
    collection.

    Args:
        collection: Name of the collection
    """
    return await get_collection_info_impl(collection)


def main() -> None:
    """Entry point for the MCP server command-line interface."""
    host = os.getenv("MCP_HOST", "0.0.0.0")
    port = int(os.getenv("MCP_PORT", "8001"))
    logger.info(f"🚀 Starting Vector Studio MCP Server on {host}:{port}...")
    mcp.run(transport="sse", host=host, port=port)


if __name__ == "__main__":
    main()
