"""Collection administration and query API routes."""

import logging

from flask import Blueprint, request

from vectorstudio.client.routes.responses import envelope_response, get_actions
from vectorstudio.constants import DEFAULT_DIMENSION, DEFAULT_TOP_K

logger = logging.getLogger(__name__)

collections_bp = Blueprint("collections", __name__)


@collections_bp.route("/api/collections", methods=["GET"])
def list_collections():
    """List every non-reserved collection with its count and metadata."""
    logger.info("📂 Fetching collections")
    return envelope_response(get_actions().list_collections())


@collections_bp.route("/api/collections", methods=["POST"])
def create_collection():
    """Create a collection.

    Request:
        {"name": "papers", "dimension": 768}

    Returns:
        201 with the new collection info, 409 if the name is taken
    """
    data = request.get_json(silent=True) or {}
    logger.info(f"📁 Received create request for '{data.get('name')}'")
    result = get_actions().create_collection(
        data.get("name"), data.get("dimension", DEFAULT_DIMENSION)
    )
    return envelope_response(result, success_status=201)


@collections_bp.route("/api/collections/<name>", methods=["GET"])
def get_collection(name: str):
    return envelope_response(get_actions().get_collection_info(name))


@collections_bp.route("/api/collections/<name>", methods=["DELETE"])
def delete_collection(name: str):
    logger.info(f"🗑️ Received delete request for '{name}'")
    return envelope_response(get_actions().delete_collection(name))


@collections_bp.route("/api/collections/<name>/metadata", methods=["PUT"])
def update_metadata(name: str):
    """Merge metadata into a collection.

    Request:
        {"metadata": {"description": "..."}}
    """
    data = request.get_json(silent=True) or {}
    return envelope_response(get_actions().update_collection_metadata(name, data.get("metadata")))


@collections_bp.route("/api/collections/<name>/query", methods=["POST"])
def query_collection(name: str):
    """Run a similarity query against a collection.

    Request:
        {
            "query": "What is quantum entanglement?",
            "nResults": 5,  # Optional, default 5
            "where": {"source": "paper.pdf"},  # Optional metadata filter
            "includeRelated": true  # Optional, default false
        }

    Response:
        {
            "success": true,
            "data": [{"pageContent": "...", "similarityScore": 87, ...}],
            "related": [...]  # Only when related documents were found
        }
    """
    data = request.get_json(silent=True) or {}
    result = get_actions().query_collection(
        name,
        data.get("query"),
        k=data.get("nResults", DEFAULT_TOP_K),
        where=data.get("where") or None,
        include_related=bool(data.get("includeRelated", False)),
    )
    return envelope_response(result)
