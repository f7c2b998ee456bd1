"""Document API routes for a single collection."""

import logging

from flask import Blueprint, request

from vectorstudio.client.routes.responses import envelope_response, get_actions

logger = logging.getLogger(__name__)

documents_bp = Blueprint("documents", __name__)


@documents_bp.route("/api/collections/<name>/documents", methods=["GET"])
def list_documents(name: str):
    """Return every chunk stored in the collection, embeddings included."""
    return envelope_response(get_actions().get_all_documents(name))


@documents_bp.route("/api/collections/<name>/documents", methods=["POST"])
def add_document(name: str):
    """Add a text snippet without chunking.

    Request:
        {"content": "Some text", "metadata": {"author": "..."}}

    Returns:
        201 with the id assigned to the snippet
    """
    data = request.get_json(silent=True) or {}
    logger.info(f"📝 Adding document to '{name}'")
    return envelope_response(get_actions().add_document(name, data), success_status=201)


@documents_bp.route("/api/collections/<name>/documents/<doc_id>", methods=["PUT"])
def update_document(name: str, doc_id: str):
    """Replace a document's content.

    Request:
        {"content": "New text"}
    """
    data = request.get_json(silent=True) or {}
    return envelope_response(get_actions().update_document(name, doc_id, data.get("content")))


@documents_bp.route("/api/collections/<name>/documents/<doc_id>", methods=["DELETE"])
def delete_document(name: str, doc_id: str):
    return envelope_response(get_actions().delete_document(name, doc_id))
