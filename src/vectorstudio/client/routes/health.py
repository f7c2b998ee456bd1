"""Health check and vector store connection routes."""

import logging

from flask import Blueprint, jsonify

from vectorstudio.client.routes.config import get_config
from vectorstudio.client.routes.responses import envelope_response, get_actions

logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__)


@health_bp.route("/health", methods=["GET"])
def health():
    """Health check endpoint.

    Returns:
        JSON with service status
    """
    return jsonify(
        {
            "status": "healthy",
            "actions": "initialized" if get_config().actions else "not initialized",
        }
    )


@health_bp.route("/api/connection", methods=["GET"])
def test_connection():
    """Check that the vector store answers a heartbeat."""
    logger.info("🔌 Checking vector store connection...")
    return envelope_response(get_actions().test_connection())
