"""Turn action envelopes into Flask JSON responses."""

from typing import Any

from flask import Response, jsonify

from vectorstudio.client.routes.config import get_config
from vectorstudio.service.actions import StudioActions

STATUS_BY_CODE = {
    "validation": 400,
    "not_found": 404,
    "already_exists": 409,
    "unavailable": 503,
    "internal": 500,
}


def envelope_response(result: dict[str, Any], success_status: int = 200) -> tuple[Response, int]:
    """Serialize an envelope with the HTTP status matching its outcome.

    Args:
        result: Envelope returned by a StudioActions method
        success_status: Status used when the envelope reports success

    Returns:
        Tuple of (JSON response, status code)
    """
    if result.get("success"):
        return jsonify(result), success_status
    return jsonify(result), STATUS_BY_CODE.get(result.get("code"), 500)


def get_actions() -> StudioActions:
    """Return the configured actions, failing loudly when the app was not initialized."""
    actions = get_config().actions
    if actions is None:
        raise RuntimeError("Route configuration has no actions; call init_config() first")
    return actions
