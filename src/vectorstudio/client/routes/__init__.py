"""Flask route blueprints for the vectorstudio client application."""

from vectorstudio.client.routes.collections import collections_bp
from vectorstudio.client.routes.config import get_config, init_config
from vectorstudio.client.routes.documents import documents_bp
from vectorstudio.client.routes.health import health_bp
from vectorstudio.client.routes.upload import upload_bp

__all__ = [
    "collections_bp",
    "documents_bp",
    "health_bp",
    "upload_bp",
    "init_config",
    "get_config",
]
