"""Flask web application exposing the vector studio JSON API.

This module wires the collection, document, upload and health blueprints to
a StudioActions instance built from the environment (Chroma server plus the
configured embedding service).
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from vectorstudio.client.routes import (
    collections_bp,
    documents_bp,
    health_bp,
    init_config,
    upload_bp,
)
from vectorstudio.constants import DEFAULT_UPLOAD_FOLDER, MAX_UPLOAD_SIZE_BYTES
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
logger.debug("Environment variables loaded")

# Create Flask app
app = Flask(__name__)
logger.debug("Flask app created")

# Configure upload settings
UPLOAD_FOLDER = Path(os.getenv("UPLOAD_FOLDER", DEFAULT_UPLOAD_FOLDER))
app.config["MAX_CONTENT_LENGTH"] = MAX_UPLOAD_SIZE_BYTES

# Register blueprints
app.register_blueprint(health_bp)
app.register_blueprint(collections_bp)
app.register_blueprint(documents_bp)
app.register_blueprint(upload_bp)


def initialize_services(actions: StudioActions | None = None) -> None:
    """Initialize the vector store and embedding services on startup.

    Args:
        actions: Prebuilt actions to use instead of building them from the environment
    """
    logger.info("🔧 Initializing services...")

    if actions is None:
        actions = StudioActions.from_env()
    logger.info("✅ Vector store and embedding service initialized")

    UPLOAD_FOLDER.mkdir(parents=True, exist_ok=True)
    init_config(actions=actions, upload_folder=UPLOAD_FOLDER)


def create_app(actions: StudioActions | None = None) -> Flask:
    """Factory function for creating the Flask application.

    This function is used by WSGI servers like gunicorn to create the app.
    It initializes services before returning the app instance.

    Args:
        actions: Optional prebuilt actions (tests pass one backed by an in-process store)

    Returns:
        Flask: The configured Flask application instance
    """
    initialize_services(actions)
    return app


def main() -> None:
    """Entry point for the Flask application command-line interface."""
    print("🚀 Starting Vector Studio Flask application...")

    print("📦 Initializing services...")
    initialize_services()
    print("✅ Services initialized successfully")

    host = os.getenv("FLASK_HOST", "0.0.0.0")
    port = int(os.getenv("FLASK_PORT", "5000"))
    debug = os.getenv("FLASK_ENV", "development") == "development"

    print(f"🌐 Starting Flask server on http://{host}:{port}")
    print(f"🔧 Debug mode: {debug}")
    print("📝 Press CTRL+C to quit")

    app.run(host=host, port=port, debug=debug)


if __name__ == "__main__":
    main()
