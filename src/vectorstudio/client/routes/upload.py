"""Upload API routes for document ingestion."""

import logging
from pathlib import Path

from flask import Blueprint, jsonify, request
from werkzeug.utils import secure_filename

from vectorstudio.client.routes.config import get_config
from vectorstudio.client.routes.responses import envelope_response, get_actions
from vectorstudio.constants import DEFAULT_INGEST_CHUNK_OVERLAP, DEFAULT_INGEST_CHUNK_SIZE

logger = logging.getLogger(__name__)

upload_bp = Blueprint("upload", __name__)


def allowed_file(filename: str) -> bool:
    """Check if the file extension is allowed.

    Args:
        filename: The filename to check

    Returns:
        True if extension is allowed, False otherwise
    """
    allowed_extensions = get_config().allowed_extensions
    return "." in filename and filename.rsplit(".", 1)[1].lower() in allowed_extensions


def _validation_error(message: str):
    logger.warning(f"❌ {message}")
    return jsonify({"success": False, "error": message, "code": "validation"}), 400


@upload_bp.route("/api/collections/<name>/upload", methods=["POST"])
def upload_documents(name: str):
    """Handle document upload and ingestion into a collection.

    Expects multipart form data with:
        - files: One or more files (pdf, txt, md, markdown, csv, json)
        - chunkSize: Optional characters per chunk (default: 1000)
        - chunkOverlap: Optional overlap between chunks (default: 200)
        - processingMethod: Optional "default", "recursive" or "markdown"

    Returns:
        JSON envelope with per-file chunk counts and the total added
    """
    logger.info(f"📤 Received document upload request for '{name}'")

    if "files" not in request.files:
        return _validation_error("No files provided")

    files = [f for f in request.files.getlist("files") if f.filename]
    if not files:
        return _validation_error("No files selected")

    rejected = [f.filename for f in files if not allowed_file(f.filename)]
    if rejected:
        return _validation_error(f"File type not allowed: {', '.join(rejected)}")

    upload_folder = Path(get_config().upload_folder) / secure_filename(name)
    upload_folder.mkdir(parents=True, exist_ok=True)

    saved: list[Path] = []
    try:
        for file in files:
            filepath = upload_folder / secure_filename(file.filename)
            file.save(filepath)
            saved.append(filepath)
            logger.info(f"💾 Saved file: {filepath}")

        result = get_actions().ingest_files(
            name,
            saved,
            chunk_size=request.form.get("chunkSize", DEFAULT_INGEST_CHUNK_SIZE),
            chunk_overlap=request.form.get("chunkOverlap", DEFAULT_INGEST_CHUNK_OVERLAP),
            processing_method=request.form.get("processingMethod", "default"),
        )
    finally:
        # Clean up temporary files
        for filepath in saved:
            filepath.unlink(missing_ok=True)

    return envelope_response(result)
