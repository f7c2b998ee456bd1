"""File loading for the ingestion pipeline.

Turns uploaded files into Documents ready to be chunked and embedded.
PDFs are read page by page with PyMuPDF; plain-text formats are read as UTF-8.
"""

import logging
from pathlib import Path
from typing import Any

import fitz  # PyMuPDF

from vectorstudio.service.errors import ValidationError
from vectorstudio.service.models import Document

logger = logging.getLogger(__name__)

UNSUPPORTED_EXTENSIONS = {".doc", ".docx"}


def extract_pages_from_pdf(pdf_path: Path) -> list[str]:
    """Extract the text of each page of a PDF file.

    Args:
        pdf_path: Path to the PDF file

    Returns:
        list[str]: Text per page, in page order
    """
    doc = fitz.open(pdf_path)
    try:
        return [page.get_text() for page in doc]
    finally:
        doc.close()


def read_text_file(path: Path) -> str:
    """Read a text file as UTF-8, replacing undecodable bytes."""
    return path.read_text(encoding="utf-8", errors="replace")


def load_file_documents(path: Path, base_metadata: dict[str, Any] | None = None) -> list[Document]:
    """Load a file into Documents.

    PDFs yield one Document per page with a "page" index; other supported
    files yield a single Document. Every Document carries base_metadata
    plus "source" (the filename) and "file_type" (the extension).

    Args:
        path: Path to the file
        base_metadata: Metadata shared by every Document from this file

    Returns:
        list[Document]: Documents in page order

    Raises:
        ValidationError: If the file is missing or its format is not supported
    """
    if not path.is_file():
        raise ValidationError(f"File {path.name} does not exist or is not accessible")

    extension = path.suffix.lower()
    if extension in UNSUPPORTED_EXTENSIONS:
        raise ValidationError(f"Unsupported file type '{extension}' for {path.name}")

    metadata = {
        **(base_metadata or {}),
        "source": path.name,
        "file_type": extension.lstrip("."),
    }

    if extension == ".pdf":
        pages = extract_pages_from_pdf(path)
        logger.info(f"📄 Extracted {len(pages)} page(s) from {path.name}")
        return [
            Document(page_content=text, metadata={**metadata, "page": page_number})
            for page_number, text in enumerate(pages)
            if text.strip()
        ]

    text = read_text_file(path)
    logger.info(f"📄 Read {len(text)} characters from {path.name}")
    return [Document(page_content=text, metadata=metadata)]
