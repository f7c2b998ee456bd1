"""Fixed-window text chunking and deterministic chunk ids."""

import logging

from vectorstudio.constants import DEFAULT_CHUNK_OVERLAP, DEFAULT_CHUNK_SIZE
from vectorstudio.service.errors import ValidationError
from vectorstudio.service.models import Document

logger = logging.getLogger(__name__)


class TextSplitter:
    """Split text into overlapping character windows that end on word boundaries."""

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        chunk_overlap: int = DEFAULT_CHUNK_OVERLAP,
    ) -> None:
        """Initialize the splitter.

        Args:
            chunk_size: Maximum number of characters per chunk (must be > 0)
            chunk_overlap: Characters shared between consecutive chunks;
                capped at chunk_size

        Raises:
            ValidationError: If chunk_size is not positive or chunk_overlap is negative
        """
        if chunk_size <= 0:
            raise ValidationError(f"Chunk size must be positive, got {chunk_size}")
        if chunk_overlap < 0:
            raise ValidationError(f"Chunk overlap must not be negative, got {chunk_overlap}")

        self.chunk_size = chunk_size
        self.chunk_overlap = min(chunk_overlap, chunk_size)

    def split_text(self, text: str | None) -> list[str]:
        """Split text into trimmed, non-empty chunks of at most chunk_size characters.

        When a window would cut through a word, its end moves back to the last
        space inside the window. After each chunk the window start moves to
        the chunk end minus the overlap, or to the chunk end if that would not
        advance the cursor. Splitting stops at the chunk that reaches the end
        of the text.

        Args:
            text: The text to split

        Returns:
            list[str]: Chunks in document order (empty for empty input)
        """
        if not text:
            return []

        chunks: list[str] = []
        length = len(text)
        start = 0

        while start < length:
            end = min(start + self.chunk_size, length)

            if end < length and not text[end].isspace():
                last_space = text.rfind(" ", 0, end + 1)
                if last_space > start:
                    end = last_space

            chunk = text[start:end].strip()
            if chunk:
                chunks.append(chunk)

            if end >= length:
                break

            next_start = end - self.chunk_overlap
            if next_start <= start:
                next_start = end
            start = next_start

        return chunks

    def split_document(self, doc: Document) -> list[Document]:
        """Split one document, tagging each chunk with its position.

        Args:
            doc: The document to split

        Returns:
            list[Document]: New documents carrying the source metadata plus chunk_index
        """
        return [
            Document(page_content=chunk, metadata={**doc.metadata, "chunk_index": index})
            for index, chunk in enumerate(self.split_text(doc.page_content))
        ]

    def split_documents(self, documents: list[Document]) -> list[Document]:
        """Split documents in order and concatenate the chunks."""
        chunks: list[Document] = []
        for doc in documents:
            chunks.extend(self.split_document(doc))
        logger.debug(f"Split {len(documents)} document(s) into {len(chunks)} chunk(s)")
        return chunks


def calculate_chunk_ids(chunks: list[Document]) -> list[Document]:
    """Assign "<source>:<page>:<sequence>" ids to chunks in order.

    The sequence counts consecutive chunks sharing the same source and page
    and restarts at 0 whenever that pair changes, so the ids depend on the
    order of the input.

    Args:
        chunks: Chunks in a stable order (per document, then across documents)

    Returns:
        list[Document]: Copies of the chunks with metadata["id"] set
    """
    last_page_id: str | None = None
    current_chunk_index = 0
    identified: list[Document] = []

    for chunk in chunks:
        source = chunk.metadata.get("source") or "unknown"
        page = chunk.metadata.get("page") or 0
        page_id = f"{source}:{page}"

        if page_id == last_page_id:
            current_chunk_index += 1
        else:
            current_chunk_index = 0

        identified.append(
            Document(
                page_content=chunk.page_content,
                metadata={**chunk.metadata, "id": f"{page_id}:{current_chunk_index}"},
            )
        )
        last_page_id = page_id

    return identified
