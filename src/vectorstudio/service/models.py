"""Data models for documents, chunks and collections."""

from dataclasses import dataclass, field
from typing import Any

# Values the vector store accepts in a metadata map
MetadataValue = str | int | float | bool | None
Metadata = dict[str, MetadataValue]


def clean_metadata(metadata: dict[str, Any] | None) -> dict[str, str | int | float | bool]:
    """Drop None values and reject anything that is not a scalar.

    Args:
        metadata: Raw metadata mapping

    Returns:
        dict: Metadata ready to be sent to the store

    Raises:
        TypeError: If a value is not a str, int, float, bool or None
    """
    cleaned: dict[str, str | int | float | bool] = {}
    for key, value in (metadata or {}).items():
        if value is None:
            continue
        if not isinstance(value, (str, int, float, bool)):
            raise TypeError(
                f"Metadata value for '{key}' must be a string, number or boolean, "
                f"got {type(value).__name__}"
            )
        cleaned[str(key)] = value
    return cleaned


@dataclass
class Document:
    """A unit of text plus its metadata.

    Attributes:
        page_content: The text content
        metadata: Scalar key/value attributes (source, page, id, chunk_index, ...)
    """

    page_content: str
    metadata: Metadata = field(default_factory=dict)


@dataclass
class QueryResult:
    """A stored chunk returned from the store, optionally decorated with scores.

    The similarity score and related flag are computed per request and are
    never written back to the store.
    """

    page_content: str
    metadata: Metadata = field(default_factory=dict)
    embedding: list[float] | None = None
    distance: float | None = None
    similarity_score: int | None = None
    is_related: bool = False

    @property
    def id(self) -> str | None:
        value = self.metadata.get("id")
        return None if value is None else str(value)

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the camel-case keys of the JSON surfaces."""
        data: dict[str, Any] = {
            "pageContent": self.page_content,
            "metadata": dict(self.metadata),
        }
        if self.embedding is not None:
            data["embedding"] = self.embedding
        if self.distance is not None:
            data["distance"] = self.distance
        if self.similarity_score is not None:
            data["similarityScore"] = self.similarity_score
        if self.is_related:
            data["isRelated"] = True
        return data


@dataclass
class CollectionInfo:
    """Summary of a stored collection."""

    name: str
    count: int
    dimension: int
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "count": self.count,
            "dimension": self.dimension,
            "metadata": dict(self.metadata),
        }


@dataclass
class RetrievalResult:
    """Primary results of a similarity query plus the optional related set."""

    primary: list[QueryResult] = field(default_factory=list)
    related: list[QueryResult] | None = None
