"""Pytest configuration and shared fixtures for the test suite."""

import math
import re
from datetime import datetime, timedelta, timezone

import chromadb
import pytest
import requests
from chromadb.config import Settings

from vectorstudio.service.actions import StudioActions
from vectorstudio.service.manager import CollectionManager
from vectorstudio.service.store import VectorStore

FAKE_DIMENSION = 64
START_TIME = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


# Service availability checks
def ollama_available() -> bool:
    """Check if Ollama server is running and accessible.

    Returns:
        True if Ollama is available, False otherwise
    """
    try:
        response = requests.get("http://localhost:11434/api/tags", timeout=2)
        return response.status_code == 200
    except requests.RequestException:
        return False


def chroma_available() -> bool:
    """Check if a Chroma server is running and accessible.

    Returns:
        True if Chroma answers its heartbeat, False otherwise
    """
    try:
        response = requests.get("http://localhost:8000/api/v2/heartbeat", timeout=2)
        return response.status_code == 200
    except requests.RequestException:
        return False


class FakeEmbeddings:
    """Deterministic bag-of-words embedder.

    Each lower-cased word gets its own bucket in order of first sight, so
    texts sharing words are close in cosine distance. All components are
    nonnegative, which keeps cosine distances within [0, 1].
    """

    def __init__(self, dimension: int = FAKE_DIMENSION):
        self.dimension = dimension
        self.model = "fake-embed"
        self.calls: list[list[str]] = []
        self.vocabulary: dict[str, int] = {}

    def embed_one(self, text: str) -> list[float]:
        vector = [0.0] * self.dimension
        for word in re.findall(r"\w+", text.lower()):
            bucket = self.vocabulary.setdefault(word, len(self.vocabulary))
            vector[bucket % self.dimension] += 1.0
        if not any(vector):
            vector[-1] = 1.0
        norm = math.sqrt(sum(v * v for v in vector))
        return [v / norm for v in vector]

    def embed(self, texts: list[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        return [self.embed_one(t) for t in texts]


class TickingClock:
    """Clock that advances one second on every call."""

    def __init__(self, start: datetime = START_TIME):
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current += timedelta(seconds=1)
        return value


@pytest.fixture
def fake_embedder() -> FakeEmbeddings:
    return FakeEmbeddings()


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def chroma_client():
    """Provide an in-process Chroma client, wiped after each test.

    Yields:
        Ephemeral Chroma client
    """
    client = chromadb.EphemeralClient(Settings(allow_reset=True, anonymized_telemetry=False))
    client.reset()
    yield client
    client.reset()


@pytest.fixture
def store(chroma_client) -> VectorStore:
    return VectorStore(chroma_client)


@pytest.fixture
def manager_factory(store, fake_embedder, clock):
    """Factory fixture building initialized CollectionManagers on the ephemeral store.

    Returns:
        Function taking a collection name and CollectionManager keyword arguments
    """

    def _create(name: str = "test_collection", **kwargs) -> CollectionManager:
        manager = CollectionManager(
            store, fake_embedder, collection_name=name, clock=clock, **kwargs
        )
        manager.initialize()
        return manager

    return _create


@pytest.fixture
def actions(store, fake_embedder, clock, tmp_path) -> StudioActions:
    return StudioActions(
        store,
        fake_embedder,
        reserved_collections={"default_collection"},
        persist_directory=str(tmp_path / "chroma"),
        clock=clock,
    )


# Service fixtures with skip markers
@pytest.fixture
def ollama_embedder():
    """Provide an OllamaEmbeddings instance, skip if Ollama not available.

    Raises:
        pytest.skip: If Ollama server is not running
    """
    if not ollama_available():
        pytest.skip("Ollama server not running on localhost:11434")

    from vectorstudio.embeddings import OllamaEmbeddings

    return OllamaEmbeddings(host="http://localhost:11434")


@pytest.fixture
def chroma_server_store():
    """Provide a VectorStore on a running Chroma server, skip if not available.

    Raises:
        pytest.skip: If Chroma server is not running
    """
    if not chroma_available():
        pytest.skip("Chroma server not running on localhost:8000")

    from vectorstudio.service.store import create_chroma_client

    return VectorStore(create_chroma_client("http://localhost:8000"))
