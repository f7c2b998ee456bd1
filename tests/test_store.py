"""Tests for the Chroma store adapter."""

import os
from unittest.mock import MagicMock, patch

import httpx
import pytest
from chromadb.errors import NotFoundError

from vectorstudio.service.errors import CollectionNotFound, StoreUnavailable
from vectorstudio.service.store import (
    ChromaConfig,
    CollectionHandle,
    VectorStore,
    create_chroma_client,
    translate_store_errors,
)


class TestChromaConfig:
    """Tests for ChromaConfig."""

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            assert ChromaConfig.get_url() == "http://localhost:8000"
            assert ChromaConfig.get_persist_directory() == "./chroma_db"
            assert ChromaConfig.get_auth_token() is None

    def test_env_overrides(self):
        env = {
            "CHROMA_URL": "https://chroma.example.com",
            "CHROMA_PERSIST_DIRECTORY": "/data/chroma",
            "CHROMA_AUTH_TOKEN": "secret",
        }
        with patch.dict(os.environ, env, clear=True):
            assert ChromaConfig.get_url() == "https://chroma.example.com"
            assert ChromaConfig.get_persist_directory() == "/data/chroma"
            assert ChromaConfig.get_auth_token() == "secret"

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("http://localhost:8000", ("localhost", 8000, False)),
            ("https://chroma.example.com", ("chroma.example.com", 443, True)),
            ("http://db:9000", ("db", 9000, False)),
            ("chroma:8001", ("chroma", 8001, False)),
        ],
    )
    def test_parse_url(self, url, expected):
        assert ChromaConfig.parse_url(url) == expected


class TestCreateChromaClient:
    """Tests for create_chroma_client."""

    @patch("vectorstudio.service.store.client.chromadb.HttpClient")
    def test_passes_host_port_and_token(self, mock_http_client):
        with patch.dict(os.environ, {"CHROMA_AUTH_TOKEN": "tok"}, clear=True):
            client = create_chroma_client("https://chroma.example.com:8443")

        mock_http_client.assert_called_once_with(
            host="chroma.example.com",
            port=8443,
            ssl=True,
            headers={"Authorization": "Bearer tok"},
        )
        assert client is mock_http_client.return_value

    @patch("vectorstudio.service.store.client.chromadb.HttpClient")
    def test_unreachable_server_raises_store_unavailable(self, mock_http_client):
        mock_http_client.side_effect = ValueError("Could not connect to a Chroma server")

        with pytest.raises(StoreUnavailable, match="Could not connect"):
            create_chroma_client("http://localhost:1")


class TestTranslateStoreErrors:
    """Tests for translate_store_errors."""

    def test_not_found_maps_to_collection_not_found(self):
        with pytest.raises(CollectionNotFound):
            with translate_store_errors("get"):
                raise NotFoundError("Collection missing does not exist")

    @pytest.mark.parametrize(
        "error", [httpx.ConnectError("refused"), ConnectionError("reset by peer")]
    )
    def test_transport_errors_map_to_store_unavailable(self, error):
        with pytest.raises(StoreUnavailable, match="during query"):
            with translate_store_errors("query"):
                raise error

    def test_other_errors_pass_through(self):
        with pytest.raises(KeyError):
            with translate_store_errors("get"):
                raise KeyError("x")


class TestVectorStore:
    """Tests for VectorStore against an in-process Chroma client."""

    def test_list_collections_sorted(self, store):
        store.create_or_get_collection("zeta", {"hnsw:space": "cosine"})
        store.create_or_get_collection("alpha", {"hnsw:space": "cosine"})

        assert store.list_collections() == ["alpha", "zeta"]
        assert store.collection_exists("alpha")
        assert not store.collection_exists("missing")

    def test_list_collections_accepts_collection_objects(self):
        legacy = MagicMock()
        legacy.name = "papers"
        client = MagicMock()
        client.list_collections.return_value = [legacy, "notes"]

        assert VectorStore(client).list_collections() == ["notes", "papers"]

    def test_get_missing_collection_raises(self, store):
        with pytest.raises(CollectionNotFound):
            store.get_collection("missing")

    def test_delete_collection(self, store):
        store.create_or_get_collection("gone", {"hnsw:space": "cosine"})
        store.delete_collection("gone")
        assert not store.collection_exists("gone")

    def test_heartbeat(self, store):
        assert isinstance(store.heartbeat(), int)


class TestCollectionHandle:
    """Tests for CollectionHandle item operations."""

    @pytest.fixture
    def handle(self, store):
        return store.create_or_get_collection(
            "items", {"hnsw:space": "cosine", "created": "2025-01-01T00:00:00"}
        )

    def _add(self, handle):
        handle.add(
            ids=["a", "b"],
            embeddings=[[1.0, 0.0], [0.0, 1.0]],
            metadatas=[{"id": "a", "source": "x"}, {"id": "b", "source": "y"}],
            documents=["doc a", "doc b"],
        )

    def test_add_count_and_get(self, handle):
        self._add(handle)

        assert handle.count() == 2
        result = handle.get(ids=["a"], include=["documents", "metadatas", "embeddings"])
        assert result["ids"] == ["a"]
        assert result["documents"] == ["doc a"]
        assert result["metadatas"] == [{"id": "a", "source": "x"}]
        assert result["embeddings"] == [[1.0, 0.0]]

    def test_get_ids(self, handle):
        self._add(handle)
        assert handle.get_ids() == {"a", "b"}

    def test_query_returns_nearest_first_with_distances(self, handle):
        self._add(handle)

        results = handle.query([1.0, 0.0], k=2)

        assert [r.page_content for r in results] == ["doc a", "doc b"]
        assert results[0].distance == pytest.approx(0.0, abs=1e-6)
        assert results[1].distance == pytest.approx(1.0, abs=1e-6)
        assert results[0].embedding == pytest.approx([1.0, 0.0])
        assert results[0].id == "a"

    def test_query_with_where_filter(self, handle):
        self._add(handle)

        results = handle.query([1.0, 0.0], k=2, where={"source": "y"})

        assert [r.id for r in results] == ["b"]

    def test_query_empty_collection(self, handle):
        assert handle.query([1.0, 0.0], k=3) == []

    def test_update_and_delete(self, handle):
        self._add(handle)

        handle.update(
            ids=["a"],
            embeddings=[[0.5, 0.5]],
            documents=["new a"],
            metadatas=[{"id": "a", "source": "x"}],
        )
        assert handle.get(ids=["a"], include=["documents"])["documents"] == ["new a"]

        handle.delete(where={"id": "b"})
        assert handle.get_ids() == {"a"}

    def test_modify_metadata_keeps_index_settings(self, store, handle):
        handle.modify_metadata(
            {"hnsw:space": "l2", "created": "2025-01-01T00:00:00", "note": "hi", "empty": None}
        )

        metadata = store.get_collection("items").metadata
        assert metadata["note"] == "hi"
        assert "empty" not in metadata
        assert metadata["hnsw:space"] == "cosine"

    def test_distance_space_reported_after_repeated_modify(self, store, handle):
        handle.modify_metadata({"note": "first"})
        store.get_collection("items").modify_metadata({"note": "second"})

        reopened = store.get_collection("items")
        assert reopened.metadata["hnsw:space"] == "cosine"
        assert reopened.metadata["note"] == "second"

    def test_distance_space_read_from_index_configuration(self):
        collection = MagicMock()
        collection.metadata = {"note": "x"}
        collection.configuration_json = {"hnsw": {"space": "ip"}}

        assert CollectionHandle(collection).metadata == {"note": "x", "hnsw:space": "ip"}

    def test_distance_space_absent_without_configuration(self):
        collection = MagicMock()
        collection.metadata = {"note": "x"}
        collection.configuration_json = None

        assert CollectionHandle(collection).metadata == {"note": "x"}
