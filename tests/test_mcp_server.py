"""Tests for the MCP server module."""

from unittest.mock import MagicMock, patch

import pytest

from vectorstudio.service import mcp_server
from vectorstudio.service.mcp_server import (
    add_document_impl,
    get_collection_info_impl,
    list_collections_impl,
    query_collection_impl,
    set_actions,
)


@pytest.fixture
def mcp_actions(actions):
    """Install the in-process actions as the server's shared actions."""
    set_actions(actions)
    yield actions
    set_actions(None)


@pytest.fixture
def library(mcp_actions):
    mcp_actions.create_collection("papers", 768)
    for doc_id, content in [
        ("fox", "the quick brown fox"),
        ("dog", "a lazy dog"),
        ("foxes", "quick brown foxes"),
    ]:
        mcp_actions.add_document(
            "papers", {"content": content, "metadata": {"id": doc_id, "source": "notes.txt"}}
        )
    return mcp_actions


class TestListCollections:
    """Tests for the list_collections tool."""

    @pytest.mark.asyncio
    async def test_lists_collections(self, library):
        results = await list_collections_impl()

        assert [c["name"] for c in results] == ["papers"]
        assert results[0]["count"] == 3

    @pytest.mark.asyncio
    async def test_returns_empty_list_on_failure(self):
        mock_actions = MagicMock()
        mock_actions.list_collections.return_value = {
            "success": False,
            "error": "Cannot reach Chroma",
            "code": "unavailable",
        }
        set_actions(mock_actions)
        try:
            assert await list_collections_impl() == []
        finally:
            set_actions(None)


class TestQueryCollection:
    """Tests for the query_collection tool."""

    @pytest.mark.asyncio
    async def test_query_strips_embeddings(self, library):
        result = await query_collection_impl("papers", "quick brown fox", top_k=2)

        assert result["success"] is True
        assert [r["metadata"]["id"] for r in result["data"]] == ["fox", "foxes"]
        for item in result["data"]:
            assert "embedding" not in item
            assert 0 <= item["similarityScore"] <= 100

    @pytest.mark.asyncio
    async def test_query_with_related(self, library):
        result = await query_collection_impl(
            "papers", "quick brown fox", top_k=1, include_related=True
        )

        related_ids = [r["metadata"]["id"] for r in result["related"]]
        assert "fox" not in related_ids
        assert "foxes" in related_ids
        assert all("embedding" not in r for r in result["related"])

    @pytest.mark.asyncio
    async def test_query_missing_collection(self, mcp_actions):
        result = await query_collection_impl("missing", "anything")

        assert result["success"] is False
        assert result["code"] == "not_found"

    @pytest.mark.asyncio
    async def test_query_passes_arguments(self):
        mock_actions = MagicMock()
        mock_actions.query_collection.return_value = {"success": True, "data": []}
        set_actions(mock_actions)
        try:
            await query_collection_impl(
                "papers", "test query", top_k=10, where={"source": "a.pdf"}
            )
        finally:
            set_actions(None)

        mock_actions.query_collection.assert_called_once_with(
            "papers", "test query", k=10, where={"source": "a.pdf"}, include_related=False
        )


class TestAddDocument:
    """Tests for the add_document tool."""

    @pytest.mark.asyncio
    async def test_add_document(self, mcp_actions):
        mcp_actions.create_collection("papers", 768)

        result = await add_document_impl("papers", "A new finding", {"author": "Ada"})

        assert result["success"] is True
        docs = mcp_actions.get_all_documents("papers")["data"]
        assert docs[0]["metadata"]["id"] == result["id"]
        assert docs[0]["metadata"]["author"] == "Ada"

    @pytest.mark.asyncio
    async def test_add_document_rejects_empty_content(self, mcp_actions):
        mcp_actions.create_collection("papers", 768)

        result = await add_document_impl("papers", "   ")

        assert result["success"] is False
        assert result["code"] == "validation"


class TestGetCollectionInfo:
    """Tests for the get_collection_info tool."""

    @pytest.mark.asyncio
    async def test_info(self, library):
        result = await get_collection_info_impl("papers")

        assert result["data"]["count"] == 3
        assert result["data"]["dimension"] == 768


class TestSharedActions:
    """Tests for lazy construction of the shared actions."""

    @patch("vectorstudio.service.mcp_server.StudioActions.from_env")
    def test_get_actions_builds_once(self, mock_from_env):
        set_actions(None)
        try:
            first = mcp_server.get_actions()
            second = mcp_server.get_actions()
        finally:
            set_actions(None)

        assert first is second
        mock_from_env.assert_called_once()


class TestMain:
    """Tests for the main entry point."""

    @patch("vectorstudio.service.mcp_server.mcp.run")
    def test_main_runs_mcp_server(self, mock_run, monkeypatch):
        """Test that main() starts the MCP server with SSE transport."""
        monkeypatch.delenv("MCP_HOST", raising=False)
        monkeypatch.setenv("MCP_PORT", "9100")

        mcp_server.main()

        mock_run.assert_called_once_with(transport="sse", host="0.0.0.0", port=9100)
