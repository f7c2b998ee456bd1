"""Tests for text splitting and chunk id assignment."""

import pytest

from vectorstudio.service.chunking import TextSplitter, calculate_chunk_ids
from vectorstudio.service.errors import ValidationError
from vectorstudio.service.models import Document


class TestTextSplitter:
    """Tests for TextSplitter.split_text."""

    def test_defaults(self):
        splitter = TextSplitter()
        assert splitter.chunk_size == 800
        assert splitter.chunk_overlap == 80

    def test_overlap_capped_at_chunk_size(self):
        splitter = TextSplitter(chunk_size=10, chunk_overlap=50)
        assert splitter.chunk_overlap == 10

    @pytest.mark.parametrize("size,overlap", [(0, 0), (-5, 0), (10, -1)])
    def test_invalid_parameters_rejected(self, size, overlap):
        with pytest.raises(ValidationError):
            TextSplitter(chunk_size=size, chunk_overlap=overlap)

    @pytest.mark.parametrize("text", ["", None])
    def test_empty_input_returns_no_chunks(self, text):
        assert TextSplitter().split_text(text) == []

    def test_short_text_is_single_trimmed_chunk(self):
        assert TextSplitter(chunk_size=100).split_text("  hello world  ") == ["hello world"]

    def test_whitespace_only_text_yields_nothing(self):
        assert TextSplitter(chunk_size=4, chunk_overlap=0).split_text("          ") == []

    def test_breaks_on_word_boundary(self):
        splitter = TextSplitter(chunk_size=10, chunk_overlap=0)
        chunks = splitter.split_text("alpha beta gamma delta")
        assert chunks == ["alpha beta", "gamma", "delta"]

    def test_chunks_never_exceed_chunk_size(self):
        text = " ".join(f"word{i}" for i in range(500))
        splitter = TextSplitter(chunk_size=50, chunk_overlap=10)
        chunks = splitter.split_text(text)
        assert chunks
        assert all(len(c) <= 50 for c in chunks)

    def test_overlap_repeats_text_between_chunks(self):
        text = " ".join(f"w{i:03d}" for i in range(40))
        chunks = TextSplitter(chunk_size=40, chunk_overlap=10).split_text(text)
        for previous, current in zip(chunks, chunks[1:]):
            first_word = current.split()[0]
            assert first_word in previous or current.startswith(first_word)

    def test_chunks_cover_every_word(self):
        words = [f"token{i}" for i in range(300)]
        chunks = TextSplitter(chunk_size=60, chunk_overlap=15).split_text(" ".join(words))
        covered = set(" ".join(chunks).split())
        assert set(words) <= covered

    def test_short_text_with_overlap_is_single_chunk(self):
        text = "# Title\n\nShort markdown body."
        chunks = TextSplitter(chunk_size=100, chunk_overlap=10).split_text(text)
        assert chunks == [text]

    def test_text_of_exactly_chunk_size_is_single_chunk(self):
        chunks = TextSplitter(chunk_size=100, chunk_overlap=10).split_text("a" * 100)
        assert chunks == ["a" * 100]

    @pytest.mark.parametrize(
        "text",
        [" ".join(["abcd"] * 1000), "x" * 1000],
        ids=["words", "no-whitespace"],
    )
    def test_chunk_count_matches_window_estimate(self, text):
        size, overlap = 100, 20
        chunks = TextSplitter(chunk_size=size, chunk_overlap=overlap).split_text(text)
        estimate = -(-(len(text) - overlap) // (size - overlap))
        assert len(chunks) == estimate

    def test_last_chunk_is_not_contained_in_previous(self):
        text = " ".join(f"w{i:03d}" for i in range(200))
        chunks = TextSplitter(chunk_size=100, chunk_overlap=20).split_text(text)
        assert chunks[-1].endswith("w199")
        for previous, current in zip(chunks, chunks[1:]):
            assert current not in previous

    def test_text_without_whitespace_terminates(self):
        text = "x" * 1000
        chunks = TextSplitter(chunk_size=100, chunk_overlap=99).split_text(text)
        assert chunks
        assert all(len(c) <= 100 for c in chunks)
        assert chunks[-1].endswith("x")

    def test_overlap_equal_to_size_still_progresses(self):
        chunks = TextSplitter(chunk_size=5, chunk_overlap=5).split_text("abcdefghij")
        assert chunks == ["abcde", "fghij"]


class TestSplitDocuments:
    """Tests for document-level splitting."""

    def test_split_document_adds_chunk_index_and_keeps_metadata(self):
        doc = Document(page_content="one two three four", metadata={"source": "a.txt"})
        chunks = TextSplitter(chunk_size=8, chunk_overlap=0).split_document(doc)

        assert [c.metadata["chunk_index"] for c in chunks] == list(range(len(chunks)))
        assert all(c.metadata["source"] == "a.txt" for c in chunks)
        assert "chunk_index" not in doc.metadata

    def test_split_documents_concatenates_in_order(self):
        docs = [
            Document(page_content="first doc", metadata={"source": "a"}),
            Document(page_content="second doc", metadata={"source": "b"}),
        ]
        chunks = TextSplitter(chunk_size=100).split_documents(docs)
        assert [c.page_content for c in chunks] == ["first doc", "second doc"]


class TestCalculateChunkIds:
    """Tests for calculate_chunk_ids."""

    def test_ids_count_within_source_and_page(self):
        chunks = [
            Document(page_content="x", metadata={"source": "a", "page": 0}),
            Document(page_content="y", metadata={"source": "a", "page": 0}),
            Document(page_content="z", metadata={"source": "b", "page": 1}),
        ]
        ids = [c.metadata["id"] for c in calculate_chunk_ids(chunks)]
        assert ids == ["a:0:0", "a:0:1", "b:1:0"]

    def test_missing_source_and_page_use_defaults(self):
        ids = [c.metadata["id"] for c in calculate_chunk_ids([Document(page_content="x")])]
        assert ids == ["unknown:0:0"]

    def test_sequence_restarts_when_pair_changes(self):
        chunks = [
            Document(page_content="1", metadata={"source": "a", "page": 0}),
            Document(page_content="2", metadata={"source": "a", "page": 1}),
            Document(page_content="3", metadata={"source": "a", "page": 0}),
        ]
        ids = [c.metadata["id"] for c in calculate_chunk_ids(chunks)]
        assert ids == ["a:0:0", "a:1:0", "a:0:0"]

    def test_input_documents_are_not_mutated(self):
        doc = Document(page_content="x", metadata={"source": "a"})
        calculate_chunk_ids([doc])
        assert "id" not in doc.metadata
