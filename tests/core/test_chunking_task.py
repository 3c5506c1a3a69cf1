"""
Test suite for ChunkingTask.

Covers window/overlap arithmetic, full token coverage, the stop rule,
heading and keyword extraction, and metadata copy-through. Uses a
byte-level tiktoken encoding so one ASCII character is one token.

System role: Verification of the first ingestion stage
"""

import logging

import pytest
import tiktoken

from agent_rag.core.document_processing.tasks import (
    ChunkingTask,
    detect_heading,
    extract_keywords,
    normalize_document_metadata,
)


def _words_text(n_tokens: int) -> str:
    """ASCII text of exactly n_tokens characters without edge whitespace."""
    base = ("lorem ipsum dolor sit amet " * ((n_tokens // 27) + 2))[:n_tokens]
    return base[:-1] + "x"


class TestChunkingTaskInit:
    """Test suite for ChunkingTask construction."""

    def test_init_should_reject_overlap_equal_to_window(self, byte_encoding) -> None:
        """Overlap must be strictly smaller than the window."""
        with pytest.raises(ValueError):
            ChunkingTask(max_tokens_per_chunk=10, chunk_overlap=10, encoding=byte_encoding)

    def test_init_should_reject_negative_overlap(self, byte_encoding) -> None:
        with pytest.raises(ValueError):
            ChunkingTask(max_tokens_per_chunk=10, chunk_overlap=-1, encoding=byte_encoding)

    def test_init_should_reject_empty_window(self, byte_encoding) -> None:
        with pytest.raises(ValueError):
            ChunkingTask(max_tokens_per_chunk=0, chunk_overlap=0, encoding=byte_encoding)

    def test_step_should_be_window_minus_overlap(self, chunking_task: ChunkingTask) -> None:
        assert chunking_task.step == 462


class TestChunkingTaskWindows:
    """Test suite for token window placement."""

    def test_chunk_should_return_empty_list_for_empty_text(self, chunking_task: ChunkingTask) -> None:
        assert chunking_task.chunk("") == []

    def test_chunk_should_return_empty_list_for_whitespace_text(self, chunking_task: ChunkingTask) -> None:
        assert chunking_task.chunk("  \n\t ") == []

    def test_chunk_thousand_tokens_should_produce_three_windows(
        self, chunking_task: ChunkingTask
    ) -> None:
        """1000 tokens, window 512, overlap 50: [0:512], [462:974], [924:1000]."""
        # Arrange
        text = _words_text(1000)

        # Act
        chunks = chunking_task.chunk(text)

        # Assert
        spans = [(c.start_position, c.end_position) for c in chunks]
        assert spans == [(0, 512), (462, 974), (924, 1000)]
        assert [c.token_count for c in chunks] == [512, 512, 76]

    def test_chunk_should_cover_every_token_with_fixed_overlap(
        self, chunking_task: ChunkingTask
    ) -> None:
        """Consecutive windows overlap by exactly 50 tokens and leave no gaps."""
        text = _words_text(2345)

        chunks = chunking_task.chunk(text)

        assert chunks[0].start_position == 0
        assert chunks[-1].end_position == 2345
        for previous, current in zip(chunks, chunks[1:]):
            assert current.start_position <= previous.end_position
            assert previous.end_position - current.start_position == 50

    def test_chunk_should_decode_window_text(self, chunking_task: ChunkingTask) -> None:
        text = _words_text(1000)

        chunks = chunking_task.chunk(text)

        for chunk in chunks:
            assert chunk.content == text[chunk.start_position : chunk.end_position].strip()

    def test_chunk_shorter_than_window_should_yield_single_chunk(
        self, chunking_task: ChunkingTask
    ) -> None:
        chunks = chunking_task.chunk("short note")

        assert len(chunks) == 1
        assert (chunks[0].start_position, chunks[0].end_position) == (0, 10)
        assert chunks[0].content == "short note"

    def test_chunk_exactly_window_should_stop_after_first_chunk(
        self, chunking_task: ChunkingTask
    ) -> None:
        """A window that reaches the end of the sequence is the last one."""
        chunks = chunking_task.chunk(_words_text(512))

        assert len(chunks) == 1

    def test_chunk_one_past_window_should_yield_short_tail(
        self, chunking_task: ChunkingTask
    ) -> None:
        chunks = chunking_task.chunk(_words_text(513))

        assert [(c.start_position, c.end_position) for c in chunks] == [(0, 512), (462, 513)]

    def test_chunk_should_be_deterministic(self, chunking_task: ChunkingTask) -> None:
        text = _words_text(1500)

        assert chunking_task.chunk(text) == chunking_task.chunk(text)

    def test_count_tokens_should_use_encoding(self, chunking_task: ChunkingTask) -> None:
        assert chunking_task.count_tokens("abcd") == 4


class TestChunkingTaskMetadata:
    """Test suite for per-chunk metadata."""

    def test_chunk_should_copy_document_fields(self, chunking_task: ChunkingTask) -> None:
        # Arrange
        document_metadata = {
            "page_number": 3,
            "section": "Billing",
            "language": "en",
            "author": "ignored",
        }

        # Act
        chunks = chunking_task.chunk("Refund policy text", document_metadata)

        # Assert
        metadata = chunks[0].metadata
        assert metadata.page_number == 3
        assert metadata.section == "Billing"
        assert metadata.language == "en"
        assert "author" not in metadata.model_dump()

    def test_chunk_should_attach_heading_and_keywords(self, chunking_task: ChunkingTask) -> None:
        text = "# Refunds\nRefunds take five days. Refunds need a receipt."

        metadata = chunking_task.chunk(text)[0].metadata

        assert metadata.heading == "Refunds"
        assert metadata.keywords == ["refunds"]

    def test_chunk_should_accept_camel_case_fields(self, chunking_task: ChunkingTask) -> None:
        chunks = chunking_task.chunk("Refund policy text", {"pageNumber": "7", "section": "Billing"})

        assert chunks[0].metadata.page_number == 7
        assert chunks[0].metadata.section == "Billing"

    def test_chunk_should_drop_invalid_page_number(
        self, chunking_task: ChunkingTask, caplog: pytest.LogCaptureFixture
    ) -> None:
        # Act
        with caplog.at_level(logging.WARNING):
            chunks = chunking_task.chunk(
                "Refund policy text", {"page_number": "iv", "language": "en"}
            )

        # Assert
        assert chunks[0].metadata.page_number is None
        assert chunks[0].metadata.language == "en"
        assert "Ignoring invalid page number" in caplog.text


class TestNormalizeDocumentMetadata:
    """Test suite for normalize_document_metadata()."""

    def test_none_should_give_empty_fields(self) -> None:
        assert normalize_document_metadata(None) == {}

    def test_snake_case_wins_over_later_alias(self) -> None:
        assert normalize_document_metadata({"page_number": 2, "pageNumber": 9}) == {"page_number": 2}

    @pytest.mark.parametrize("value", [True, 2.5j, [1], "two"])
    def test_non_integer_page_numbers_are_dropped(self, value) -> None:
        assert normalize_document_metadata({"pageNumber": value}) == {}

    def test_non_string_section_is_stringified(self) -> None:
        assert normalize_document_metadata({"section": 4, "author": "x"}) == {"section": "4"}


class TestDetectHeading:
    """Test suite for heading detection."""

    @pytest.mark.parametrize(
        ("content", "expected"),
        [
            ("# Installation\nbody", "Installation"),
            ("\n\n   ### Setup Guide  \nbody", "Setup Guide"),
            ("OVERVIEW\nbody", "OVERVIEW"),
            ("PART 2: LIMITS\nbody", "PART 2: LIMITS"),
            ("Regular sentence here\nbody", None),
            ("A" * 50 + "\nbody", None),
            ("12345\nbody", None),
            ("", None),
        ],
    )
    def test_detect_heading(self, content: str, expected: str | None) -> None:
        assert detect_heading(content) == expected


class TestExtractKeywords:
    """Test suite for keyword extraction."""

    def test_extract_keywords_should_rank_by_frequency(self) -> None:
        text = "apple banana apple banana apple cherry cherry kiwi kiwi fig fig"

        assert extract_keywords(text) == ["apple", "banana", "cherry", "kiwi"]

    def test_extract_keywords_should_require_two_occurrences(self) -> None:
        assert extract_keywords("unique words only here") == []

    def test_extract_keywords_should_be_case_insensitive(self) -> None:
        assert extract_keywords("Policy policy POLICY") == ["policy"]

    def test_extract_keywords_should_cap_at_five_keeping_first_seen_on_ties(self) -> None:
        words = ["alpha", "bravo", "charlie", "delta", "echo", "foxtrot"]
        text = " ".join(words + words)

        assert extract_keywords(text) == words[:5]
