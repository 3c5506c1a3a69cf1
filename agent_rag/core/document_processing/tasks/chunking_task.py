"""
Token-window chunking task using tiktoken.

Splits document text into overlapping, token-bounded chunks and derives
lightweight structural metadata (heading, keywords) for each chunk.

Dependencies: tiktoken
System role: First stage of document ingestion pipeline
"""

import logging
import re
from collections import Counter
from typing import Any

import tiktoken

from ..models import ChunkMetadata, TextChunk

logger = logging.getLogger(__name__)

_HEADING_MARKER = re.compile(r"^#+\s*")
_WORD = re.compile(r"\b\w{4,}\b")

MAX_HEADING_LENGTH = 50
MAX_KEYWORDS = 5
MIN_KEYWORD_FREQUENCY = 2

_METADATA_ALIASES = {
    "page_number": "page_number",
    "pageNumber": "page_number",
    "page": "page_number",
    "section": "section",
    "language": "language",
    "lang": "language",
}


def detect_heading(content: str) -> str | None:
    """
    Detect a heading on the first non-blank line.

    A line counts as a heading if it starts with a markdown '#' (markers
    are stripped) or is shorter than 50 characters and fully upper-case.

    Args:
        content: Chunk text

    Returns:
        Heading text, or None
    """
    first_line = next((line.strip() for line in content.splitlines() if line.strip()), None)
    if first_line is None:
        return None
    if first_line.startswith("#"):
        return _HEADING_MARKER.sub("", first_line) or None
    if len(first_line) < MAX_HEADING_LENGTH and first_line.isupper():
        return first_line
    return None


def extract_keywords(content: str) -> list[str]:
    """
    Top words of length >= 4 that occur at least twice.

    Ties keep first-occurrence order.

    Args:
        content: Chunk text

    Returns:
        Up to 5 lower-cased keywords, most frequent first
    """
    counts = Counter(_WORD.findall(content.lower()))
    return [
        word
        for word, count in counts.most_common()
        if count >= MIN_KEYWORD_FREQUENCY
    ][:MAX_KEYWORDS]


def _as_page_number(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def normalize_document_metadata(document_metadata: dict[str, Any] | None) -> dict[str, Any]:
    """
    Pick page_number, section and language out of document metadata.

    Accepts snake_case and camelCase keys. A page number that is not an
    integer is logged and dropped; other fields are stored as strings.

    Args:
        document_metadata: Metadata as stored on the document

    Returns:
        ChunkMetadata keyword arguments
    """
    normalized: dict[str, Any] = {}
    for key, value in (document_metadata or {}).items():
        field = _METADATA_ALIASES.get(key)
        if field is None or value is None or field in normalized:
            continue
        if field == "page_number":
            page_number = _as_page_number(value)
            if page_number is None:
                logger.warning(
                    f"{__name__}:normalize_document_metadata - Ignoring invalid page number",
                    extra={"key": key, "value": repr(value)},
                )
            else:
                normalized[field] = page_number
            continue
        normalized[field] = str(value)
    return normalized


class ChunkingTask:
    """Split text into token windows with a fixed overlap."""

    def __init__(
        self,
        max_tokens_per_chunk: int = 512,
        chunk_overlap: int = 50,
        encoding_name: str = "cl100k_base",
        encoding: tiktoken.Encoding | None = None,
    ) -> None:
        """
        Initialize chunking task with window configuration.

        Args:
            max_tokens_per_chunk: Window size in tokens
            chunk_overlap: Tokens shared by consecutive windows
            encoding_name: tiktoken encoding name
            encoding: Pre-built encoding; takes precedence over encoding_name

        Raises:
            ValueError: When the window is empty or overlap is out of range
        """
        if max_tokens_per_chunk <= 0:
            raise ValueError("max_tokens_per_chunk must be positive")
        if not 0 <= chunk_overlap < max_tokens_per_chunk:
            raise ValueError("chunk_overlap must satisfy 0 <= overlap < max_tokens_per_chunk")

        self._window = max_tokens_per_chunk
        self._overlap = chunk_overlap
        self._encoding = encoding or tiktoken.get_encoding(encoding_name)

    @property
    def step(self) -> int:
        """Tokens the window advances per chunk."""
        return self._window - self._overlap

    def count_tokens(self, text: str) -> int:
        """Number of tokens in text under the configured encoding."""
        return len(self._encoding.encode(text, disallowed_special=()))

    def chunk(
        self,
        text: str,
        document_metadata: dict[str, Any] | None = None,
    ) -> list[TextChunk]:
        """
        Split text into chunks.

        Windows start at multiples of step; the walk stops after the first
        window that reaches the end of the token sequence.

        Args:
            text: Full extracted document text
            document_metadata: Optional page_number/section/language to copy

        Returns:
            list[TextChunk]: Chunks in document order; empty for blank text
        """
        if not text or not text.strip():
            return []

        tokens = self._encoding.encode(text, disallowed_special=())
        total = len(tokens)
        copied = normalize_document_metadata(document_metadata)

        chunks: list[TextChunk] = []
        start = 0
        while start < total:
            end = min(start + self._window, total)
            content = self._encoding.decode(tokens[start:end]).strip()
            chunks.append(
                TextChunk(
                    content=content,
                    token_count=end - start,
                    start_position=start,
                    end_position=end,
                    metadata=ChunkMetadata(
                        heading=detect_heading(content),
                        keywords=extract_keywords(content),
                        **copied,
                    ),
                )
            )
            if end == total:
                break
            start += self.step

        return chunks
