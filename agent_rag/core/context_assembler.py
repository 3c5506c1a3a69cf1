"""
Context assembler.

Greedily packs ranked search results into a token-bounded context string
with a provenance header per chunk. The consumer treats an empty string
as "no relevant knowledge".

Dependencies: agent_rag.application.services.vector_search_service (injected)
System role: Final retrieval stage before prompt composition
"""

import logging
import math
from typing import TYPE_CHECKING
from uuid import UUID

from pydantic import BaseModel, Field

from agent_rag.core.exceptions import ValidationError

if TYPE_CHECKING:
    from agent_rag.application.services.vector_search_service import (
        SearchResult,
        VectorSearchService,
    )

logger = logging.getLogger(__name__)

CANDIDATE_LIMIT = 10
CANDIDATE_THRESHOLD = 0.6
DEFAULT_MAX_TOKENS = 2000


class AssembledContext(BaseModel):
    """Context string handed to the answer generator."""

    context: str = Field(description="Concatenated sections, trimmed; empty when nothing fit")
    token_count: int = Field(description="Sum of the included chunks' catalog token counts")
    chunk_count: int = Field(description="Number of chunks included")


def format_section(result: "SearchResult") -> str:
    """Provenance header followed by the chunk content."""
    heading = result.metadata.get("heading") or "document"
    percent = math.floor(result.similarity * 100 + 0.5)
    return f"\n\n--- Context from {heading} (similarity: {percent}%) ---\n{result.content}"


class ContextAssembler:
    """Build a bounded context from an agent's most relevant chunks."""

    def __init__(self, search_service: "VectorSearchService") -> None:
        self._search_service = search_service

    async def get_context(
        self,
        agent_id: UUID,
        query: str,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> AssembledContext:
        """
        Assemble context for a query.

        Walks candidates in rank order, charging each chunk's catalog
        token_count against max_tokens. Provenance headers are not charged.
        Stops at the first chunk that would overflow; chunks are never
        truncated.

        Raises:
            ValidationError: max_tokens is not positive
            EmbeddingError, VectorStoreError, RetrievalError: From search
        """
        if max_tokens <= 0:
            raise ValidationError("max_tokens must be positive", field="max_tokens")

        candidates = await self._search_service.search(
            agent_id,
            query,
            limit=CANDIDATE_LIMIT,
            threshold=CANDIDATE_THRESHOLD,
        )

        sections: list[str] = []
        total_tokens = 0
        for result in candidates:
            if total_tokens + result.token_count > max_tokens:
                break
            sections.append(format_section(result))
            total_tokens += result.token_count

        logger.info(
            f"{__name__}:get_context - Context assembled",
            extra={
                "agent_id": str(agent_id),
                "candidates": len(candidates),
                "included": len(sections),
                "tokens": total_tokens,
            },
        )
        return AssembledContext(
            context="".join(sections).strip(),
            token_count=total_tokens,
            chunk_count=len(sections),
        )
