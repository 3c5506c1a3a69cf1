"""
Embedding generation task.

Embeds chunks in sequential batches of at most batch_size inputs and
re-maps each returned vector to the chunk's position in the full list.

Dependencies: langchain_core
System role: Second stage of document ingestion pipeline, and the query
    embedding path for similarity search
"""

import logging
import re
from typing import AsyncIterator

from langchain_core.embeddings import Embeddings

from agent_rag.core.exceptions import EmbeddingError

from ..models import EmbeddedChunk, EmbeddingBatch, TextChunk

logger = logging.getLogger(__name__)

# NUL and C0 controls except tab, newline, carriage return
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F]")


def sanitize(text: str) -> str:
    """Strip control characters the provider rejects, then trim."""
    return _CONTROL_CHARS.sub("", text).strip()


class EmbeddingTask:
    """Generate embeddings through a LangChain Embeddings provider."""

    def __init__(
        self,
        embeddings: Embeddings,
        model: str,
        batch_size: int = 100,
    ) -> None:
        """
        Initialize embedding task.

        Args:
            embeddings: Provider client
            model: Model identifier recorded on every catalog row
            batch_size: Maximum inputs per provider call

        Raises:
            ValueError: When model is empty or batch_size is out of range
        """
        if not model:
            raise ValueError("model cannot be empty")
        if not 1 <= batch_size <= 100:
            raise ValueError("batch_size must be between 1 and 100")

        self._embeddings = embeddings
        self._model = model
        self._batch_size = batch_size

    @property
    def model(self) -> str:
        return self._model

    async def embed_chunks(self, chunks: list[TextChunk]) -> AsyncIterator[EmbeddingBatch]:
        """
        Embed chunks batch by batch.

        Batches are issued sequentially. Chunks whose sanitized content is
        empty are dropped before the provider call; surviving vectors are
        paired with the chunk's index in the full list, never with its
        position among the survivors.

        Args:
            chunks: Ordered chunks of one document

        Yields:
            EmbeddingBatch: One per non-empty batch

        Raises:
            EmbeddingError: Provider failure or vector count mismatch
        """
        for batch_number, batch_start in enumerate(range(0, len(chunks), self._batch_size)):
            batch = chunks[batch_start : batch_start + self._batch_size]

            survivors: list[tuple[int, TextChunk]] = []
            for offset, chunk in enumerate(batch):
                content = sanitize(chunk.content)
                if not content:
                    continue
                survivors.append(
                    (batch_start + offset, chunk.model_copy(update={"content": content}))
                )

            dropped = len(batch) - len(survivors)
            if not survivors:
                logger.warning(
                    f"{__name__}:embed_chunks - Skipping batch {batch_number}, no content after sanitization",
                    extra={"batch_size": len(batch)},
                )
                continue

            vectors = await self._embed_texts(
                [chunk.content for _, chunk in survivors], batch_number
            )
            if len(vectors) != len(survivors):
                raise EmbeddingError(
                    f"Provider returned {len(vectors)} vectors for {len(survivors)} inputs",
                    details={"batch_number": batch_number, "model": self._model},
                )

            yield EmbeddingBatch(
                batch_number=batch_number,
                items=[
                    EmbeddedChunk(chunk_index=chunk_index, chunk=chunk, vector=vector)
                    for (chunk_index, chunk), vector in zip(survivors, vectors)
                ],
                dropped=dropped,
            )

    async def embed_query(self, text: str) -> list[float]:
        """
        Embed a single query string.

        Raises:
            EmbeddingError: When the provider call fails
        """
        try:
            return await self._embeddings.aembed_query(text)
        except Exception as e:
            raise EmbeddingError(
                f"Failed to embed query: {e}",
                details={"model": self._model},
            ) from e

    async def _embed_texts(self, texts: list[str], batch_number: int) -> list[list[float]]:
        logger.debug(
            f"{__name__}:_embed_texts - Embedding batch {batch_number}",
            extra={"inputs": len(texts), "model": self._model},
        )
        try:
            return await self._embeddings.aembed_documents(texts)
        except Exception as e:
            raise EmbeddingError(
                f"Failed to generate embeddings: {e}",
                details={"batch_number": batch_number, "model": self._model},
            ) from e
