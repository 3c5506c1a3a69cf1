"""
Shared test fixtures and configuration for entire test suite.

Provides: in-memory SQLite catalog, in-memory vector index, deterministic
embeddings, offline tiktoken encoding, agent/document factories
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite, tiktoken
System role: Test infrastructure and fixture management
"""

import math
import uuid
from typing import Any

import pytest
import pytest_asyncio
import tiktoken
from langchain_core.embeddings import Embeddings
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from agent_rag.boundary.db.base import Base
from agent_rag.boundary.db.models import AgentModel, DocumentModel, DocumentStatus
from agent_rag.boundary.vdb.vector_index import VectorIndex
from agent_rag.boundary.vdb.vector_schemas import VectorPoint, VectorSearchHit
from agent_rag.core.document_processing.tasks import ChunkingTask

VECTOR_SIZE = 8


class FakeEmbeddings(Embeddings):
    """Deterministic bag-of-words vectors over hashed buckets; records calls."""

    def __init__(self, dimension: int = VECTOR_SIZE) -> None:
        self.dimension = dimension
        self.document_calls: list[list[str]] = []
        self.query_calls: list[str] = []

    def vector_for(self, text: str) -> list[float]:
        vector = [0.0] * self.dimension
        for word in text.lower().split():
            vector[sum(word.encode("utf-8")) % self.dimension] += 1.0
        norm = math.sqrt(sum(value * value for value in vector)) or 1.0
        return [value / norm for value in vector]

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        self.document_calls.append(list(texts))
        return [self.vector_for(text) for text in texts]

    def embed_query(self, text: str) -> list[float]:
        self.query_calls.append(text)
        return self.vector_for(text)

    async def aembed_documents(self, texts: list[str]) -> list[list[float]]:
        return self.embed_documents(texts)

    async def aembed_query(self, text: str) -> list[float]:
        return self.embed_query(text)


class InMemoryVectorIndex(VectorIndex):
    """Dot-product vector index with exact payload filters."""

    def __init__(self, collection_name: str = "embeddings") -> None:
        self._collection_name = collection_name
        self.points: dict[str, VectorPoint] = {}
        self.booted = False
        self.upsert_calls = 0
        self.search_calls = 0

    @property
    def collection_name(self) -> str:
        return self._collection_name

    async def boot(self) -> None:
        self.booted = True

    async def close(self) -> None:
        self.booted = False

    async def healthcheck(self) -> bool:
        return True

    async def ensure_collection(self) -> None:
        return None

    @staticmethod
    def _matches(point: VectorPoint, filters: dict[str, Any] | None) -> bool:
        payload = point.payload.model_dump(by_alias=True)
        return all(payload.get(key) == value for key, value in (filters or {}).items())

    async def upsert(self, points: list[VectorPoint], wait: bool = True) -> None:
        self.upsert_calls += 1
        for point in points:
            self.points[point.id] = point

    async def search(
        self,
        vector: list[float],
        limit: int,
        score_threshold: float | None = None,
        filters: dict[str, Any] | None = None,
    ) -> list[VectorSearchHit]:
        self.search_calls += 1
        hits = []
        for point in self.points.values():
            if not self._matches(point, filters):
                continue
            score = sum(a * b for a, b in zip(vector, point.vector))
            if score_threshold is not None and score < score_threshold:
                continue
            hits.append(
                VectorSearchHit(
                    id=point.id,
                    score=score,
                    payload=point.payload.model_dump(by_alias=True),
                )
            )
        hits.sort(key=lambda hit: hit.score, reverse=True)
        return hits[:limit]

    async def delete(self, filters: dict[str, Any], wait: bool = True) -> None:
        for point_id in [pid for pid, p in self.points.items() if self._matches(p, filters)]:
            del self.points[point_id]

    async def count(self, filters: dict[str, Any] | None = None) -> int:
        return sum(1 for point in self.points.values() if self._matches(point, filters))


@pytest.fixture(scope="session")
def byte_encoding() -> tiktoken.Encoding:
    """
    Offline tiktoken encoding with one token per byte.

    ASCII text of N characters encodes to exactly N tokens.
    """
    return tiktoken.Encoding(
        name="test_bytes",
        pat_str=r"\S+|\s+",
        mergeable_ranks={bytes([i]): i for i in range(256)},
        special_tokens={},
    )


@pytest.fixture
def chunking_task(byte_encoding: tiktoken.Encoding) -> ChunkingTask:
    """Provide ChunkingTask with window 512 / overlap 50 over byte tokens."""
    return ChunkingTask(max_tokens_per_chunk=512, chunk_overlap=50, encoding=byte_encoding)


@pytest.fixture
def fake_embeddings() -> FakeEmbeddings:
    """Provide deterministic embeddings provider."""
    return FakeEmbeddings()


@pytest.fixture
def vector_index() -> InMemoryVectorIndex:
    """Provide empty in-memory vector index."""
    return InMemoryVectorIndex()


@pytest_asyncio.fixture
async def session_factory():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        async_sessionmaker: Factory bound to a fresh schema
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def test_async_db(session_factory):
    """
    Provide a session on the in-memory database.

    Yields:
        AsyncSession: Test database session
    """
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def agent(test_async_db: AsyncSession) -> AgentModel:
    """Provide a persisted agent."""
    agent = AgentModel(id=uuid.uuid4(), name="support-bot")
    test_async_db.add(agent)
    await test_async_db.commit()
    return agent


@pytest.fixture
def make_document(test_async_db: AsyncSession, agent: AgentModel):
    """Provide factory that persists documents for the test agent."""

    async def _make(
        extracted_text: str | None = "",
        name: str = "handbook.md",
        doc_metadata: dict | None = None,
        agent_id: uuid.UUID | None = None,
    ) -> DocumentModel:
        document = DocumentModel(
            id=uuid.uuid4(),
            agent_id=agent_id or agent.id,
            name=name,
            extracted_text=extracted_text,
            status=DocumentStatus.PENDING,
            chunk_count=0,
            embedding_count=0,
            doc_metadata=doc_metadata,
        )
        test_async_db.add(document)
        await test_async_db.commit()
        return document

    return _make
