"""
Dependency injection container.

Owns the process-wide clients (engine, vector index, search cache,
embedding provider) and builds per-session services from them. Every
client is constructed explicitly from settings; nothing is bound at
import time.

Dependencies: agent_rag.configs, agent_rag.application, agent_rag.boundary, agent_rag.core
System role: Composition root for the worker and embedding callers
"""

import logging

from langchain_core.embeddings import Embeddings
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from agent_rag.application.services import (
    DocumentService,
    EmbeddingService,
    JobService,
    VectorSearchService,
)
from agent_rag.boundary.cache import SearchCache, get_search_cache
from agent_rag.boundary.db.connection import get_async_engine, get_async_session_factory
from agent_rag.boundary.vdb import VectorIndex, get_vector_index
from agent_rag.configs import Settings, get_settings
from agent_rag.core.context_assembler import ContextAssembler
from agent_rag.core.document_processing.configs import (
    DocumentPipelineSettings,
    get_pipeline_settings,
)
from agent_rag.core.document_processing.embedding_factory import get_embeddings
from agent_rag.core.document_processing.entrypoint import DocumentPipeline
from agent_rag.core.document_processing.tasks import ChunkingTask, EmbeddingTask

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Container for long-lived clients and per-session service factories.

    Any client can be injected; missing ones are built lazily from
    settings on first access.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        pipeline_settings: DocumentPipelineSettings | None = None,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        vector_index: VectorIndex | None = None,
        cache: SearchCache | None = None,
        embeddings: Embeddings | None = None,
        chunking_task: ChunkingTask | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.pipeline_settings = pipeline_settings or get_pipeline_settings()
        self._engine: AsyncEngine | None = None
        self._session_factory = session_factory
        self._vector_index = vector_index
        self._cache = cache
        self._embeddings = embeddings
        self._chunking_task = chunking_task
        self._embedding_task: EmbeddingTask | None = None

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            self._engine = get_async_engine(self.settings.database)
            self._session_factory = get_async_session_factory(self._engine)
        return self._session_factory

    @property
    def vector_index(self) -> VectorIndex:
        if self._vector_index is None:
            self._vector_index = get_vector_index(self.settings.vector_store)
        return self._vector_index

    @property
    def cache(self) -> SearchCache:
        if self._cache is None:
            self._cache = get_search_cache(self.settings.cache)
        return self._cache

    @property
    def embeddings(self) -> Embeddings:
        if self._embeddings is None:
            self._embeddings = get_embeddings(self.settings.embedding)
        return self._embeddings

    @property
    def chunking_task(self) -> ChunkingTask:
        if self._chunking_task is None:
            self._chunking_task = ChunkingTask(
                max_tokens_per_chunk=self.pipeline_settings.max_tokens_per_chunk,
                chunk_overlap=self.pipeline_settings.chunk_overlap,
                encoding_name=self.pipeline_settings.encoding_name,
            )
        return self._chunking_task

    @property
    def embedding_task(self) -> EmbeddingTask:
        if self._embedding_task is None:
            self._embedding_task = EmbeddingTask(
                embeddings=self.embeddings,
                model=self.settings.embedding.model,
                batch_size=self.pipeline_settings.embedding_batch_size,
            )
        return self._embedding_task

    async def startup(self) -> None:
        """Boot the vector index and make sure the collection exists."""
        await self.vector_index.boot()
        await self.vector_index.ensure_collection()
        logger.info(f"{__name__}:startup - Clients ready")

    async def shutdown(self) -> None:
        """Close network clients and dispose the engine."""
        if self._vector_index is not None:
            await self._vector_index.close()
        if self._cache is not None:
            await self._cache.close()
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None

    def embedding_service(self, db: AsyncSession) -> EmbeddingService:
        return EmbeddingService(db, self.vector_index)

    def search_service(self, db: AsyncSession) -> VectorSearchService:
        return VectorSearchService(
            db,
            self.vector_index,
            self.embedding_task,
            self.cache,
            self.settings.cache,
        )

    def context_assembler(self, db: AsyncSession) -> ContextAssembler:
        return ContextAssembler(self.search_service(db))

    def job_service(self, db: AsyncSession) -> JobService:
        return JobService(db)

    def document_service(self, db: AsyncSession) -> DocumentService:
        embedding_service = self.embedding_service(db)
        pipeline = DocumentPipeline(
            db,
            embedding_service,
            self.chunking_task,
            self.embedding_task,
        )
        return DocumentService(db, pipeline, embedding_service, self.search_service(db))
