"""
Vector index interface.

Abstract contract every vector index backend implements. An instance is
bound to exactly one collection for its whole lifetime.

Dependencies: abc
System role: Vector index abstraction used by the catalog and search services
"""

from abc import ABC, abstractmethod
from typing import Any

from agent_rag.boundary.vdb.vector_schemas import VectorPoint, VectorSearchHit


class VectorIndex(ABC):
    """Interface for vector index backends."""

    @property
    @abstractmethod
    def collection_name(self) -> str:
        """Collection this instance reads and writes."""

    @abstractmethod
    async def boot(self) -> None:
        """Open network resources. Must be called before any request."""

    @abstractmethod
    async def close(self) -> None:
        """Release network resources."""

    @abstractmethod
    async def healthcheck(self) -> bool:
        """Return True if the backend is reachable."""

    @abstractmethod
    async def ensure_collection(self) -> None:
        """Create the collection and its payload indexes if missing."""

    @abstractmethod
    async def upsert(self, points: list[VectorPoint], wait: bool = True) -> None:
        """Insert or replace points by id."""

    @abstractmethod
    async def search(
        self,
        vector: list[float],
        limit: int,
        score_threshold: float | None = None,
        filters: dict[str, Any] | None = None,
    ) -> list[VectorSearchHit]:
        """Return up to limit hits ordered by descending score."""

    @abstractmethod
    async def delete(self, filters: dict[str, Any], wait: bool = True) -> None:
        """Delete all points whose payload matches every filter."""

    @abstractmethod
    async def count(self, filters: dict[str, Any] | None = None) -> int:
        """Exact number of points matching the filters."""

    async def __aenter__(self) -> "VectorIndex":
        await self.boot()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
