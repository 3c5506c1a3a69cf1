"""
Qdrant implementation of VectorIndex.

Wraps the Qdrant REST API via httpx. All requests go through do_request,
which retries transport failures with exponential backoff and converts
anything non-2xx into VectorStoreError.

Dependencies: httpx, tenacity, agent_rag.configs
System role: Production vector index adapter
"""

import logging
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from agent_rag.boundary.vdb.vector_index import VectorIndex
from agent_rag.boundary.vdb.vector_schemas import VectorPoint, VectorSearchHit
from agent_rag.configs.vector_store import VectorStoreSettings
from agent_rag.core.exceptions import VectorStoreError

logger = logging.getLogger(__name__)


def build_filter(filters: dict[str, Any] | None) -> dict[str, Any] | None:
    """
    Build a Qdrant `must` filter from exact-match key/value pairs.

    Args:
        filters: Payload key to expected value

    Returns:
        Qdrant filter object, or None when no filters are given
    """
    if not filters:
        return None
    return {
        "must": [
            {"key": key, "match": {"value": value}}
            for key, value in filters.items()
        ]
    }


class QdrantVectorIndex(VectorIndex):
    """Qdrant REST adapter bound to a single collection."""

    def __init__(
        self,
        settings: VectorStoreSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize adapter. No connection is opened until boot().

        Args:
            settings: Vector store configuration
            transport: Optional httpx transport (tests inject MockTransport)
        """
        self._settings = settings
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def collection_name(self) -> str:
        return self._settings.collection_name

    def get_auth_header(self) -> dict[str, str]:
        """Return the api-key header if configured."""
        if self._settings.api_key:
            return {"api-key": self._settings.api_key}
        return {}

    def _endpoint_collection(self) -> str:
        return f"/collections/{self.collection_name}"

    def _endpoint_points(self) -> str:
        return f"/collections/{self.collection_name}/points"

    async def boot(self) -> None:
        """Initialise the HTTP client with base URL and auth headers."""
        if self._client is not None:
            return
        self._client = httpx.AsyncClient(
            base_url=self._settings.url,
            headers=self.get_auth_header(),
            timeout=self._settings.timeout,
            transport=self._transport,
        )
        logger.info(
            f"{__name__}:boot - Qdrant client initialised",
            extra={"url": self._settings.url, "collection": self.collection_name},
        )

    async def close(self) -> None:
        """Close the HTTP client and release resources."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def do_request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """
        Send an HTTP request to Qdrant.

        Central dispatcher; every operation calls this.

        Args:
            method: HTTP method
            url: Path relative to the base URL
            **kwargs: Forwarded to httpx (json=, params=)

        Returns:
            httpx.Response: The raw HTTP response

        Raises:
            VectorStoreError: If the client is not booted or the transport
                keeps failing after retries
        """
        if self._client is None:
            raise VectorStoreError(
                "HTTP client not initialised. Call boot() before making requests.",
                operation="request",
            )

        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_exception_type(httpx.TransportError),
                stop=stop_after_attempt(self._settings.max_retries),
                wait=wait_exponential_jitter(initial=0.5, max=10, jitter=1),
                before_sleep=lambda retry_state: logger.warning(
                    f"{__name__}:do_request - Retry {retry_state.attempt_number}/"
                    f"{self._settings.max_retries} for {method} {url}"
                ),
                reraise=True,
            ):
                with attempt:
                    return await self._client.request(method, url, **kwargs)
        except httpx.TransportError as e:
            raise VectorStoreError(
                f"Qdrant unreachable: {e}",
                operation=f"{method} {url}",
            ) from e

    def _raise_for_status(self, response: httpx.Response, operation: str) -> None:
        if response.status_code in (200, 201):
            return
        logger.error(
            f"{__name__}:{operation} - Qdrant returned status {response.status_code}",
            extra={"collection": self.collection_name, "body": response.text[:500]},
        )
        raise VectorStoreError(
            f"Qdrant {operation} failed with status {response.status_code}",
            operation=operation,
            details={"collection": self.collection_name, "status": response.status_code},
        )

    async def healthcheck(self) -> bool:
        """Verify that Qdrant is reachable by listing collections."""
        response = await self.do_request("GET", "/collections")
        self._raise_for_status(response, "healthcheck")
        return True

    async def collection_exists(self) -> bool:
        """
        Check whether the bound collection exists.

        Returns:
            bool: True on 200, False on 404

        Raises:
            VectorStoreError: On any other status
        """
        response = await self.do_request("GET", self._endpoint_collection())
        if response.status_code == 404:
            return False
        self._raise_for_status(response, "collection_exists")
        return True

    async def create_collection(self) -> None:
        """Create the collection with the configured size and distance."""
        body = {
            "vectors": {
                "size": self._settings.vector_size,
                "distance": self._settings.distance,
            },
            "optimizers_config": {
                "default_segment_number": self._settings.segment_number,
            },
            "replication_factor": self._settings.replication_factor,
        }
        response = await self.do_request("PUT", self._endpoint_collection(), json=body)
        # 409: created concurrently by another worker
        if response.status_code == 409:
            logger.info(f"{__name__}:create_collection - Collection already exists")
            return
        self._raise_for_status(response, "create_collection")
        logger.info(
            f"{__name__}:create_collection - Collection created",
            extra={"collection": self.collection_name, "size": self._settings.vector_size},
        )

    async def create_payload_index(self, field_name: str) -> None:
        """Create a keyword payload index on field_name."""
        body = {"field_name": field_name, "field_schema": "keyword"}
        response = await self.do_request(
            "PUT",
            f"{self._endpoint_collection()}/index",
            params={"wait": "true"},
            json=body,
        )
        self._raise_for_status(response, "create_payload_index")

    async def ensure_collection(self) -> None:
        """Create the collection and its payload indexes if missing."""
        if await self.collection_exists():
            return
        await self.create_collection()
        for field_name in self._settings.indexed_payload_fields:
            await self.create_payload_index(field_name)

    async def upsert(self, points: list[VectorPoint], wait: bool = True) -> None:
        """
        Insert or replace points in one request.

        Args:
            points: Points to write; an empty list is a no-op
            wait: Block until Qdrant has applied the write
        """
        if not points:
            return
        for point in points:
            if len(point.vector) != self._settings.vector_size:
                raise VectorStoreError(
                    f"Vector dimension {len(point.vector)} does not match "
                    f"collection size {self._settings.vector_size}",
                    operation="upsert",
                    details={"point_id": point.id},
                )

        body = {"points": [point.to_wire() for point in points]}
        response = await self.do_request(
            "PUT",
            self._endpoint_points(),
            params={"wait": str(wait).lower()},
            json=body,
        )
        self._raise_for_status(response, "upsert")
        logger.debug(f"{__name__}:upsert - Upserted {len(points)} points")

    async def search(
        self,
        vector: list[float],
        limit: int,
        score_threshold: float | None = None,
        filters: dict[str, Any] | None = None,
    ) -> list[VectorSearchHit]:
        """
        Similarity search over the collection.

        Args:
            vector: Query vector
            limit: Maximum number of hits
            score_threshold: Minimum score; hits below it are dropped by Qdrant
            filters: Exact-match payload filters

        Returns:
            list[VectorSearchHit]: Hits ordered by descending score
        """
        body: dict[str, Any] = {
            "vector": vector,
            "limit": limit,
            "with_payload": True,
        }
        if score_threshold is not None:
            body["score_threshold"] = score_threshold
        qdrant_filter = build_filter(filters)
        if qdrant_filter:
            body["filter"] = qdrant_filter

        response = await self.do_request("POST", f"{self._endpoint_points()}/search", json=body)
        self._raise_for_status(response, "search")

        return [
            VectorSearchHit(
                id=str(point["id"]),
                score=float(point["score"]),
                payload=point.get("payload") or {},
            )
            for point in response.json().get("result", [])
        ]

    async def delete(self, filters: dict[str, Any], wait: bool = True) -> None:
        """
        Delete points matching every filter.

        Raises:
            ValueError: If filters is empty (would wipe the collection)
        """
        qdrant_filter = build_filter(filters)
        if qdrant_filter is None:
            raise ValueError("delete requires at least one filter")

        response = await self.do_request(
            "POST",
            f"{self._endpoint_points()}/delete",
            params={"wait": str(wait).lower()},
            json={"filter": qdrant_filter},
        )
        self._raise_for_status(response, "delete")
        logger.debug(f"{__name__}:delete - Deleted points", extra={"filters": filters})

    async def count(self, filters: dict[str, Any] | None = None) -> int:
        """Exact count of points matching the filters."""
        body: dict[str, Any] = {"exact": True}
        qdrant_filter = build_filter(filters)
        if qdrant_filter:
            body["filter"] = qdrant_filter

        response = await self.do_request("POST", f"{self._endpoint_points()}/count", json=body)
        self._raise_for_status(response, "count")
        return int(response.json().get("result", {}).get("count", 0))
