"""
Vector store configuration settings.

Connection and collection parameters for the Qdrant vector index.
Collection name and dimension are plain configuration so that every
VectorIndex instance is explicitly bound to one collection.

Dependencies: pydantic, pydantic_settings
System role: Vector index configuration for RAG retrieval
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class VectorStoreSettings(BaseSettings):
    """Qdrant vector index configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="VECTOR_STORE_",
        case_sensitive=False,
        extra="ignore",
    )

    store_type: str = Field(default="qdrant", description="Vector index backend")
    url: str = Field(default="http://localhost:6333", description="Qdrant REST base URL")
    api_key: str | None = Field(default=None, description="Qdrant API key (optional)")
    timeout: int = Field(default=30, description="Request timeout in seconds")

    collection_name: str = Field(default="embeddings", description="Collection holding chunk vectors")
    vector_size: int = Field(
        default=1536,
        description="Vector dimension; must match the embedding model output",
    )
    distance: str = Field(default="Cosine", description="Distance metric for the collection")
    segment_number: int = Field(default=2, description="Default storage segments on creation")
    replication_factor: int = Field(default=1, description="Replication factor on creation")
    indexed_payload_fields: list[str] = Field(
        default=["agentId", "documentId"],
        description="Payload fields that get a keyword index on collection creation",
    )

    max_retries: int = Field(default=3, description="Attempts for transient HTTP failures")
