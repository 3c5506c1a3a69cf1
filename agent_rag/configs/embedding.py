"""
Embedding provider configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Embedding provider and model selection
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EmbeddingSettings(BaseSettings):
    """Embedding provider configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="EMBEDDING_",
        case_sensitive=False,
        extra="ignore",
    )

    provider: str = Field(
        default="google",
        description="Embedding provider: 'google' (Gemini) or 'bedrock' (Titan)",
    )
    model: str = Field(
        default="models/gemini-embedding-001",
        description="Provider model identifier, stored on every catalog row",
    )
    dimension: int = Field(
        default=1536,
        description="Fixed output dimension (must equal VECTOR_STORE_VECTOR_SIZE)",
    )
    region: str = Field(default="us-east-1", description="AWS region for Bedrock")
