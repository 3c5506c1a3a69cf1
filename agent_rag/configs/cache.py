"""
Search cache configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Cache backend selection and TTL for similarity search results
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CacheSettings(BaseSettings):
    """Search result cache configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="CACHE_",
        case_sensitive=False,
        extra="ignore",
    )

    backend: str = Field(default="memory", description="'memory' or 'redis'")
    redis_url: str | None = Field(default=None, description="Redis connection URL")
    ttl_seconds: int = Field(default=3600, description="Search result TTL in seconds")
    key_prefix: str = Field(default="vector_search", description="Prefix for cache keys")
    max_entries: int = Field(
        default=10_000,
        description="Entry cap for the in-memory backend",
        gt=0,
    )
