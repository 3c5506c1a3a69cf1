"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from agent_rag.configs.base import BaseSettings
from agent_rag.configs.cache import CacheSettings
from agent_rag.configs.celery_config import CelerySettings
from agent_rag.configs.database import DatabaseSettings
from agent_rag.configs.embedding import EmbeddingSettings
from agent_rag.configs.vector_store import VectorStoreSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    vector_store: VectorStoreSettings = Field(default_factory=VectorStoreSettings)
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    celery: CelerySettings = Field(default_factory=CelerySettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Environment variables are read once; call get_settings.cache_clear()
    in tests that change them.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
