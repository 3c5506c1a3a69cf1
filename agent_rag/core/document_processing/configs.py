"""
Configuration settings for document processing pipeline.

Provides environment-based configuration for chunking and embedding batches.

Dependencies: pydantic, pydantic_settings
System role: Centralized pipeline configuration
"""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DocumentPipelineSettings(BaseSettings):
    """Settings for document ingestion pipeline."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="DOC_PIPELINE_",
        case_sensitive=False,
        extra="ignore",
    )

    # Chunking settings
    max_tokens_per_chunk: int = Field(
        default=512,
        description="Token window size per chunk",
        gt=0,
    )
    chunk_overlap: int = Field(
        default=50,
        description="Tokens shared by consecutive chunks",
        ge=0,
    )
    encoding_name: str = Field(
        default="cl100k_base",
        description=(
            "tiktoken encoding used for chunk token counts; approximates "
            "Gemini and Titan tokenizers, which tiktoken does not ship"
        ),
    )

    # Embedding settings
    embedding_batch_size: int = Field(
        default=100,
        description="Chunks per embedding provider call",
        ge=1,
        le=100,
    )

    @model_validator(mode="after")
    def _check_overlap(self) -> "DocumentPipelineSettings":
        if self.chunk_overlap >= self.max_tokens_per_chunk:
            raise ValueError("chunk_overlap must be smaller than max_tokens_per_chunk")
        return self


@lru_cache
def get_pipeline_settings() -> DocumentPipelineSettings:
    """
    Get cached pipeline settings instance.

    Returns:
        DocumentPipelineSettings: Singleton settings loaded from environment
    """
    return DocumentPipelineSettings()
