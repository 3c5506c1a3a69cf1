"""
Document processing pipeline.

Chunk extracted text into token windows, embed in batches, and persist
each batch to the embedding catalog and vector index.
"""

from .configs import DocumentPipelineSettings, get_pipeline_settings
from .entrypoint import DocumentPipeline
from .models import PipelineResult

__all__ = [
    "DocumentPipeline",
    "DocumentPipelineSettings",
    "get_pipeline_settings",
    "PipelineResult",
]
