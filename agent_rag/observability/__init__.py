"""
Observability module.

Provides logging configuration, structured-log helpers, and correlation ID
tracking for ingestion runs and search requests.
"""

from agent_rag.observability.correlation import (
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from agent_rag.observability.logger import configure_logging

__all__ = [
    "configure_logging",
    "set_correlation_id",
    "get_correlation_id",
    "clear_correlation_id",
]
