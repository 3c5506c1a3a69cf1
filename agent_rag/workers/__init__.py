"""
Celery workers module.

Background task processing for document ingestion.

Dependencies: celery, agent_rag.configs
System role: Background task processing
"""

from celery import Celery
from celery.signals import setup_logging

from agent_rag.configs import get_settings
from agent_rag.observability.logger import configure_logging

INGEST_DOCUMENT_TASK = "agent_rag.workers.tasks.document_ingestion.ingest_document"

settings = get_settings()
celery_config = settings.celery

celery_app = Celery(
    settings.service_name,
    broker=celery_config.broker_url,
    backend=celery_config.result_backend_url,
    include=["agent_rag.workers.tasks.document_ingestion"],
)

celery_app.conf.update(
    task_serializer=celery_config.task_serializer,
    result_serializer=celery_config.result_serializer,
    accept_content=celery_config.accept_content,
    timezone=celery_config.timezone,
    task_always_eager=celery_config.task_always_eager,
    task_routes={INGEST_DOCUMENT_TASK: {"queue": celery_config.ingestion_queue}},
)


@setup_logging.connect
def _configure_worker_logging(**kwargs) -> None:
    """Replace Celery's logging setup with the project format."""
    configure_logging(settings.log_level)
