"""ARQ worker settings.

Start the worker with:
    arq docvault.workers.settings.WorkerSettings

The worker runs per-upload extraction jobs and the admin-triggered content
backfill. On startup it reports how many documents are still waiting for
extraction so a stalled queue shows up in the logs.
"""

import logging

from arq.connections import RedisSettings

from docvault.config import get_settings
from docvault.core.logging import configure_logging
from docvault.workers.tasks import backfill_document_content, extract_document_content

logger = logging.getLogger(__name__)


async def on_startup(ctx: dict) -> None:
    from docvault.db.database import init_db, session_scope
    from docvault.db.repositories import DocumentRepository

    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)
    init_db()

    with session_scope() as db:
        pending = len(DocumentRepository(db).pending_extraction(settings.extraction_backfill_batch))

    ctx["settings"] = settings
    logger.info(
        "arq_worker_started",
        extra={"max_jobs": settings.arq_max_jobs, "pending_extraction": pending},
    )


async def on_shutdown(ctx: dict) -> None:
    logger.info("arq_worker_stopping")


class WorkerSettings:
    """ARQ WorkerSettings for `arq docvault.workers.settings.WorkerSettings`."""

    settings = get_settings()

    functions = [extract_document_content, backfill_document_content]
    redis_settings = RedisSettings.from_dsn(settings.redis_url)
    max_jobs = settings.arq_max_jobs
    job_timeout = settings.arq_job_timeout
    health_check_interval = settings.arq_health_check_interval
    on_startup = on_startup
    on_shutdown = on_shutdown
