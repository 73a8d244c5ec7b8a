"""Health check endpoints."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from docvault.config import get_settings
from docvault.core.redis import is_redis_available
from docvault.db.database import get_db

logger = logging.getLogger(__name__)
router = APIRouter()
settings = get_settings()


@router.get("/health")
async def health_check(db: Session = Depends(get_db)):
    """Health check endpoint."""
    try:
        db.execute(text("SELECT 1"))
        database = "connected"
    except SQLAlchemyError as e:
        logger.warning("health_database_failed", extra={"error": str(e)})
        database = "unavailable"

    redis_ok = await is_redis_available() if settings.use_arq_worker else False

    return {
        "status": "healthy" if database == "connected" else "degraded",
        "version": settings.app_version,
        "database": database,
        "redis": "connected" if redis_ok else "unavailable",
        "background_tasks": "arq" if redis_ok else "in_process",
        "chatbot_llm_enabled": settings.chatbot_llm_enabled,
    }


@router.get("/version")
async def version():
    """Get version info."""
    return {"name": settings.app_name, "version": settings.app_version}
