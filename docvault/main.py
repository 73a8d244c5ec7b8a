"""FastAPI application entry point."""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from docvault.api import admin, auth, chatbot, documents, folders, health, invoices, tags, users
from docvault.config import get_settings
from docvault.core.error_handlers import register_error_handlers
from docvault.core.logging import configure_logging
from docvault.core.redis import close_redis_pool, get_redis_pool
from docvault.db.database import init_db, session_scope
from docvault.middleware.request_logging import RequestLoggingMiddleware
from docvault.services.user_service import UserService

settings = get_settings()
configure_logging(settings.log_level, settings.log_format)
logger = logging.getLogger(__name__)


def seed_reference_data() -> None:
    """Seed default departments and the bootstrap admin. Idempotent."""
    with session_scope() as db:
        service = UserService(db)
        service.ensure_default_departments()
        admin = service.ensure_admin(
            email=settings.admin_email,
            password=settings.admin_password,
            name=settings.admin_name,
            department=settings.admin_department,
        )
        logger.debug("admin_user_ready", extra={"email": admin.email})


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: initialize and cleanup services."""
    logger.info(
        "app_starting",
        extra={
            "app": settings.app_name,
            "version": settings.app_version,
            "debug": settings.debug,
            "chatbot_llm_enabled": settings.chatbot_llm_enabled,
            "chat_model": settings.chat_model,
        },
    )

    # Track server start time for uptime calculation
    app.state.start_time = time.time()
    app.state.settings = settings

    init_db()
    seed_reference_data()

    # None if Redis is unavailable: extraction then runs via BackgroundTasks
    redis_pool = await get_redis_pool()
    if redis_pool:
        logger.info("arq_queue_available")
    else:
        logger.warning("arq_queue_unavailable_degraded_mode")

    yield

    await close_redis_pool()
    logger.info("app_stopped")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Document management with folder and department sharing",
    docs_url="/api/docs" if settings.debug else None,
    redoc_url="/api/redoc" if settings.debug else None,
    lifespan=lifespan,
)

# Register global error handlers (AppError → JSON responses)
register_error_handlers(app)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Request logging middleware (adds X-Request-ID, logs method/path/latency)
app.add_middleware(RequestLoggingMiddleware)

# API Routes
app.include_router(health.router, prefix="/api", tags=["Health"])
app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])
app.include_router(folders.router, prefix="/api/folders", tags=["Folders"])
app.include_router(documents.router, prefix="/api/documents", tags=["Documents"])
app.include_router(tags.router, prefix="/api/tags", tags=["Tags"])
app.include_router(invoices.router, prefix="/api/invoices", tags=["Invoices"])
app.include_router(chatbot.router, prefix="/api/chatbot", tags=["Chatbot"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("docvault.main:app", host=settings.host, port=settings.port, reload=settings.debug)
