"""Content extraction ARQ tasks.

Reads a stored upload, extracts plain text and persists it on
``Document.content`` so keyword and chatbot search can find it. The
backfill task sweeps documents whose extraction never ran, e.g. uploads
accepted while the worker was down.
"""

import logging

from docvault.config import get_settings
from docvault.db.database import SessionLocal
from docvault.db.models import Document
from docvault.db.repositories import DocumentRepository
from docvault.services.content_extractor import extract_text

logger = logging.getLogger(__name__)


def store_document_content(document_id: str) -> dict:
    """Extract and persist content for one document in its own session.

    Returns:
        Dict with the outcome (success, characters, error)
    """
    db = SessionLocal()
    try:
        document = db.get(Document, document_id)
        if document is None:
            logger.warning("extraction_document_missing", extra={"document_id": document_id})
            return {"success": False, "error": "Document not found"}

        text = extract_text(document.path, document.mime_type)
        document.content = text
        db.commit()
        logger.info(
            "document_content_extracted",
            extra={"document_id": document_id, "characters": len(text)},
        )
        return {"success": True, "characters": len(text)}
    except Exception as e:
        db.rollback()
        logger.exception("document_extraction_failed", extra={"document_id": document_id})
        return {"success": False, "error": str(e)}
    finally:
        db.close()


def backfill_pending_content(limit: int | None = None) -> dict:
    """Run extraction for up to ``limit`` documents still missing content.

    Files that genuinely contain no text stay empty and are picked up
    again by the next sweep.
    """
    limit = limit or get_settings().extraction_backfill_batch
    db = SessionLocal()
    try:
        pending = DocumentRepository(db).pending_extraction(limit)
    finally:
        db.close()

    results = [store_document_content(document_id) for document_id in pending]
    extracted = sum(1 for r in results if r["success"] and r["characters"])
    logger.info(
        "content_backfill_finished",
        extra={"scanned": len(pending), "extracted": extracted},
    )
    return {"scanned": len(pending), "extracted": extracted}


async def extract_document_content(ctx: dict, document_id: str) -> dict:
    """ARQ task: extract text content for an uploaded document."""
    logger.info("extraction_job_started", extra={"document_id": document_id})
    return store_document_content(document_id)


async def backfill_document_content(ctx: dict, limit: int | None = None) -> dict:
    """ARQ task: sweep documents whose content was never extracted."""
    logger.info("backfill_job_started", extra={"limit": limit})
    return backfill_pending_content(limit)
