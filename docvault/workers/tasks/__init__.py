"""ARQ task registration.

All ARQ task functions are imported here for WorkerSettings.functions.
"""

from docvault.workers.tasks.extraction import (
    backfill_document_content,
    backfill_pending_content,
    extract_document_content,
    store_document_content,
)

__all__ = [
    "backfill_document_content",
    "backfill_pending_content",
    "extract_document_content",
    "store_document_content",
]
