"""Plain-text extraction for uploaded documents."""

import logging
from pathlib import Path

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from docvault.utils.file_utils import TEXT_MIME_TYPES

logger = logging.getLogger(__name__)


def is_extractable(mime_type: str) -> bool:
    """True for the types ``extract_text`` can turn into text."""
    return (
        mime_type == "application/pdf"
        or mime_type.startswith("text/")
        or mime_type in TEXT_MIME_TYPES
    )


def extract_text(path: str | Path, mime_type: str) -> str:
    """Extract searchable text from a stored file.

    PDFs are read page by page with pypdf; ``text/*`` files are decoded as
    UTF-8. Any other type, or an unreadable file, yields an empty string.
    """
    path = Path(path)
    if not path.exists():
        logger.warning("extraction_file_missing", extra={"path": str(path)})
        return ""

    if mime_type == "application/pdf":
        return _extract_pdf(path)
    if mime_type.startswith("text/") or mime_type in TEXT_MIME_TYPES:
        return path.read_text(encoding="utf-8", errors="replace")
    return ""


def _extract_pdf(path: Path) -> str:
    try:
        reader = PdfReader(path)
        pages = [page.extract_text() or "" for page in reader.pages]
    except (PdfReadError, OSError, ValueError) as e:
        logger.warning("pdf_extraction_failed", extra={"path": str(path), "error": str(e)})
        return ""
    return "\n".join(text.strip() for text in pages if text.strip())
