"""File handling utilities for document storage."""

import mimetypes
import shutil
import uuid
from datetime import datetime
from pathlib import Path

# Types browsers can render inline via the view endpoint
INLINE_MIME_PREFIXES = ("image/", "text/", "video/", "audio/")
INLINE_MIME_TYPES = {"application/pdf"}

# Structured text stored without a text/* type; decoded as UTF-8 for search
TEXT_MIME_TYPES = {"application/json", "application/xml"}


def get_file_extension(filename: str) -> str:
    """Extract file extension from filename.

    Args:
        filename: Original filename

    Returns:
        Extension without leading dot, lowercase
    """
    return Path(filename).suffix.lstrip(".").lower()


def get_mime_type(filename: str, declared: str | None = None) -> str:
    """Resolve the MIME type for an upload.

    Prefers the client-declared content type, then guesses from the
    extension, then falls back to ``application/octet-stream``.
    """
    if declared and declared != "application/octet-stream":
        return declared
    extension = get_file_extension(filename)
    mime_types = {
        "pdf": "application/pdf",
        "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "txt": "text/plain",
        "md": "text/markdown",
        "csv": "text/csv",
    }
    if extension in mime_types:
        return mime_types[extension]
    guessed, _ = mimetypes.guess_type(filename)
    return guessed or "application/octet-stream"


def generate_stored_name(filename: str) -> str:
    """Unique on-disk filename keeping the original extension."""
    stamp = datetime.utcnow().strftime("%Y%m%d%H%M%S")
    extension = get_file_extension(filename)
    stem = f"{stamp}-{uuid.uuid4().hex[:12]}"
    return f"{stem}.{extension}" if extension else stem


def is_inline_viewable(mime_type: str) -> bool:
    return mime_type in INLINE_MIME_TYPES or mime_type.startswith(INLINE_MIME_PREFIXES)


def remove_path(path: Path) -> bool:
    """Delete a stored file or directory if present.

    Returns:
        True if something was removed
    """
    if path.is_dir():
        shutil.rmtree(path)
        return True
    if path.exists():
        path.unlink()
        return True
    return False
