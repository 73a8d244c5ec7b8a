"""SQLAlchemy ORM models.

Import from here: ``from docvault.db.models import User, Folder, Document``
"""

from docvault.db.models.base import (
    TimestampMixin,
    UpdatedAtMixin,
    document_delete_users,
    document_read_users,
    document_shared_users,
    document_tags,
    document_write_users,
    folder_departments,
    folder_shared_users,
    generate_uuid,
)
from docvault.db.models.document import Document
from docvault.db.models.folder import Folder
from docvault.db.models.invoice import InvoiceRecord
from docvault.db.models.tag import Tag
from docvault.db.models.user import Department, User

__all__ = [
    "TimestampMixin",
    "UpdatedAtMixin",
    "generate_uuid",
    "folder_shared_users",
    "folder_departments",
    "document_tags",
    "document_shared_users",
    "document_read_users",
    "document_write_users",
    "document_delete_users",
    "Department",
    "User",
    "Folder",
    "Document",
    "Tag",
    "InvoiceRecord",
]
