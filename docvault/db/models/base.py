"""Shared model utilities, mixins, and association tables."""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, String, Table

from docvault.db.database import Base


def generate_uuid() -> str:
    return str(uuid.uuid4())


class TimestampMixin:
    """Provides a standard ``created_at`` column.

    Models that need ``index=True`` on ``created_at`` should override the column.
    """

    created_at = Column(DateTime, default=datetime.utcnow)


class UpdatedAtMixin(TimestampMixin):
    """Adds ``updated_at`` alongside ``created_at``."""

    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


def _link_table(name: str, left: tuple[str, str], right: tuple[str, str]) -> Table:
    """Build a two-column association table with cascading foreign keys."""
    left_col, left_target = left
    right_col, right_target = right
    return Table(
        name,
        Base.metadata,
        Column(
            left_col, String, ForeignKey(left_target, ondelete="CASCADE"), primary_key=True
        ),
        Column(
            right_col, String, ForeignKey(right_target, ondelete="CASCADE"), primary_key=True
        ),
    )


# Folder sharing
folder_shared_users = _link_table(
    "folder_shared_users", ("folder_id", "folders.id"), ("user_id", "users.id")
)
folder_departments = _link_table(
    "folder_departments", ("folder_id", "folders.id"), ("department_id", "departments.id")
)

# Document tagging and sharing
document_tags = _link_table("document_tags", ("document_id", "documents.id"), ("tag_id", "tags.id"))
document_shared_users = _link_table(
    "document_shared_users", ("document_id", "documents.id"), ("user_id", "users.id")
)

# Per-action document permissions
document_read_users = _link_table(
    "document_read_users", ("document_id", "documents.id"), ("user_id", "users.id")
)
document_write_users = _link_table(
    "document_write_users", ("document_id", "documents.id"), ("user_id", "users.id")
)
document_delete_users = _link_table(
    "document_delete_users", ("document_id", "documents.id"), ("user_id", "users.id")
)
