"""Repository layer — standardized data access for all models."""

from docvault.db.repositories.base import BaseRepository
from docvault.db.repositories.department import DepartmentRepository
from docvault.db.repositories.document import DocumentRepository
from docvault.db.repositories.folder import FolderRepository
from docvault.db.repositories.invoice import InvoiceRepository
from docvault.db.repositories.tag import TagRepository
from docvault.db.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "DepartmentRepository",
    "DocumentRepository",
    "FolderRepository",
    "InvoiceRepository",
    "TagRepository",
    "UserRepository",
]
