"""Document repository."""

from sqlalchemy import or_, select
from sqlalchemy.orm import selectinload

from docvault.db.models import Document
from docvault.db.repositories.base import BaseRepository
from docvault.utils.file_utils import TEXT_MIME_TYPES


class DocumentRepository(BaseRepository[Document]):
    model = Document
    label = "Document"

    def get_with_relations(self, doc_id: str) -> Document | None:
        """Get document with sharing lists and tags eager-loaded."""
        stmt = (
            select(Document)
            .where(Document.id == doc_id)
            .options(
                selectinload(Document.tags),
                selectinload(Document.shared_with),
                selectinload(Document.read_users),
                selectinload(Document.write_users),
                selectinload(Document.delete_users),
                selectinload(Document.folder),
            )
        )
        return self.db.scalar(stmt)

    def query(self, *conditions, order_by=None, limit: int | None = None) -> list[Document]:
        """Run a composed document query.

        Conditions come from the query composer; the repository only
        executes them with the standard eager-loading options.
        """
        stmt = (
            select(Document)
            .where(*conditions)
            .options(
                selectinload(Document.tags),
                selectinload(Document.owner),
                selectinload(Document.folder),
                selectinload(Document.shared_with),
            )
        )
        if order_by is not None:
            stmt = stmt.order_by(*order_by) if isinstance(order_by, list | tuple) else stmt.order_by(order_by)
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.db.scalars(stmt).all())

    def in_folder(self, folder_id: str) -> list[Document]:
        """Documents stored directly in a folder, newest first."""
        return self.query(Document.folder_id == folder_id, order_by=Document.created_at.desc())

    def folder_has_documents(self, folder_id: str) -> bool:
        """True if at least one document lives directly in the folder."""
        return self.exists(folder_id=folder_id)

    def pending_extraction(self, limit: int) -> list[str]:
        """Ids of PDF/text documents whose content is still empty, oldest first."""
        stmt = (
            select(Document.id)
            .where(
                or_(Document.content.is_(None), Document.content == ""),
                or_(
                    Document.mime_type == "application/pdf",
                    Document.mime_type.like("text/%"),
                    Document.mime_type.in_(TEXT_MIME_TYPES),
                ),
            )
            .order_by(Document.created_at.asc())
            .limit(limit)
        )
        return list(self.db.scalars(stmt).all())
