"""Folder repository."""

from sqlalchemy import func, or_, select
from sqlalchemy.orm import selectinload

from docvault.db.models import Department, Document, Folder, User, document_shared_users
from docvault.db.repositories.base import BaseRepository

# Sentinel for "no parent filter" (distinct from None, which means root level)
ANY_PARENT = object()


class FolderRepository(BaseRepository[Folder]):
    model = Folder
    label = "Folder"

    def parent_map(self) -> dict[str, str | None]:
        """Map every folder id to its parent id in a single query."""
        rows = self.db.execute(select(Folder.id, Folder.parent_id)).all()
        return {folder_id: parent_id for folder_id, parent_id in rows}

    def all_ids(self) -> set[str]:
        """Ids of every folder in the system."""
        return set(self.db.scalars(select(Folder.id)).all())

    def ids_with_direct_access(self, user_id: str, department_id: str | None) -> set[str]:
        """Ids of folders the user owns, is shared on, or reaches via department."""
        conditions = [
            Folder.owner_id == user_id,
            Folder.shared_with.any(User.id == user_id),
        ]
        if department_id:
            conditions.append(Folder.department_access.any(Department.id == department_id))
        stmt = select(Folder.id).where(or_(*conditions))
        return set(self.db.scalars(stmt).all())

    def ids_containing_documents_shared_with(self, user_id: str) -> set[str]:
        """Ids of folders holding at least one document individually shared with the user."""
        stmt = (
            select(Document.folder_id)
            .join(document_shared_users, document_shared_users.c.document_id == Document.id)
            .where(document_shared_users.c.user_id == user_id)
            .where(Document.folder_id.is_not(None))
            .distinct()
        )
        return set(self.db.scalars(stmt).all())

    def list_filtered(self, ids: set[str] | None = None, parent=ANY_PARENT) -> list[Folder]:
        """List folders sorted case-insensitively by name.

        Args:
            ids: Restrict to these folder ids (None = no restriction)
            parent: Parent id, None for root level, or ANY_PARENT for no filter
        """
        stmt = select(Folder).options(
            selectinload(Folder.owner),
            selectinload(Folder.shared_with),
            selectinload(Folder.department_access),
        )
        if ids is not None:
            if not ids:
                return []
            stmt = stmt.where(Folder.id.in_(ids))
        if parent is None:
            stmt = stmt.where(Folder.parent_id.is_(None))
        elif parent is not ANY_PARENT:
            stmt = stmt.where(Folder.parent_id == parent)
        stmt = stmt.order_by(func.lower(Folder.name).asc(), Folder.created_at.asc())
        return list(self.db.scalars(stmt).all())

    def has_children(self, folder_id: str) -> bool:
        """True if any folder names this one as parent."""
        return self.exists(parent_id=folder_id)
