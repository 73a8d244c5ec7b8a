"""Share-list mutations for folders and documents."""

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from docvault.core.exceptions import PermissionDenied, ValidationError
from docvault.db.models import Department, Document, Folder, User
from docvault.db.repositories import (
    DepartmentRepository,
    DocumentRepository,
    FolderRepository,
    UserRepository,
)
from docvault.services.access_resolver import AccessResolver

logger = logging.getLogger(__name__)


@dataclass
class DocumentPermissions:
    """Per-action grant lists; None means "use the default"."""

    read: list[str] | None = None
    write: list[str] | None = None
    delete: list[str] | None = None


class SharingService:
    """Replaces share lists on folders and documents.

    Every mutation replaces the stored list (never merges) and recomputes
    ``is_shared``. Only the owner or an admin/manager may share.
    """

    def __init__(self, db: Session):
        self.db = db
        self.resolver = AccessResolver(db)
        self.users = UserRepository(db)
        self.departments = DepartmentRepository(db)
        self.folders = FolderRepository(db)
        self.documents = DocumentRepository(db)

    def _check_owner(self, user: User, owner_id: str, entity: str, entity_id: str) -> None:
        if owner_id != user.id and not self.resolver.is_privileged(user):
            raise PermissionDenied(
                f"Only the owner can change sharing for this {entity}",
                context={f"{entity}_id": entity_id},
            )

    def _load_users(self, user_ids: list[str]) -> list[User]:
        return self.users.require_all(user_ids)

    def _load_departments(self, department_ids: list[str]) -> list[Department]:
        departments = []
        missing = []
        for ref in dict.fromkeys(department_ids):
            dept = self.departments.resolve(ref)
            if dept is None:
                missing.append(ref)
            elif dept not in departments:
                departments.append(dept)
        if missing:
            raise ValidationError("Unknown departments", context={"invalid_ids": missing})
        return departments

    def share_document(
        self,
        user: User,
        document_id: str,
        user_ids: list[str],
        permissions: DocumentPermissions | None = None,
    ) -> Document:
        """Replace a document's share list and per-action grants.

        ``read`` defaults to the share list; ``write`` and ``delete``
        default to empty and must be granted explicitly.
        """
        document = self.documents.get_with_relations(document_id) or self.documents.require(
            document_id
        )
        self._check_owner(user, document.owner_id, "document", document_id)
        permissions = permissions or DocumentPermissions()

        shared = self._load_users(user_ids)
        read = shared if permissions.read is None else self._load_users(permissions.read)
        write = self._load_users(permissions.write or [])
        delete = self._load_users(permissions.delete or [])

        document.shared_with = shared
        document.read_users = read
        document.write_users = write
        document.delete_users = delete
        document.is_shared = len(shared) > 0
        self.db.commit()
        self.db.refresh(document)

        logger.info(
            "document_shared",
            extra={
                "document_id": document.id,
                "by_user_id": user.id,
                "shared_with": len(shared),
                "write": len(write),
                "delete": len(delete),
            },
        )
        return document

    def share_folder_with_users(self, user: User, folder_id: str, user_ids: list[str]) -> Folder:
        """Replace a folder's shared-user list."""
        folder = self.folders.require(folder_id)
        self._check_owner(user, folder.owner_id, "folder", folder_id)

        shared = self._load_users(user_ids)
        folder.shared_with = shared
        folder.is_shared = len(shared) > 0
        self.db.commit()
        self.db.refresh(folder)

        logger.info(
            "folder_shared",
            extra={"folder_id": folder.id, "by_user_id": user.id, "shared_with": len(shared)},
        )
        return folder

    def share_folder_with_departments(
        self, user: User, folder_id: str, department_ids: list[str]
    ) -> Folder:
        """Replace a folder's department grants (ids or names accepted)."""
        folder = self.folders.require(folder_id)
        self._check_owner(user, folder.owner_id, "folder", folder_id)

        departments = self._load_departments(department_ids)
        folder.department_access = departments
        self.db.commit()
        self.db.refresh(folder)

        logger.info(
            "folder_department_access_updated",
            extra={
                "folder_id": folder.id,
                "by_user_id": user.id,
                "departments": [d.name for d in departments],
            },
        )
        return folder
