"""Folder lifecycle: create, rename, delete."""

import logging

from sqlalchemy.orm import Session

from docvault.core.exceptions import Conflict, PermissionDenied, ValidationError
from docvault.db.models import Folder, User
from docvault.db.repositories import DocumentRepository, FolderRepository
from docvault.services.access_resolver import AccessResolver

logger = logging.getLogger(__name__)


class FolderService:
    def __init__(self, db: Session):
        self.db = db
        self.resolver = AccessResolver(db)
        self.folders = FolderRepository(db)
        self.documents = DocumentRepository(db)

    @staticmethod
    def _clean_name(name: str) -> str:
        cleaned = (name or "").strip()
        if not cleaned:
            raise ValidationError("Folder name is required")
        return cleaned

    def _require_manageable(self, user: User, folder_id: str) -> Folder:
        folder = self.folders.require(folder_id)
        if folder.owner_id != user.id and not self.resolver.is_privileged(user):
            raise PermissionDenied(
                "Only the folder owner can modify this folder", context={"folder_id": folder_id}
            )
        return folder

    def create_folder(self, user: User, name: str, parent_id: str | None = None) -> Folder:
        """Create a folder at root level or inside a folder the user can open.

        The parent must already exist, which keeps the hierarchy acyclic.

        Raises:
            ValidationError: The new folder would sit deeper than
                ``folder_max_depth``.
        """
        name = self._clean_name(name)
        if parent_id:
            self.resolver.require_folder_contents(user, parent_id)
            depth = self.resolver.folder_depth(parent_id) + 1
            if depth > self.resolver.max_depth:
                raise ValidationError(
                    "Folder nesting is too deep",
                    context={"parent_id": parent_id, "max_depth": self.resolver.max_depth},
                )

        folder = Folder(name=name, parent_id=parent_id or None, owner_id=user.id)
        self.folders.add(folder)
        self.db.commit()
        self.db.refresh(folder)

        logger.info(
            "folder_created",
            extra={"folder_id": folder.id, "owner_id": user.id, "parent_id": folder.parent_id},
        )
        return folder

    def rename_folder(self, user: User, folder_id: str, name: str) -> Folder:
        folder = self._require_manageable(user, folder_id)
        folder.name = self._clean_name(name)
        self.db.commit()
        self.db.refresh(folder)
        logger.info("folder_renamed", extra={"folder_id": folder_id, "by_user_id": user.id})
        return folder

    def delete_folder(self, user: User, folder_id: str) -> None:
        """Delete an empty folder.

        Raises:
            PermissionDenied: Caller is neither owner nor admin/manager
            Conflict: Folder still has subfolders or documents
        """
        folder = self._require_manageable(user, folder_id)

        if self.folders.has_children(folder_id):
            raise Conflict(
                "Folder contains subfolders; delete or move them first",
                context={"folder_id": folder_id},
            )
        if self.documents.folder_has_documents(folder_id):
            raise Conflict(
                "Folder contains documents; delete or move them first",
                context={"folder_id": folder_id},
            )

        self.folders.delete(folder)
        self.db.commit()
        logger.info("folder_deleted", extra={"folder_id": folder_id, "by_user_id": user.id})
