"""Document management service."""

import logging
from pathlib import Path

from fastapi import UploadFile
from sqlalchemy.orm import Session

from docvault.config import Settings
from docvault.core.exceptions import (
    FileStorageError,
    FileTooLargeError,
    ValidationError,
)
from docvault.db.models import Document, Tag, User
from docvault.db.repositories import DocumentRepository, InvoiceRepository, TagRepository
from docvault.services.access_resolver import AccessResolver
from docvault.utils.file_utils import generate_stored_name, get_mime_type, remove_path

logger = logging.getLogger(__name__)


class DocumentService:
    """Document management business logic.

    Access checks go through the AccessResolver; this class owns file
    storage and the document lifecycle.
    """

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings
        self.storage_path = Path(settings.upload_dir)
        self.resolver = AccessResolver(db)
        self.documents = DocumentRepository(db)
        self.tags = TagRepository(db)
        self.invoices = InvoiceRepository(db)

    def _owned_tags(self, user: User, tag_ids: list[str]) -> list[Tag]:
        """Load the caller's tags by id; foreign tags count as unknown."""
        return self.tags.require_all(tag_ids, owner_id=user.id)

    async def upload(
        self,
        file: UploadFile,
        user: User,
        folder_id: str | None = None,
        tag_ids: list[str] | None = None,
    ) -> Document:
        """Store an uploaded file and create its document record.

        Args:
            file: Uploaded file
            user: Uploading user, becomes the owner
            folder_id: Target folder, None for the user's root level
            tag_ids: Ids of the uploader's own tags to attach

        Returns:
            Created Document with empty ``content`` until extraction runs

        Raises:
            ValidationError: No file or unknown tags
            FileTooLargeError: File exceeds ``max_upload_size_mb``
            AccessDenied: User cannot open the target folder
        """
        if not file.filename:
            raise ValidationError("No file provided")

        if folder_id:
            self.resolver.require_folder_contents(user, folder_id)

        tags = self._owned_tags(user, tag_ids or [])

        content = await file.read()
        file_size = len(content)
        max_size = self.settings.max_upload_size_mb * 1024 * 1024
        if file_size > max_size:
            raise FileTooLargeError(
                f"File too large. Max size: {self.settings.max_upload_size_mb}MB",
                context={"size": file_size},
            )

        stored_name = generate_stored_name(file.filename)
        owner_dir = self.storage_path / user.id
        file_path = owner_dir / stored_name
        try:
            owner_dir.mkdir(parents=True, exist_ok=True)
            file_path.write_bytes(content)
        except OSError as e:
            raise FileStorageError(f"Failed to save file: {e}") from e

        document = Document(
            name=stored_name,
            original_name=file.filename,
            mime_type=get_mime_type(file.filename, file.content_type),
            size=file_size,
            path=str(file_path),
            folder_id=folder_id or None,
            owner_id=user.id,
            content="",
        )
        document.tags = tags
        self.documents.add(document)
        self.db.commit()
        self.db.refresh(document)

        logger.info(
            "document_uploaded",
            extra={
                "document_id": document.id,
                "owner_id": user.id,
                "folder_id": document.folder_id,
                "size": file_size,
                "mime_type": document.mime_type,
            },
        )
        return document

    def get_document(self, user: User, document_id: str) -> Document:
        """Get a document the user may read."""
        return self.resolver.require_document(user, document_id, "read")

    def set_starred(self, user: User, document_id: str, starred: bool | None = None) -> Document:
        """Star, unstar, or toggle (``starred=None``) a readable document."""
        document = self.resolver.require_document(user, document_id, "read")
        document.is_starred = (not document.is_starred) if starred is None else starred
        self.db.commit()
        self.db.refresh(document)
        return document

    def update_tags(self, user: User, document_id: str, tag_ids: list[str]) -> Document:
        """Replace a document's tags with the caller's own tags."""
        document = self.resolver.require_document(user, document_id, "write")
        document.tags = self._owned_tags(user, tag_ids)
        self.db.commit()
        self.db.refresh(document)
        logger.info(
            "document_tags_updated",
            extra={"document_id": document_id, "tag_count": len(document.tags)},
        )
        return document

    def delete_document(self, user: User, document_id: str) -> None:
        """Delete a document, its invoice records and its stored file."""
        document = self.resolver.require_document(user, document_id, "delete")
        path = Path(document.path)

        removed_invoices = self.invoices.delete_for_document(document.id)
        self.documents.delete(document)
        self.db.commit()

        try:
            remove_path(path)
        except OSError as e:
            # Record is gone; an orphaned file is logged, not fatal
            logger.warning(
                "document_file_delete_failed",
                extra={"document_id": document_id, "path": str(path), "error": str(e)},
            )

        logger.info(
            "document_deleted",
            extra={
                "document_id": document_id,
                "by_user_id": user.id,
                "invoices_removed": removed_invoices,
            },
        )

    def resolve_file(self, user: User, document_id: str) -> tuple[Document, Path]:
        """Return a readable document with the path of its stored file.

        Raises:
            FileStorageError: The record exists but the file is missing on disk.
        """
        document = self.resolver.require_document(user, document_id, "read")
        path = Path(document.path)
        if not path.is_file():
            logger.error(
                "document_file_missing", extra={"document_id": document_id, "path": str(path)}
            )
            raise FileStorageError("Stored file is missing", context={"document_id": document_id})
        return document, path

    def get_content(self, user: User, document_id: str) -> Document:
        """Get a readable document for its extracted text."""
        return self.resolver.require_document(user, document_id, "read")
