"""Listing queries built on top of the access resolver.

Turns resolver verdicts into SQLAlchemy predicates for document listings
and into filtered folder listings, trees and breadcrumbs.
"""

import logging
from dataclasses import dataclass, field
from enum import StrEnum

from sqlalchemy import false, func, or_
from sqlalchemy.orm import Session

from docvault.core.exceptions import AccessDenied, ValidationError
from docvault.db.models import Document, Folder, Tag, User
from docvault.db.repositories import DocumentRepository, FolderRepository, InvoiceRepository
from docvault.db.repositories.folder import ANY_PARENT
from docvault.services.access_resolver import AccessResolver, FolderVisibility

logger = logging.getLogger(__name__)

# Marker for "no parent filter" in list_folders
UNSET = ANY_PARENT

ROOT_FOLDER_ALIASES = {"null", "root"}
DOCUMENT_SORT_FIELDS = {
    "created_at": Document.created_at,
    "original_name": Document.original_name,
    "size": Document.size,
    "updated_at": Document.updated_at,
}


class DocumentListMode(StrEnum):
    MY_DRIVE = "my_drive"
    SHARED = "shared"
    ALL = "all"
    INVOICES = "invoices"


@dataclass
class DocumentFilters:
    """Optional narrowing applied on top of the access predicate."""

    folder_id: str | None = None
    starred: bool | None = None
    search: str | None = None
    tag_id: str | None = None
    root_only: bool = False
    sort_by: str = "created_at"
    sort_order: str = "desc"


@dataclass
class FolderNode:
    folder: Folder
    visibility: FolderVisibility
    children: list["FolderNode"] = field(default_factory=list)


class QueryComposer:
    """Builds access-scoped listings for one request."""

    def __init__(self, db: Session, resolver: AccessResolver | None = None):
        self.db = db
        self.resolver = resolver or AccessResolver(db)
        self.documents = DocumentRepository(db)
        self.folders = FolderRepository(db)
        self.invoices = InvoiceRepository(db)

    # --- Document predicates ---

    def readable_documents_clause(self, user: User):
        """Predicate matching every document the user may read across the tree.

        Returns None for admin/manager (no filter).
        """
        if self.resolver.is_privileged(user):
            return None
        folder_ids = self.resolver.accessible_folder_ids(user)
        conditions = [
            Document.owner_id == user.id,
            Document.shared_with.any(User.id == user.id),
            Document.read_users.any(User.id == user.id),
        ]
        if folder_ids:
            conditions.append(Document.folder_id.in_(folder_ids))
        return or_(*conditions)

    def mode_clauses(self, user: User, mode: DocumentListMode, root_only: bool = False) -> list:
        """Access predicate for a listing mode."""
        if mode == DocumentListMode.MY_DRIVE:
            return [Document.owner_id == user.id, Document.folder_id.is_(None)]

        if mode == DocumentListMode.SHARED:
            clauses = [Document.shared_with.any(User.id == user.id)]
            if root_only:
                clauses.append(Document.folder_id.is_(None))
            return clauses

        readable = self.readable_documents_clause(user)
        clauses = [] if readable is None else [readable]

        if mode == DocumentListMode.INVOICES:
            doc_ids = self.invoices.document_ids_for_owner(user.id)
            clauses.append(Document.id.in_(doc_ids) if doc_ids else false())
        return clauses

    @staticmethod
    def filter_clauses(filters: DocumentFilters) -> list:
        clauses = []
        if filters.folder_id is not None:
            if filters.folder_id.lower() in ROOT_FOLDER_ALIASES:
                clauses.append(Document.folder_id.is_(None))
            else:
                clauses.append(Document.folder_id == filters.folder_id)
        if filters.starred is not None:
            clauses.append(Document.is_starred.is_(filters.starred))
        if filters.search:
            clauses.append(func.lower(Document.original_name).contains(filters.search.lower()))
        if filters.tag_id:
            clauses.append(Document.tags.any(Tag.id == filters.tag_id))
        return clauses

    @staticmethod
    def order_by(filters: DocumentFilters):
        column = DOCUMENT_SORT_FIELDS.get(filters.sort_by)
        if column is None:
            raise ValidationError(
                f"Invalid sort field: {filters.sort_by}",
                context={"allowed": sorted(DOCUMENT_SORT_FIELDS)},
            )
        if filters.sort_order not in ("asc", "desc"):
            raise ValidationError(f"Invalid sort order: {filters.sort_order}")
        return column.asc() if filters.sort_order == "asc" else column.desc()

    def list_documents(
        self,
        user: User,
        mode: DocumentListMode = DocumentListMode.ALL,
        filters: DocumentFilters | None = None,
    ) -> list[Document]:
        """List documents visible to the user in the given mode."""
        filters = filters or DocumentFilters()
        clauses = self.mode_clauses(user, mode, root_only=filters.root_only)
        clauses.extend(self.filter_clauses(filters))
        documents = self.documents.query(*clauses, order_by=self.order_by(filters))
        logger.debug(
            "documents_listed",
            extra={"user_id": user.id, "mode": str(mode), "count": len(documents)},
        )
        return documents

    # --- Folders ---

    def list_folders(self, user: User, parent=UNSET) -> list[tuple[Folder, FolderVisibility]]:
        """List folders visible to the user, optionally under one parent.

        Args:
            parent: UNSET for every visible folder, None for root level,
                or a folder id for its immediate children.
        """
        visibility = self.resolver.resolve_folder_visibility(user)
        folders = self.folders.list_filtered(ids=set(visibility), parent=parent)
        return [(folder, visibility[folder.id]) for folder in folders]

    def list_folder_contents(
        self, user: User, folder_id: str
    ) -> tuple[Folder, list[tuple[Folder, FolderVisibility]], list[Document]]:
        """Immediate subfolders and documents of a folder the user may open.

        Raises:
            EntityNotFound: Folder does not exist.
            AccessDenied: User lacks content access to the folder.
        """
        folder = self.resolver.require_folder_contents(user, folder_id)
        subfolders = self.list_folders(user, parent=folder_id)
        documents = self.documents.in_folder(folder_id)
        return folder, subfolders, documents

    def folder_tree(self, user: User) -> list[FolderNode]:
        """Nested tree of every visible folder.

        A node is a root when its parent is not visible to the user.
        """
        entries = self.list_folders(user)
        nodes = {folder.id: FolderNode(folder, flags) for folder, flags in entries}
        roots: list[FolderNode] = []
        for folder, _ in entries:
            node = nodes[folder.id]
            parent_node = nodes.get(folder.parent_id) if folder.parent_id else None
            if parent_node is None:
                roots.append(node)
            else:
                parent_node.children.append(node)
        return roots

    def folder_path(self, user: User, folder_id: str) -> list[tuple[Folder, FolderVisibility]]:
        """Breadcrumb from the root down to ``folder_id``.

        One visibility pass both authorizes the request and supplies the
        flags for every crumb; it also validates the chain being walked.
        """
        folder = self.folders.require(folder_id)
        visibility = self.resolver.resolve_folder_visibility(user)
        if folder_id not in visibility:
            raise AccessDenied("Access denied to folder", context={"folder_id": folder_id})

        path = []
        current = folder
        while current is not None:
            path.append((current, visibility.get(current.id, FolderVisibility())))
            current = current.parent
        path.reverse()
        return path
