"""Folder and document access resolution.

Every listing, hierarchy and content endpoint asks this module whether a
user may see a folder or document. Three notions are kept apart:

- direct access: owner, shared user, department grant, or admin/manager role
- content access: direct access, applied to what is inside a folder
- visibility: direct access, folders holding individually shared documents,
  and every ancestor of either, so the tree renders a continuous path
"""

import logging
from dataclasses import dataclass
from typing import Literal

from sqlalchemy.orm import Session

from docvault.config import get_settings
from docvault.core.dependencies import PRIVILEGED_ROLES
from docvault.core.exceptions import AccessDenied, EntityNotFound, IntegrityError
from docvault.db.models import Document, Folder, User
from docvault.db.repositories import DocumentRepository, FolderRepository

logger = logging.getLogger(__name__)

DocumentAction = Literal["read", "write", "delete"]
DOCUMENT_ACTIONS = ("read", "write", "delete")


@dataclass(frozen=True)
class FolderVisibility:
    """Per-folder flags attached to every folder a user can see."""

    has_access: bool = True
    can_view_content: bool = False
    has_shared_files: bool = False


FULL_VISIBILITY = FolderVisibility(has_access=True, can_view_content=True)


class AccessResolver:
    """Computes access verdicts for one request.

    Holds no state beyond the session; create one per request.
    """

    def __init__(self, db: Session, max_depth: int | None = None):
        self.db = db
        self.folders = FolderRepository(db)
        self.documents = DocumentRepository(db)
        self.max_depth = max_depth or get_settings().folder_max_depth

    # --- Roles ---

    @staticmethod
    def is_privileged(user: User) -> bool:
        """Admin and manager bypass all ownership and sharing checks."""
        return user.role in PRIVILEGED_ROLES

    # --- Folders ---

    def has_folder_access(self, user: User, folder: Folder) -> bool:
        """Direct-access predicate for a single folder."""
        if self.is_privileged(user):
            return True
        if folder.owner_id == user.id:
            return True
        if any(member.id == user.id for member in folder.shared_with):
            return True
        return any(dept.id == user.department_id for dept in folder.department_access)

    def accessible_folder_ids(self, user: User) -> set[str]:
        """Ids of folders the user has direct access to."""
        if self.is_privileged(user):
            return self.folders.all_ids()
        return self.folders.ids_with_direct_access(user.id, user.department_id)

    def shared_document_folder_ids(self, user: User) -> set[str]:
        """Ids of folders containing a document individually shared with the user."""
        return self.folders.ids_containing_documents_shared_with(user.id)

    def ancestor_ids(
        self, folder_ids: set[str], parent_map: dict[str, str | None] | None = None
    ) -> set[str]:
        """Collect every ancestor of the given folders up to the root.

        Each folder's depth (its number of ancestors) is recorded the first
        time its chain is walked, so later walks stop at a known folder and
        add its depth instead of re-walking. A folder deeper than
        ``max_depth`` fails no matter which start folder reaches it first.

        Raises:
            IntegrityError: On a cycle, an over-deep chain, or a parent
                reference to a folder that does not exist.
        """
        if parent_map is None:
            parent_map = self.folders.parent_map()

        depths: dict[str, int] = {}
        ancestors: set[str] = set()
        for start in folder_ids:
            if start in depths:
                continue
            chain = [start]
            current = parent_map.get(start)
            base = 0
            while current is not None:
                if current in depths:
                    base = depths[current] + 1
                    ancestors.add(current)
                    break
                if current in chain:
                    logger.error(
                        "folder_cycle_detected", extra={"folder_id": start, "at": current}
                    )
                    raise IntegrityError(
                        "Cycle detected in folder hierarchy",
                        context={"folder_id": start},
                    )
                if current not in parent_map:
                    logger.error(
                        "folder_dangling_parent", extra={"folder_id": start, "parent_id": current}
                    )
                    raise IntegrityError(
                        "Folder references a parent that does not exist",
                        context={"folder_id": start, "parent_id": current},
                    )
                if len(chain) > self.max_depth:
                    self._raise_too_deep(start)
                chain.append(current)
                current = parent_map[current]

            for offset, folder_id in enumerate(reversed(chain)):
                depths[folder_id] = base + offset
            if depths[start] > self.max_depth:
                self._raise_too_deep(start)
            ancestors.update(chain[1:])
        return ancestors

    def _raise_too_deep(self, folder_id: str) -> None:
        logger.error(
            "folder_hierarchy_too_deep",
            extra={"folder_id": folder_id, "max_depth": self.max_depth},
        )
        raise IntegrityError(
            "Folder hierarchy exceeds maximum depth",
            context={"folder_id": folder_id, "max_depth": self.max_depth},
        )

    def folder_depth(self, folder_id: str) -> int:
        """Number of ancestors above ``folder_id`` (0 for a root folder)."""
        return len(self.ancestor_ids({folder_id}))

    def resolve_folder_visibility(self, user: User) -> dict[str, FolderVisibility]:
        """Map every folder visible to the user to its access flags."""
        parent_map = self.folders.parent_map()

        if self.is_privileged(user):
            # Still validate the hierarchy so corrupted data fails loudly
            self.ancestor_ids(set(parent_map), parent_map)
            return {folder_id: FULL_VISIBILITY for folder_id in parent_map}

        direct = self.accessible_folder_ids(user)
        shared = self.shared_document_folder_ids(user)
        base = direct | shared
        ancestors = self.ancestor_ids(base, parent_map)

        visibility: dict[str, FolderVisibility] = {}
        for folder_id in base | ancestors:
            in_direct = folder_id in direct
            visibility[folder_id] = FolderVisibility(
                has_access=True,
                can_view_content=in_direct,
                has_shared_files=folder_id in shared and not in_direct,
            )

        logger.debug(
            "folder_visibility_resolved",
            extra={
                "user_id": user.id,
                "direct": len(direct),
                "shared_files": len(shared),
                "visible": len(visibility),
            },
        )
        return visibility

    def can_access_folder_contents(self, user: User, folder_id: str) -> bool:
        """True if the user may list the folder's immediate contents.

        Raises:
            EntityNotFound: If the folder does not exist.
        """
        folder = self.folders.require(folder_id)
        return self.has_folder_access(user, folder)

    def require_folder_contents(self, user: User, folder_id: str) -> Folder:
        """Load a folder the user may open, or raise AccessDenied."""
        folder = self.folders.require(folder_id)
        if not self.has_folder_access(user, folder):
            raise AccessDenied("Access denied to folder contents", context={"folder_id": folder_id})
        return folder

    def require_folder_visible(self, user: User, folder_id: str) -> tuple[Folder, FolderVisibility]:
        """Load a folder that appears in the user's visibility map."""
        folder = self.folders.require(folder_id)
        if self.is_privileged(user):
            return folder, FULL_VISIBILITY
        flags = self.resolve_folder_visibility(user).get(folder_id)
        if flags is None:
            raise AccessDenied("Access denied to folder", context={"folder_id": folder_id})
        return folder, flags

    # --- Documents ---

    def can_access_document(
        self, user: User, document: Document | str, action: DocumentAction = "read"
    ) -> bool:
        """Decide whether the user may perform ``action`` on a document.

        Raises:
            EntityNotFound: If a document id is given and does not resolve.
            ValueError: On an unknown action.
        """
        if action not in DOCUMENT_ACTIONS:
            raise ValueError(f"Unknown document action: {action}")
        if isinstance(document, str):
            document = self.documents.require(document)

        if self.is_privileged(user):
            return True
        if document.owner_id == user.id:
            return True

        folder = document.folder
        if folder is not None and folder.owner_id == user.id:
            return True

        if action == "read":
            if any(member.id == user.id for member in document.shared_with):
                return True
            if any(member.id == user.id for member in document.read_users):
                return True
            return folder is not None and self.has_folder_access(user, folder)

        return any(member.id == user.id for member in document.permission_users(action))

    def require_document(
        self, user: User, document_id: str, action: DocumentAction = "read"
    ) -> Document:
        """Load a document and enforce ``action``, or raise AccessDenied."""
        document = self.documents.get_with_relations(document_id)
        if document is None:
            raise EntityNotFound("Document not found", context={"id": document_id})
        if not self.can_access_document(user, document, action):
            raise AccessDenied(
                f"Access denied: cannot {action} document",
                context={"document_id": document_id, "action": action},
            )
        return document
