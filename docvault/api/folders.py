"""Folder endpoints: listing, hierarchy, contents and sharing."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from docvault.core.dependencies import get_current_user
from docvault.db.database import get_db
from docvault.db.models import Folder, User
from docvault.schemas.document import DocumentResponse
from docvault.schemas.folder import (
    BreadcrumbItem,
    FolderContentsResponse,
    FolderCreate,
    FolderDepartmentsRequest,
    FolderRename,
    FolderResponse,
    FolderShareRequest,
    FolderTreeNode,
)
from docvault.services.access_resolver import FULL_VISIBILITY, FolderVisibility
from docvault.services.folder_service import FolderService
from docvault.services.query_composer import ROOT_FOLDER_ALIASES, UNSET, FolderNode, QueryComposer
from docvault.services.sharing_service import SharingService

router = APIRouter()


def folder_response(folder: Folder, flags: FolderVisibility = FULL_VISIBILITY) -> FolderResponse:
    """Serialize a folder decorated with the caller's visibility flags."""
    return FolderResponse.model_validate(folder).model_copy(
        update={
            "has_access": flags.has_access,
            "can_view_content": flags.can_view_content,
            "has_shared_files": flags.has_shared_files,
        }
    )


def _tree_node(node: FolderNode) -> FolderTreeNode:
    base = folder_response(node.folder, node.visibility)
    return FolderTreeNode(
        **base.model_dump(), children=[_tree_node(child) for child in node.children]
    )


@router.get("", response_model=list[FolderResponse])
async def list_folders(
    parent: str | None = Query(
        None, description="Parent folder id; 'null' or 'root' for root level, omit for all"
    ),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List folders visible to the current user.

    Admins and managers see every folder. Other users see folders they can
    open, folders containing documents shared with them, and the ancestors
    of both.
    """
    if parent is None:
        parent_filter = UNSET
    elif parent.lower() in ROOT_FOLDER_ALIASES:
        parent_filter = None
    else:
        parent_filter = parent
    entries = QueryComposer(db).list_folders(current_user, parent=parent_filter)
    return [folder_response(folder, flags) for folder, flags in entries]


@router.post("", response_model=FolderResponse, status_code=status.HTTP_201_CREATED)
async def create_folder(
    data: FolderCreate, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    folder = FolderService(db).create_folder(current_user, data.name, data.parent_id)
    return folder_response(folder)


@router.get("/tree", response_model=list[FolderTreeNode])
async def folder_tree(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Nested tree of every folder visible to the current user."""
    return [_tree_node(node) for node in QueryComposer(db).folder_tree(current_user)]


@router.get("/{folder_id}", response_model=FolderResponse)
async def get_folder(
    folder_id: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    folder, flags = QueryComposer(db).resolver.require_folder_visible(current_user, folder_id)
    return folder_response(folder, flags)


@router.get("/{folder_id}/contents", response_model=FolderContentsResponse)
async def get_folder_contents(
    folder_id: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    """Immediate subfolders and documents of a folder.

    Requires content access; a folder that is only visible (as an ancestor
    or because it holds a shared file) returns 403 ACCESS_DENIED.
    """
    folder, subfolders, documents = QueryComposer(db).list_folder_contents(current_user, folder_id)
    return FolderContentsResponse(
        folder=folder_response(folder),
        folders=[folder_response(f, flags) for f, flags in subfolders],
        documents=[DocumentResponse.model_validate(doc) for doc in documents],
    )


@router.get("/{folder_id}/path", response_model=list[BreadcrumbItem])
async def get_folder_path(
    folder_id: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    """Breadcrumb from the root down to the folder."""
    return [
        BreadcrumbItem(
            id=folder.id,
            name=folder.name,
            has_access=flags.has_access,
            can_view_content=flags.can_view_content,
        )
        for folder, flags in QueryComposer(db).folder_path(current_user, folder_id)
    ]


@router.put("/{folder_id}", response_model=FolderResponse)
async def rename_folder(
    folder_id: str,
    data: FolderRename,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return folder_response(FolderService(db).rename_folder(current_user, folder_id, data.name))


@router.put("/{folder_id}/share", response_model=FolderResponse)
async def share_folder(
    folder_id: str,
    data: FolderShareRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Replace the folder's shared-user list (empty list unshares)."""
    folder = SharingService(db).share_folder_with_users(current_user, folder_id, data.user_ids)
    return folder_response(folder)


@router.put("/{folder_id}/departments", response_model=FolderResponse)
async def set_folder_departments(
    folder_id: str,
    data: FolderDepartmentsRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Replace the departments granted access to the folder."""
    folder = SharingService(db).share_folder_with_departments(
        current_user, folder_id, data.department_ids
    )
    return folder_response(folder)


@router.delete("/{folder_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_folder(
    folder_id: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    """Delete an empty folder (409 CONFLICT while it has contents)."""
    FolderService(db).delete_folder(current_user, folder_id)
    return None
