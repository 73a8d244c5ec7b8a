"""Folder schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from docvault.schemas.document import DocumentResponse
from docvault.schemas.user import DepartmentInfo, UserSummary


class FolderCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    parent_id: str | None = None


class FolderRename(BaseModel):
    name: str = Field(min_length=1, max_length=255)


class FolderShareRequest(BaseModel):
    user_ids: list[str] = []


class FolderDepartmentsRequest(BaseModel):
    department_ids: list[str] = []


class FolderResponse(BaseModel):
    id: str
    name: str
    parent_id: str | None
    owner_id: str
    is_shared: bool
    shared_with: list[UserSummary] = []
    department_access: list[DepartmentInfo] = []
    created_at: datetime | None = None
    updated_at: datetime | None = None
    # Visibility flags for the requesting user
    has_access: bool = True
    can_view_content: bool = True
    has_shared_files: bool = False

    class Config:
        from_attributes = True


class FolderTreeNode(FolderResponse):
    children: list["FolderTreeNode"] = []


class FolderContentsResponse(BaseModel):
    folder: FolderResponse
    folders: list[FolderResponse]
    documents: list[DocumentResponse]


class BreadcrumbItem(BaseModel):
    id: str
    name: str
    has_access: bool = True
    can_view_content: bool = True


FolderTreeNode.model_rebuild()
