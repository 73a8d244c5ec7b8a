"""Document schemas."""

from datetime import datetime

from pydantic import BaseModel

from docvault.schemas.user import UserSummary


class TagInfo(BaseModel):
    id: str
    name: str
    color: str

    class Config:
        from_attributes = True


class DocumentResponse(BaseModel):
    id: str
    name: str
    original_name: str
    mime_type: str
    size: int
    folder_id: str | None
    owner_id: str
    is_starred: bool
    is_shared: bool
    tags: list[TagInfo] = []
    shared_with: list[UserSummary] = []
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class DocumentListResponse(BaseModel):
    documents: list[DocumentResponse]
    total: int


class DocumentContentResponse(BaseModel):
    id: str
    original_name: str
    content: str
    extracted: bool


class TagUpdateRequest(BaseModel):
    tag_ids: list[str]


class StarRequest(BaseModel):
    """Omit ``starred`` to toggle."""

    starred: bool | None = None


class PermissionLists(BaseModel):
    read: list[str] | None = None
    write: list[str] | None = None
    delete: list[str] | None = None


class DocumentShareRequest(BaseModel):
    user_ids: list[str] = []
    permissions: PermissionLists | None = None


class DocumentShareResponse(DocumentResponse):
    read_users: list[UserSummary] = []
    write_users: list[UserSummary] = []
    delete_users: list[UserSummary] = []


class ViewLinkResponse(BaseModel):
    url: str
    expires_in: int
