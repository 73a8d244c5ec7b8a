"""Document endpoints."""

import logging

from fastapi import (
    APIRouter,
    BackgroundTasks,
    Depends,
    Form,
    Query,
    UploadFile,
    status,
)
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from docvault.config import get_settings
from docvault.core.dependencies import get_current_user, get_document_viewer
from docvault.core.redis import enqueue_job
from docvault.core.security import create_document_view_token
from docvault.db.database import get_db
from docvault.db.models import User
from docvault.schemas.document import (
    DocumentContentResponse,
    DocumentListResponse,
    DocumentResponse,
    DocumentShareRequest,
    DocumentShareResponse,
    StarRequest,
    TagUpdateRequest,
    ViewLinkResponse,
)
from docvault.services.content_extractor import is_extractable
from docvault.services.document_service import DocumentService
from docvault.services.query_composer import DocumentFilters, DocumentListMode, QueryComposer
from docvault.services.sharing_service import DocumentPermissions, SharingService
from docvault.utils.file_utils import is_inline_viewable
from docvault.workers.tasks.extraction import store_document_content

logger = logging.getLogger(__name__)
router = APIRouter()


async def enqueue_content_extraction(document_id: str, background_tasks: BackgroundTasks) -> str | None:
    """Enqueue text extraction via ARQ if available, else BackgroundTasks.

    Returns the ARQ job_id if enqueued via ARQ, None if using BackgroundTasks fallback.
    """
    job_id = await enqueue_job("extract_document_content", document_id)
    if job_id:
        return job_id

    # Degraded mode: fall back to in-process BackgroundTasks
    background_tasks.add_task(store_document_content, document_id)
    logger.info("extraction_queued_in_process", extra={"document_id": document_id})
    return None


@router.post("/upload", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def upload_document(
    file: UploadFile,
    background_tasks: BackgroundTasks,
    folder_id: str | None = Form(None),
    tag_ids: list[str] = Form(default=[]),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Upload a document into the user's root level or a folder they can open.

    Returns immediately; ``content`` stays empty until background
    extraction has run.
    """
    service = DocumentService(db, get_settings())
    document = await service.upload(file, current_user, folder_id=folder_id, tag_ids=tag_ids)
    if is_extractable(document.mime_type):
        await enqueue_content_extraction(document.id, background_tasks)
    return document


@router.get("", response_model=DocumentListResponse)
async def list_documents(
    mode: DocumentListMode = Query(DocumentListMode.ALL, description="my_drive, shared, all or invoices"),
    folder_id: str | None = Query(None, description="Folder id; 'null' or 'root' for root level"),
    starred: bool | None = Query(None),
    search: str | None = Query(None, description="Search in original file name"),
    tag_id: str | None = Query(None, description="Filter by tag ID"),
    root_only: bool = Query(False, description="Shared mode: only root-level documents"),
    sort_by: str = Query("created_at", description="Sort field"),
    sort_order: str = Query("desc", description="Sort order: asc or desc"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List documents visible to the current user.

    Admins and managers see every document in ``all`` mode.
    """
    filters = DocumentFilters(
        folder_id=folder_id,
        starred=starred,
        search=search,
        tag_id=tag_id,
        root_only=root_only,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    documents = QueryComposer(db).list_documents(current_user, mode, filters)
    return DocumentListResponse(documents=documents, total=len(documents))


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    return DocumentService(db, get_settings()).get_document(current_user, document_id)


@router.put("/{document_id}/star", response_model=DocumentResponse)
async def star_document(
    document_id: str,
    data: StarRequest | None = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Set the starred flag, or toggle it when no body is sent."""
    starred = data.starred if data else None
    return DocumentService(db, get_settings()).set_starred(current_user, document_id, starred)


@router.put("/{document_id}/share", response_model=DocumentShareResponse)
async def share_document(
    document_id: str,
    data: DocumentShareRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Replace the document's share list and per-action permissions.

    Read permission defaults to ``user_ids``; write and delete must be
    granted explicitly.
    """
    permissions = DocumentPermissions(**data.permissions.model_dump()) if data.permissions else None
    return SharingService(db).share_document(current_user, document_id, data.user_ids, permissions)


@router.put("/{document_id}/tags", response_model=DocumentResponse)
async def update_document_tags(
    document_id: str,
    data: TagUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return DocumentService(db, get_settings()).update_tags(current_user, document_id, data.tag_ids)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(
    document_id: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    """Delete a document, its invoice records and its stored file."""
    DocumentService(db, get_settings()).delete_document(current_user, document_id)
    return None


@router.get("/{document_id}/download")
async def download_document(
    document_id: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    document, path = DocumentService(db, get_settings()).resolve_file(current_user, document_id)
    return FileResponse(path, media_type=document.mime_type, filename=document.original_name)


@router.get("/{document_id}/view-link", response_model=ViewLinkResponse)
async def get_view_link(
    document_id: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    """Mint a short-lived preview URL for a readable document."""
    settings = get_settings()
    DocumentService(db, settings).get_document(current_user, document_id)
    token = create_document_view_token(current_user.id, document_id)
    base = settings.public_base_url.rstrip("/")
    return ViewLinkResponse(
        url=f"{base}/api/documents/{document_id}/view?token={token}",
        expires_in=settings.view_token_expiration_minutes * 60,
    )


@router.get("/{document_id}/view")
async def view_document(
    document_id: str,
    current_user: User = Depends(get_document_viewer),
    db: Session = Depends(get_db),
):
    """Serve the file inline for browser preview.

    Accepts ``?token=`` because the browser opens this URL directly.
    """
    document, path = DocumentService(db, get_settings()).resolve_file(current_user, document_id)
    disposition = "inline" if is_inline_viewable(document.mime_type) else "attachment"
    return FileResponse(
        path,
        media_type=document.mime_type,
        filename=document.original_name,
        content_disposition_type=disposition,
    )


@router.get("/{document_id}/content", response_model=DocumentContentResponse)
async def get_document_content(
    document_id: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    """Extracted text of a document; empty until extraction completes."""
    document = DocumentService(db, get_settings()).get_content(current_user, document_id)
    return DocumentContentResponse(
        id=document.id,
        original_name=document.original_name,
        content=document.content or "",
        extracted=bool(document.content),
    )
