"""Tag management endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from docvault.core.dependencies import get_current_user
from docvault.db.database import get_db
from docvault.db.models import User
from docvault.schemas.tag import TagCreate, TagResponse, TagUpdate
from docvault.services.tag_service import TagService

router = APIRouter()


@router.get("", response_model=list[TagResponse])
async def list_tags(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """List the current user's tags."""
    return TagService(db).list_tags(current_user)


@router.post("", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
async def create_tag(
    tag_data: TagCreate, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    return TagService(db).create_tag(current_user, tag_data.name, tag_data.color)


@router.put("/{tag_id}", response_model=TagResponse)
async def update_tag(
    tag_id: str,
    tag_data: TagUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return TagService(db).update_tag(current_user, tag_id, tag_data.name, tag_data.color)


@router.delete("/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tag(
    tag_id: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    TagService(db).delete_tag(current_user, tag_id)
    return None
