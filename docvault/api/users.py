"""User directory endpoints (used to pick share recipients)."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from docvault.core.dependencies import get_current_user
from docvault.db.database import get_db
from docvault.db.models import User
from docvault.db.repositories import UserRepository
from docvault.schemas.user import UserResponse

router = APIRouter()


@router.get("", response_model=list[UserResponse])
async def list_users(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """List every user, sorted by name."""
    return UserRepository(db).list_directory()


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    """Get user by ID."""
    return UserRepository(db).require(user_id)
