"""Authentication endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from docvault.config import get_settings
from docvault.core.dependencies import get_current_user
from docvault.core.security import create_user_token
from docvault.db.database import get_db
from docvault.db.models import User
from docvault.schemas.auth import LoginRequest, RegisterRequest, TokenResponse
from docvault.schemas.user import UserResponse
from docvault.services.user_service import UserService

logger = logging.getLogger(__name__)
router = APIRouter()
settings = get_settings()


def _issue_token(response: Response, user: User) -> dict:
    token = create_user_token(user)
    expires_in = settings.jwt_expiration_hours * 3600
    response.set_cookie(
        key="access_token",
        value=token,
        httponly=True,
        secure=False,
        samesite="lax",
        max_age=expires_in,
    )
    return {
        "access_token": token,
        "token_type": "bearer",
        "expires_in": expires_in,
        "user": user,
    }


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(data: RegisterRequest, response: Response, db: Session = Depends(get_db)):
    """Register a new account.

    ``department`` accepts a department id or its name (case-insensitive).
    """
    user = UserService(db).create_user(
        name=data.name,
        email=data.email,
        password=data.password,
        department=data.department,
        role=data.role,
    )
    logger.info("user_registered", extra={"user_id": user.id, "role": user.role})
    return _issue_token(response, user)


@router.post("/login", response_model=TokenResponse)
async def login(
    request: Request, credentials: LoginRequest, response: Response, db: Session = Depends(get_db)
):
    """Authenticate user and return JWT token."""
    user = UserService(db).authenticate(credentials.email, credentials.password)

    if user is None:
        logger.warning(
            "login_failed",
            extra={
                "email": credentials.email,
                "reason": "invalid_credentials",
                "client_ip": request.client.host if request.client else None,
            },
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password"
        )

    if not user.is_active:
        logger.warning(
            "login_failed",
            extra={"email": credentials.email, "reason": "account_deactivated", "user_id": user.id},
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="User account is deactivated"
        )

    logger.info("login_success", extra={"user_id": user.id, "role": user.role})
    return _issue_token(response, user)


@router.post("/logout")
async def logout(response: Response, current_user: User = Depends(get_current_user)):
    """Logout and clear session cookie."""
    response.delete_cookie("access_token")
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get current authenticated user."""
    return current_user
