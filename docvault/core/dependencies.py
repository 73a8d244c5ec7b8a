"""FastAPI dependencies for authentication and authorization."""

from fastapi import Depends, HTTPException, Query, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from docvault.core.logging import user_id_var
from docvault.core.security import SCOPE_ACCESS, SCOPE_DOCUMENT_VIEW, decode_token
from docvault.db.database import get_db
from docvault.db.models import User

security = HTTPBearer(auto_error=False)

# Role constants
ROLE_ADMIN = "admin"
ROLE_MANAGER = "manager"
ROLE_EMPLOYEE = "employee"

VALID_ROLES = {ROLE_ADMIN, ROLE_MANAGER, ROLE_EMPLOYEE}

# Roles that bypass ownership and sharing checks
PRIVILEGED_ROLES = frozenset({ROLE_ADMIN, ROLE_MANAGER})

VIEWER_SCOPES = frozenset({SCOPE_ACCESS, SCOPE_DOCUMENT_VIEW})


def _bind_user(request: Request, user: User) -> None:
    request.state.user_id = user.id
    user_id_var.set(user.id)


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Get current user from JWT token (header or cookie)."""
    token = credentials.credentials if credentials else None

    # Fallback to cookie
    if not token:
        token = request.cookies.get("access_token")

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_token(token)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    user = db.get(User, payload.get("sub"))
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")

    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User is deactivated")

    _bind_user(request, user)
    return user


async def get_document_viewer(
    document_id: str,
    request: Request,
    token: str | None = Query(None),
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the user for an inline document preview.

    The browser opens the preview URL directly and cannot attach an
    Authorization header, so ``?token=`` is accepted. It may be a session
    token or a view token minted for this same ``document_id``.
    """
    raw = token or (credentials.credentials if credentials else None)
    if not raw:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Access denied")

    payload = decode_token(raw, allowed_scopes=VIEWER_SCOPES)
    if payload and payload.get("scope") == SCOPE_DOCUMENT_VIEW:
        if payload.get("doc") != document_id:
            payload = None

    user = db.get(User, payload.get("sub")) if payload else None
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token"
        )

    _bind_user(request, user)
    return user


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Require the admin role.

    Employee and department management is admin-only; managers share the
    admin bypass for documents and folders but not for the directory.
    """
    if current_user.role != ROLE_ADMIN:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return current_user
