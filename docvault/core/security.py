"""Password hashing and the two JWT flavours DocVault issues.

Session tokens (``scope=access``) authenticate API calls. View tokens
(``scope=document_view``) are short-lived, bound to a single document id and
only accepted by the inline preview route, so a link pasted into a browser
tab cannot be replayed against the rest of the API.
"""

from datetime import datetime, timedelta
from typing import Any

import bcrypt
import jwt

from docvault.config import get_settings

settings = get_settings()

SCOPE_ACCESS = "access"
SCOPE_DOCUMENT_VIEW = "document_view"


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode(), salt).decode()


def verify_password(password: str, hashed: str) -> bool:
    return bcrypt.checkpw(password.encode(), hashed.encode())


def _encode(claims: dict[str, Any], lifetime: timedelta) -> str:
    payload = {**claims, "exp": datetime.utcnow() + lifetime}
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def create_access_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """Create a session token. ``data`` must carry ``sub``."""
    lifetime = expires_delta or timedelta(hours=settings.jwt_expiration_hours)
    return _encode({"scope": SCOPE_ACCESS, **data}, lifetime)


def create_user_token(user) -> str:
    """Session token carrying the user's id, role and department."""
    return create_access_token(
        data={
            "sub": user.id,
            "email": user.email,
            "role": user.role,
            "department": user.department_id,
        }
    )


def create_document_view_token(user_id: str, document_id: str) -> str:
    """Token that lets ``user_id`` open exactly one document inline."""
    return _encode(
        {"sub": user_id, "scope": SCOPE_DOCUMENT_VIEW, "doc": document_id},
        timedelta(minutes=settings.view_token_expiration_minutes),
    )


def decode_token(token: str, allowed_scopes: frozenset[str] = frozenset({SCOPE_ACCESS})):
    """Decode a token and return its claims, or None when invalid.

    Tokens minted before scopes existed have no ``scope`` claim and are
    treated as session tokens.
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except jwt.InvalidTokenError:
        return None
    if payload.get("scope", SCOPE_ACCESS) not in allowed_scopes:
        return None
    return payload
