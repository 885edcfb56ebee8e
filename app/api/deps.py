from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from app.db.database import get_db
from app.core.exceptions import ForbiddenError, UnauthorizedError
from app.core.security import decode_token
from app.models.user import User, UserRole

# auto_error=False so a missing header becomes our 401 instead of FastAPI's 403
security = HTTPBearer(auto_error=False)


def _resolve_user(db: Session, token: str) -> User:
    payload = decode_token(token)
    if payload is None or payload.get("sub") is None:
        raise UnauthorizedError("Invalid token")
    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise UnauthorizedError("Invalid token")

    user = db.get(User, user_id)
    if user is None:
        raise UnauthorizedError("User not found")
    return user


def get_current_user(
    db: Session = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> User:
    if credentials is None:
        raise UnauthorizedError("Access token required")
    return _resolve_user(db, credentials.credentials)


def get_current_user_optional(
    db: Session = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[User]:
    """Public routes personalise their output when a valid token is present"""
    if credentials is None:
        return None
    try:
        return _resolve_user(db, credentials.credentials)
    except UnauthorizedError:
        return None


def require_roles(*roles: UserRole):
    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            raise ForbiddenError(
                f"Access denied. Required role: {' or '.join(role.value for role in roles)}"
            )
        return current_user
    return role_checker


require_organizer = require_roles(UserRole.ORGANIZER, UserRole.ADMIN)
require_admin = require_roles(UserRole.ADMIN)
