"""Shared API dependencies."""
from datetime import timedelta

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import get_db
from app.middleware import Identity
from app.models.user import User
from app.services.session_store import SqlSessionStore
from app.services.sessions import SessionService
from app.services.users import ADMIN_ROLE, SqlUserLookup, get_active_user

__all__ = [
    "get_current_user",
    "get_db",
    "get_identity",
    "get_session_service",
    "require_admin",
]

NOT_AUTHENTICATED = "Not authenticated"


def get_session_service(db: Session = Depends(get_db)) -> SessionService:
    """SessionService bound to the request's database session."""
    settings = get_settings()
    return SessionService(
        SqlSessionStore(db),
        SqlUserLookup(db),
        ttl=timedelta(days=settings.session_ttl_days),
    )


def get_identity(request: Request) -> Identity | None:
    """Identity bound by SessionAuthMiddleware, or None for anonymous requests."""
    return request.scope.get("auth")


def get_current_user(
    identity: Identity | None = Depends(get_identity),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the signed-in user or fail with a uniform 401."""
    user = get_active_user(db, identity.user_id) if identity else None
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=NOT_AUTHENTICATED,
        )
    return user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Allow only users holding the ADMIN role."""
    if ADMIN_ROLE not in current_user.role_names:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return current_user
