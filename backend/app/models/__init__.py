"""SQLAlchemy models package."""
from app.models.user import Role, User, user_roles
from app.models.auth import UserSession
from app.models.post import Post
from app.models.contact import ContactMessage

__all__ = [
    "Role",
    "User",
    "user_roles",
    "UserSession",
    "Post",
    "ContactMessage",
]
