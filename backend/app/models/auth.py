"""Authentication/session models."""
from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from app.database import Base


class UserSession(Base):
    """Server-side login session identified by an opaque cookie token.

    Rows are never updated. Deleting a row revokes the session.
    """

    __tablename__ = "sessions"
    __table_args__ = (
        Index("ix_sessions_expires_at", "expires_at"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    token = Column(String(255), unique=True, nullable=False, index=True)
    created_at = Column(DateTime, nullable=False)
    expires_at = Column(DateTime, nullable=False)
    # Audit only
    user_agent = Column(String(255))
    ip_address = Column(String(45))

    user = relationship("User", back_populates="sessions")
