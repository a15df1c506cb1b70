"""Contact form message model."""
from sqlalchemy import Column, DateTime, Integer, String

from app.clock import utcnow
from app.database import Base


class ContactMessage(Base):
    """Message submitted through the public contact form."""

    __tablename__ = "contact_messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    email = Column(String(200), nullable=False)
    subject = Column(String(200), nullable=False)
    message = Column(String(500), nullable=False)
    sent_at = Column(DateTime, nullable=False, default=utcnow)
