"""Blog post model."""
from sqlalchemy import Column, DateTime, Integer, String, Text

from app.clock import utcnow
from app.database import Base


class Post(Base):
    """Blog post addressed by numeric id or unique slug."""

    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(200), nullable=False)
    slug = Column(String(200), unique=True, nullable=False, index=True)
    content = Column(Text, nullable=False)
    hero_image = Column(String(500))
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
