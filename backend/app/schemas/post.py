"""Blog post schemas."""
from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class PostCreate(BaseModel):
    """Request to create a post. The slug is derived from the title when omitted."""

    title: str = Field(..., max_length=200)
    content: str
    slug: str | None = Field(None, max_length=200)
    hero_image: str | None = Field(None, max_length=500)

    @field_validator("title", "content")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class PostUpdate(BaseModel):
    """Partial update. Omitted or null fields are left unchanged."""

    title: str | None = Field(None, max_length=200)
    content: str | None = None
    slug: str | None = Field(None, max_length=200)
    hero_image: str | None = Field(None, max_length=500)


class PostResponse(BaseModel):
    """Post response."""

    id: int
    title: str
    slug: str
    content: str
    hero_image: str | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
