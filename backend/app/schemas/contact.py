"""Contact form schemas."""
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator


class ContactRequest(BaseModel):
    """Public contact form submission."""

    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    subject: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=500)

    @field_validator("email")
    @classmethod
    def email_fits_column(cls, v: str) -> str:
        if len(v) > 200:
            raise ValueError("must be at most 200 characters")
        return v

    @field_validator("name", "subject", "message")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class ContactResponse(BaseModel):
    """Acknowledgement returned to the submitter."""

    id: int
    sent_at: datetime
    message: str
