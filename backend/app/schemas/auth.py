"""Authentication schemas."""
from pydantic import BaseModel, EmailStr, Field


class UserRegister(BaseModel):
    """User registration request."""

    username: str = Field(..., min_length=3, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=255)


class UserLogin(BaseModel):
    """User login request."""

    email_or_username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    """User info response."""

    id: int
    username: str
    email: str
    roles: list[str] = Field(default_factory=list, validation_alias="role_names")

    class Config:
        from_attributes = True
        populate_by_name = True
