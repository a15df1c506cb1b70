"""Application configuration."""
from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    app_name: str = "Portfolio"
    debug: bool = False
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    # Database
    database_url: str = "sqlite:///./portfolio.db"

    # Sessions
    session_cookie_name: str = "sid"
    session_ttl_days: int = 7
    session_cookie_secure: bool = True
    session_cookie_samesite: str = "lax"
    session_cookie_path: str = "/"
    session_purge_interval_minutes: int = 60  # 0 disables the background sweep

    # Contact form email
    smtp_host: str | None = None
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    contact_recipient_email: str | None = None
    contact_from_email: str = "noreply@localhost"
    contact_from_name: str = "Portfolio Contact Form"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @field_validator("session_cookie_samesite")
    @classmethod
    def validate_samesite(cls, value: str) -> str:
        """Only the three values browsers understand are accepted."""
        lowered = value.lower()
        if lowered not in {"lax", "strict", "none"}:
            raise ValueError("SESSION_COOKIE_SAMESITE must be one of lax, strict, none.")
        return lowered

    @field_validator("session_ttl_days")
    @classmethod
    def validate_ttl(cls, value: int) -> int:
        if value < 1:
            raise ValueError("SESSION_TTL_DAYS must be at least 1.")
        return value

    @field_validator("session_purge_interval_minutes")
    @classmethod
    def validate_purge_interval(cls, value: int) -> int:
        if value < 0:
            raise ValueError("SESSION_PURGE_INTERVAL_MINUTES must not be negative.")
        return value

    @model_validator(mode="after")
    def validate_cookie_security(self) -> "Settings":
        """Fail closed: browsers drop SameSite=None cookies that are not Secure."""
        if self.session_cookie_samesite == "none" and not self.session_cookie_secure:
            raise ValueError("SESSION_COOKIE_SAMESITE=none requires SESSION_COOKIE_SECURE=true.")
        return self

    @property
    def session_max_age_seconds(self) -> int:
        return self.session_ttl_days * 24 * 60 * 60


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
