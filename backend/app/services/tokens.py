"""Opaque session token generation."""
import secrets

TOKEN_BYTES = 32  # 256 bits -> 43 base64url characters


def generate_session_token() -> str:
    """Return a URL-safe token with no padding, safe to use as a cookie value."""
    return secrets.token_urlsafe(TOKEN_BYTES)
