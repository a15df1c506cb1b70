"""Domain errors raised by services and translated to HTTP responses by the API layer."""


class ConflictError(Exception):
    """Raised when an insert violates a uniqueness constraint."""


class UserNotFoundError(Exception):
    """Raised when an operation references a user id that does not exist."""

    def __init__(self, user_id: int) -> None:
        super().__init__(f"User not found: {user_id}")
        self.user_id = user_id


class InvalidCredentialsError(Exception):
    """Raised for any login failure. The message never says which check failed."""

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


class DuplicateAccountError(Exception):
    """Raised when registering an email or username that is already taken."""


class PostNotFoundError(Exception):
    """Raised when a post id or slug does not resolve."""


class DuplicateSlugError(Exception):
    """Raised when a post update would reuse another post's slug."""
