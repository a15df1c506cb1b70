"""Password hashing."""
import bcrypt

BCRYPT_ROUNDS = 12
# bcrypt only reads the first 72 bytes; newer releases refuse longer input.
BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """Hash a password."""
    if not password or not password.strip():
        raise ValueError("Password cannot be empty")
    return bcrypt.hashpw(
        _encode(password),
        bcrypt.gensalt(rounds=BCRYPT_ROUNDS),
    ).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    if not plain_password or not hashed_password:
        return False
    return bcrypt.checkpw(
        _encode(plain_password),
        hashed_password.encode("utf-8"),
    )
