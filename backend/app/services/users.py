"""User accounts: registration, credential checks and lookups."""
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.clock import utcnow
from app.exceptions import DuplicateAccountError, InvalidCredentialsError
from app.models.user import Role, User
from app.services.passwords import hash_password, verify_password

DEFAULT_ROLE = "USER"
ADMIN_ROLE = "ADMIN"


class SqlUserLookup:
    """User-existence check backed by the ``users`` table."""

    def __init__(self, db: Session):
        self.db = db

    def exists(self, user_id: int) -> bool:
        query = self.db.query(User.id).filter(User.id == user_id)
        return self.db.query(query.exists()).scalar()


def get_or_create_role(db: Session, name: str) -> Role:
    """Fetch a role by name, creating it on first use."""
    role = db.query(Role).filter(Role.name == name).first()
    if role is None:
        role = Role(name=name)
        db.add(role)
        db.flush()
    return role


def register_user(db: Session, username: str, email: str, password: str) -> User:
    """Create an active account with the default role."""
    username = username.strip()
    email = email.strip().lower()

    if db.query(User).filter(func.lower(User.email) == email).first():
        raise DuplicateAccountError("Email already in use")
    if db.query(User).filter(func.lower(User.username) == username.lower()).first():
        raise DuplicateAccountError("Username already in use")

    user = User(
        username=username,
        email=email,
        password_hash=hash_password(password),
        is_active=True,
    )
    user.roles.append(get_or_create_role(db, DEFAULT_ROLE))
    db.add(user)
    db.flush()
    return user


def authenticate_user(db: Session, email_or_username: str, password: str) -> User:
    """Return the user for valid credentials.

    Unknown login, wrong password and inactive account all raise the same
    InvalidCredentialsError.
    """
    login = email_or_username.strip().lower()
    user = db.query(User).filter(
        (func.lower(User.email) == login) | (func.lower(User.username) == login)
    ).first()

    if not user or not verify_password(password, user.password_hash):
        raise InvalidCredentialsError()
    if not user.is_active:
        raise InvalidCredentialsError()

    user.last_login_at = utcnow()
    return user


def get_active_user(db: Session, user_id: int) -> User | None:
    """Get a user by id, or None if missing or deactivated."""
    user = db.query(User).filter(User.id == user_id).first()
    if user is None or not user.is_active:
        return None
    return user
