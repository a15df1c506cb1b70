"""Persistence for login sessions."""
from abc import ABC, abstractmethod
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.exceptions import ConflictError
from app.models.auth import UserSession


class SessionStore(ABC):
    """Storage contract consumed by SessionService.

    Every method is a single-row or single-predicate operation. Implementations
    must enforce token uniqueness atomically.
    """

    @abstractmethod
    def save(self, session: UserSession) -> UserSession:
        """Insert a new session, raising ConflictError if the token is taken."""

    @abstractmethod
    def find_by_token(self, token: str) -> UserSession | None:
        ...

    @abstractmethod
    def exists_by_token(self, token: str) -> bool:
        ...

    @abstractmethod
    def delete_by_token(self, token: str) -> bool:
        """Delete one session and report whether a row was removed."""

    @abstractmethod
    def delete_all_by_user(self, user_id: int) -> int:
        ...

    @abstractmethod
    def delete_all_expired_before(self, cutoff: datetime) -> int:
        """Delete sessions with expires_at <= cutoff and return the count."""


class SqlSessionStore(SessionStore):
    """SessionStore over the ``sessions`` table.

    Methods flush but never commit; the owner of ``db`` decides when the
    unit of work ends.
    """

    def __init__(self, db: Session):
        self.db = db

    def save(self, session: UserSession) -> UserSession:
        try:
            # Savepoint so a duplicate token only undoes this insert.
            with self.db.begin_nested():
                self.db.add(session)
                self.db.flush()
        except IntegrityError as exc:
            raise ConflictError("Session token already exists") from exc
        return session

    def find_by_token(self, token: str) -> UserSession | None:
        return self.db.query(UserSession).filter(UserSession.token == token).first()

    def exists_by_token(self, token: str) -> bool:
        query = self.db.query(UserSession.id).filter(UserSession.token == token)
        return self.db.query(query.exists()).scalar()

    def delete_by_token(self, token: str) -> bool:
        deleted = self.db.query(UserSession).filter(
            UserSession.token == token,
        ).delete(synchronize_session=False)
        return deleted > 0

    def delete_all_by_user(self, user_id: int) -> int:
        return self.db.query(UserSession).filter(
            UserSession.user_id == user_id,
        ).delete(synchronize_session=False)

    def delete_all_expired_before(self, cutoff: datetime) -> int:
        return self.db.query(UserSession).filter(
            UserSession.expires_at <= cutoff,
        ).delete(synchronize_session=False)
