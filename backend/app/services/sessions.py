"""Session lifecycle: creation, validation, revocation and expiry sweeping.

A session is valid while its row exists and ``now < expires_at``. Revocation
deletes the row; expired rows linger until ``purge_expired`` removes them,
but ``validate`` already treats them as invalid.
"""
import logging
from collections.abc import Callable
from datetime import timedelta
from typing import Protocol

from app.clock import Clock, utcnow
from app.exceptions import ConflictError, UserNotFoundError
from app.models.auth import UserSession
from app.services.session_store import SessionStore
from app.services.tokens import generate_session_token

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL = timedelta(days=7)
TOKEN_ATTEMPTS = 5


class UserLookup(Protocol):
    """Answers whether a user id refers to an existing account."""

    def exists(self, user_id: int) -> bool:
        ...


class SessionService:
    """Issues and checks opaque session tokens."""

    def __init__(
        self,
        store: SessionStore,
        users: UserLookup,
        clock: Clock = utcnow,
        token_factory: Callable[[], str] = generate_session_token,
        ttl: timedelta = DEFAULT_SESSION_TTL,
    ):
        self.store = store
        self.users = users
        self.clock = clock
        self.token_factory = token_factory
        self.ttl = ttl

    def create(
        self,
        user_id: int,
        user_agent: str | None = None,
        ip_address: str | None = None,
    ) -> str:
        """Persist a new session for ``user_id`` and return its token.

        ``user_agent`` and ``ip_address`` are recorded for auditing only.
        Raises UserNotFoundError if the user does not exist.
        """
        if not self.users.exists(user_id):
            raise UserNotFoundError(user_id)

        for _ in range(TOKEN_ATTEMPTS):
            token = self.token_factory()
            if self.store.exists_by_token(token):
                continue
            try:
                self._insert(token, user_id, user_agent, ip_address)
            except ConflictError:
                # Lost an insert race for the same token
                continue
            return token

        # The unique index is the final backstop; a conflict here propagates.
        token = self.token_factory()
        self._insert(token, user_id, user_agent, ip_address)
        return token

    def _insert(
        self,
        token: str,
        user_id: int,
        user_agent: str | None,
        ip_address: str | None,
    ) -> UserSession:
        now = self.clock()
        session = self.store.save(UserSession(
            user_id=user_id,
            token=token,
            created_at=now,
            expires_at=now + self.ttl,
            user_agent=user_agent[:255] if user_agent else None,
            ip_address=ip_address[:45] if ip_address else None,
        ))
        logger.info(f"Created session {session.id} for user {user_id}")
        return session

    def validate(self, token: str | None) -> int | None:
        """Return the owning user id for a live session token, else None.

        Read-only: expired rows are left for ``purge_expired``.
        """
        if token is None or not token.strip():
            return None

        session = self.store.find_by_token(token)
        if session is None:
            return None
        if not session.expires_at > self.clock():
            return None
        return session.user_id

    def revoke(self, token: str | None) -> bool:
        """Delete the session for ``token``. Returns False if there was none."""
        if token is None or not token.strip():
            return False
        return self.store.delete_by_token(token)

    def revoke_all(self, user_id: int) -> int:
        """Delete every session belonging to ``user_id``."""
        removed = self.store.delete_all_by_user(user_id)
        logger.info(f"Revoked {removed} sessions for user {user_id}")
        return removed

    def purge_expired(self) -> int:
        """Delete sessions whose expiry is at or before now."""
        removed = self.store.delete_all_expired_before(self.clock())
        if removed:
            logger.info(f"Purged {removed} expired sessions")
        return removed
