"""Per-request session authentication.

Resolves the session cookie into an ``Identity`` bound to ``scope["auth"]``,
the slot Starlette exposes read-only as ``request.auth``.
The middleware never rejects a request: routes decide, via the dependencies
in ``app.api.deps``, whether a missing identity is acceptable.
"""
import logging
from dataclasses import dataclass

from fastapi import Request
from sqlalchemy.orm import sessionmaker
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.types import ASGIApp

from app.clock import Clock, utcnow
from app.services.session_store import SqlSessionStore
from app.services.sessions import SessionService
from app.services.users import SqlUserLookup

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """Authenticated principal for a single request."""

    user_id: int


class SessionAuthMiddleware(BaseHTTPMiddleware):
    """Binds the identity behind the session cookie, if any, to the request."""

    def __init__(
        self,
        app: ASGIApp,
        session_factory: sessionmaker,
        cookie_name: str = "sid",
        clock: Clock = utcnow,
    ):
        super().__init__(app)
        self.session_factory = session_factory
        self.cookie_name = cookie_name
        self.clock = clock

    async def dispatch(self, request: Request, call_next) -> Response:
        request.scope["auth"] = None

        token = request.cookies.get(self.cookie_name)
        if token:
            user_id = await run_in_threadpool(self._validate, token)
            if user_id is not None:
                request.scope["auth"] = Identity(user_id=user_id)
            else:
                logger.debug(f"Ignoring invalid session cookie on {request.url.path}")

        return await call_next(request)

    def _validate(self, token: str) -> int | None:
        db = self.session_factory()
        try:
            service = SessionService(SqlSessionStore(db), SqlUserLookup(db), clock=self.clock)
            return service.validate(token)
        finally:
            db.close()
