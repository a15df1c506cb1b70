"""Background sweep that deletes expired sessions."""
import asyncio
import logging

from sqlalchemy.orm import sessionmaker
from starlette.concurrency import run_in_threadpool

from app.clock import Clock, utcnow
from app.database import get_db_context
from app.services.session_store import SqlSessionStore
from app.services.sessions import SessionService
from app.services.users import SqlUserLookup

logger = logging.getLogger(__name__)


def purge_expired_sessions(session_factory: sessionmaker, clock: Clock = utcnow) -> int:
    """Run one sweep in its own transaction. Safe to call from a scheduler/cron."""
    with get_db_context(session_factory) as db:
        service = SessionService(SqlSessionStore(db), SqlUserLookup(db), clock=clock)
        return service.purge_expired()


async def run_session_purge_loop(session_factory: sessionmaker, interval_seconds: float) -> None:
    """Sweep forever until cancelled. A failed sweep is logged and retried next interval."""
    while True:
        try:
            await run_in_threadpool(purge_expired_sessions, session_factory)
        except Exception:
            logger.exception("Expired session sweep failed")
        await asyncio.sleep(interval_seconds)
