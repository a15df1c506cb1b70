"""Database connection and session management."""
from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.config import get_settings

settings = get_settings()


def configure_sqlite_engine(engine: Engine) -> None:
    """Enforce foreign keys and let SQLAlchemy own transaction boundaries.

    pysqlite does not emit BEGIN before a SAVEPOINT, so a savepoint opened as
    the first write of a unit of work would commit on release. Turning off the
    driver's own transaction handling and emitting BEGIN from the ``begin``
    event keeps savepoints nested inside the caller's transaction.
    """

    @event.listens_for(engine, "connect")
    def on_connect(dbapi_connection, connection_record) -> None:
        dbapi_connection.isolation_level = None
        # Session rows rely on ON DELETE CASCADE from users.
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON;")
        cursor.close()

    @event.listens_for(engine, "begin")
    def on_begin(conn) -> None:
        conn.exec_driver_sql("BEGIN")


# SQLite requires check_same_thread=False for FastAPI
connect_args = {"check_same_thread": False} if "sqlite" in settings.database_url else {}

engine = create_engine(
    settings.database_url,
    connect_args=connect_args,
    echo=settings.debug,
)

if "sqlite" in settings.database_url:
    configure_sqlite_engine(engine)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Dependency that provides a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_context(session_factory: sessionmaker = SessionLocal) -> Generator[Session, None, None]:
    """Context manager for database session (for use outside of FastAPI)."""
    db = session_factory()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
