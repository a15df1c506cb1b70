import os
import sys
from datetime import datetime, timedelta

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app import models  # noqa: E402,F401
from app.api import deps  # noqa: E402
from app.api.auth import router as auth_router  # noqa: E402
from app.api.contact import router as contact_router  # noqa: E402
from app.api.posts import router as posts_router  # noqa: E402
from app.database import Base, configure_sqlite_engine  # noqa: E402
from app.middleware import SessionAuthMiddleware  # noqa: E402
from app.models.user import User  # noqa: E402
from app.services import passwords  # noqa: E402
from app.services.session_store import SqlSessionStore  # noqa: E402
from app.services.sessions import SessionService  # noqa: E402
from app.services.users import SqlUserLookup, get_or_create_role  # noqa: E402

START = datetime(2026, 1, 1, 12, 0, 0)


class FakeClock:
    """Deterministic clock that only moves when told to."""

    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    monkeypatch.setattr(passwords, "BCRYPT_ROUNDS", 4)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    configure_sqlite_engine(engine)
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def session_service(db, clock):
    return SessionService(SqlSessionStore(db), SqlUserLookup(db), clock=clock)


def make_user(db: Session, username: str, user_id: int | None = None, roles: tuple[str, ...] = ("USER",)) -> User:
    user = User(
        id=user_id,
        username=username,
        email=f"{username}@example.com",
        password_hash="hashed",
    )
    for role in roles:
        user.roles.append(get_or_create_role(db, role))
    db.add(user)
    db.flush()
    return user


@pytest.fixture
def client(session_factory, clock):
    app = FastAPI()
    app.add_middleware(SessionAuthMiddleware, session_factory=session_factory, cookie_name="sid", clock=clock)
    app.include_router(auth_router, prefix="/api")
    app.include_router(posts_router, prefix="/api")
    app.include_router(contact_router, prefix="/api")

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    def override_get_session_service(db: Session = Depends(deps.get_db)):
        return SessionService(SqlSessionStore(db), SqlUserLookup(db), clock=clock)

    app.dependency_overrides[deps.get_db] = override_get_db
    app.dependency_overrides[deps.get_session_service] = override_get_session_service
    return TestClient(app)
