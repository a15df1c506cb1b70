"""Portfolio - personal site backend API."""
import asyncio
import logging
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.database import SessionLocal
from app.middleware import SessionAuthMiddleware

settings = get_settings()


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    # SQL echo is controlled by the engine, not the root level
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    configure_logging(settings.debug)

    # Startup: create tables
    from app.database import Base, engine
    from app.services.housekeeping import run_session_purge_loop

    # Import all models so they're registered with Base
    from app import models  # noqa: F401

    Base.metadata.create_all(bind=engine)

    purge_task = None
    if settings.session_purge_interval_minutes:
        purge_task = asyncio.create_task(
            run_session_purge_loop(SessionLocal, settings.session_purge_interval_minutes * 60)
        )

    yield

    # Shutdown: stop the sweep
    if purge_task is not None:
        purge_task.cancel()
        with suppress(asyncio.CancelledError):
            await purge_task


app = FastAPI(
    title=settings.app_name,
    description="Personal portfolio backend: sessions, blog posts and contact form",
    version="0.1.0",
    lifespan=lifespan,
)

# Resolve the session cookie before any route-level authorization
app.add_middleware(
    SessionAuthMiddleware,
    session_factory=SessionLocal,
    cookie_name=settings.session_cookie_name,
)

# CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "app": settings.app_name}


# Import and include routers
from app.api import auth, contact, posts  # noqa: E402

app.include_router(auth.router, prefix="/api")
app.include_router(posts.router, prefix="/api")
app.include_router(contact.router, prefix="/api")
