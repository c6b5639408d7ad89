"""Engine/session helpers for the SQL backend."""
from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from shop_api.core.config import get_settings

Base = declarative_base()


@lru_cache
def get_engine():
    settings = get_settings()
    url = (settings.database_url or "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL must be configured to use the SQL backend.")
    connect_args = {}
    if make_url(url).get_backend_name() == "sqlite":
        # sync endpoints run in FastAPI's threadpool
        connect_args["check_same_thread"] = False
    return create_engine(
        url,
        future=True,
        pool_pre_ping=True,
        echo=settings.log_level == "DEBUG",
        connect_args=connect_args,
    )


@lru_cache
def _get_sessionmaker():
    return sessionmaker(bind=get_engine(), autoflush=False, autocommit=False, future=True)


@contextmanager
def get_session() -> Session:
    """Short-lived session; every repository call opens and closes its own."""
    session: Session = _get_sessionmaker()()
    try:
        yield session
    finally:
        session.close()
