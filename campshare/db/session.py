"""Engine/session helpers for the SQL backend."""
from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from campshare.core.config import get_settings

Base = declarative_base()


@lru_cache
def get_engine():
    url = (get_settings().database_url or "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL must be configured to use the SQL backend.")
    return create_engine(url, future=True, pool_pre_ping=True)


@lru_cache
def _get_sessionmaker():
    return sessionmaker(bind=get_engine(), autoflush=False, autocommit=False, future=True)


@contextmanager
def get_session() -> Session:
    session: Session = _get_sessionmaker()()
    try:
        yield session
    finally:
        session.close()


def init_schema() -> None:
    """Create missing tables for every model registered on Base."""
    from . import models  # noqa: F401  # registers tables on Base.metadata

    Base.metadata.create_all(bind=get_engine())


def dispose() -> None:
    """Close pooled connections and forget the cached engine (DATABASE_URL may change)."""
    if get_engine.cache_info().currsize:
        get_engine().dispose()
    get_engine.cache_clear()
    _get_sessionmaker.cache_clear()
