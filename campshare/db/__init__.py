"""Database helpers (engine/session export)."""

from .session import Base, dispose, get_engine, get_session, init_schema

__all__ = ["Base", "dispose", "get_engine", "get_session", "init_schema"]
