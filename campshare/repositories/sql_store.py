"""Bucket store backed by SQLAlchemy (one row per bucket)."""
from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import delete, select

from campshare.db.models import Bucket
from campshare.db.session import get_session


class SQLStore:
    """Same contract as the in-memory/JSON stores, persisted in the `buckets` table."""

    def get(self, key: str) -> str | None:
        with get_session() as session:
            entity = session.get(Bucket, key)
            return entity.payload if entity else None

    def set(self, key: str, value: str) -> None:
        now = datetime.now(timezone.utc)
        with get_session() as session:
            entity = session.get(Bucket, key)
            if not entity:
                session.add(Bucket(name=key, payload=value, created_at=now, updated_at=now))
            else:
                entity.payload = value
                entity.updated_at = now
            session.commit()

    def delete(self, key: str) -> None:
        with get_session() as session:
            session.execute(delete(Bucket).where(Bucket.name == key))
            session.commit()

    def keys(self) -> list[str]:
        with get_session() as session:
            return list(session.execute(select(Bucket.name)).scalars().all())
