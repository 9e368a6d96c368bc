"""SQLAlchemy models backing the key-value persistence buckets."""
from __future__ import annotations

from sqlalchemy import Column, DateTime, String, Text, func

from .session import Base


class Bucket(Base):
    """One serialized collection (events, users, ...) per row."""

    __tablename__ = "buckets"

    name = Column(String(128), primary_key=True)
    payload = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
