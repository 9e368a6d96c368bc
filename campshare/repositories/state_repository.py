"""
Persistence adapter for the application context.

Collections are stored as JSON documents in named buckets of a key-value
store. This module only knows how to turn records into JSON (dates as
ISO-8601 strings, enums as their values) and back; what a bucket *means* is
the context's business.
"""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from datetime import date, datetime
from enum import Enum
import json
import logging
from typing import Any, Callable, Optional, Type, TypeVar

from campshare.core.config import Settings, get_settings
from campshare.domain.models import (
    CleaningStatus,
    CleaningTask,
    Event,
    EventCategory,
    InvitationStatus,
    MaintenanceStatus,
    MaintenanceTask,
    Permission,
    Priority,
    User,
)

from .stores import JsonFileStore, MemoryStore

logger = logging.getLogger(__name__)

EVENTS = "campshare-events"
MAINTENANCE = "campshare-maintenance"
CLEANING = "campshare-cleaning"
USERS = "campshare-users"
CURRENT_USER = "campshare-current-user"

BUCKETS = (EVENTS, MAINTENANCE, CLEANING, USERS, CURRENT_USER)

DEFAULT_START_TIME = "09:00"
DEFAULT_END_TIME = "17:00"

RecordT = TypeVar("RecordT")


def parse_datetime(value: str | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def _permissions(values: list) -> list[Permission]:
    return [Permission(v) for v in values]


_CONVERTERS: dict[type, dict[str, Callable[[Any], Any]]] = {
    Event: {
        "date": parse_datetime,
        "end_date": parse_datetime,
        "category": EventCategory,
    },
    MaintenanceTask: {
        "priority": Priority,
        "status": MaintenanceStatus,
        "created_at": parse_datetime,
        "due_date": parse_datetime,
    },
    CleaningTask: {
        "status": CleaningStatus,
        "last_cleaned": parse_datetime,
    },
    User: {
        "permissions": _permissions,
        "invitation_status": InvitationStatus,
        "invitation_sent_at": parse_datetime,
        "last_login": parse_datetime,
        "password_set_at": parse_datetime,
    },
}


def _encode_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [_encode_value(v) for v in value]
    return value


def encode_record(record: Any) -> dict:
    """Dataclass -> JSON-ready dict; unset (None) fields are left out."""
    out = {}
    for f in fields(record):
        value = getattr(record, f.name)
        if value is None:
            continue
        out[f.name] = _encode_value(value)
    return out


def decode_record(cls: Type[RecordT], raw: dict) -> RecordT:
    """JSON dict -> dataclass; keys the record does not know are ignored."""
    names = {f.name for f in fields(cls)}
    converters = _CONVERTERS.get(cls, {})
    kwargs = {}
    for key, value in raw.items():
        if key not in names:
            continue
        if value is not None and key in converters:
            value = converters[key](value)
        kwargs[key] = value
    return cls(**kwargs)


def default_users(hash_password: Callable[[str], str] | None = None) -> list[User]:
    """Accounts seeded on first run so someone can log in."""
    hash_password = hash_password or (lambda raw: raw)
    return [
        User(
            id="admin-user-id",
            name="Admin User",
            permissions=[Permission.ADMIN],
            phone_number="1234567890",
            password=hash_password("admin123"),
            profile_completed=True,
            invitation_status=InvitationStatus.ACCEPTED,
        ),
        User(
            id="regular-user-id",
            name="Regular User",
            permissions=[Permission.READ_ONLY],
            phone_number="0987654321",
            password=hash_password("user123"),
            profile_completed=True,
            invitation_status=InvitationStatus.ACCEPTED,
        ),
    ]


class StateRepository:
    """Loads and write-through saves the context's collections."""

    def __init__(self, store, hash_password: Callable[[str], str] | None = None) -> None:
        self.store = store
        self.hash_password = hash_password

    def _load_list(self, bucket: str, cls: Type[RecordT]) -> list[RecordT]:
        raw = self.store.get(bucket)
        if raw is None:
            return []
        return [decode_record(cls, item) for item in json.loads(raw)]

    def load_events(self) -> list[Event]:
        events = self._load_list(EVENTS, Event)
        for event in events:
            event.start_time = event.start_time or DEFAULT_START_TIME
            event.end_time = event.end_time or DEFAULT_END_TIME
        return events

    def load_maintenance_tasks(self) -> list[MaintenanceTask]:
        return self._load_list(MAINTENANCE, MaintenanceTask)

    def load_cleaning_tasks(self) -> list[CleaningTask]:
        return self._load_list(CLEANING, CleaningTask)

    def load_users(self) -> list[User]:
        if self.store.get(USERS) is None:
            users = default_users(self.hash_password)
            logger.info("No saved users; seeding %d default accounts", len(users))
            self.save(USERS, users)
            return users
        try:
            return self._load_list(USERS, User)
        except (ValueError, TypeError) as exc:
            logger.error("Could not parse saved users, falling back to defaults: %s", exc)
            return default_users(self.hash_password)

    def load_current_user(self) -> Optional[User]:
        raw = self.store.get(CURRENT_USER)
        if raw is None:
            return None
        return decode_record(User, json.loads(raw))

    def save(self, bucket: str, data: Any) -> None:
        """Serialize a collection (list of records) or a single record; None clears the bucket."""
        if data is None:
            self.store.delete(bucket)
            return
        if is_dataclass(data):
            payload = encode_record(data)
        else:
            payload = [encode_record(item) for item in data]
        self.store.set(bucket, json.dumps(payload, ensure_ascii=False))


def build_store(settings: Settings | None = None):
    """Pick the bucket store named by STORAGE_BACKEND."""
    settings = settings or get_settings()
    backend = settings.storage_backend
    if backend == "memory":
        return MemoryStore()
    if backend == "json":
        return JsonFileStore(settings.data_file)
    if backend == "sql":
        from campshare.db.session import init_schema
        from .sql_store import SQLStore

        init_schema()
        return SQLStore()
    raise ValueError(f"Unknown STORAGE_BACKEND: {backend}")
