"""
Utility helpers shared across routers/services.
"""

from datetime import datetime, timezone
import re
import secrets
import uuid

_NON_DIGITS = re.compile(r"\D")


def normalize_phone(phone: str | None) -> str:
    """Strip everything but digits (the stored/login form of a phone number)."""
    return _NON_DIGITS.sub("", phone or "")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


def generate_temp_password() -> str:
    """Six-digit numeric code, uniform in [100000, 999999]."""
    return str(100000 + secrets.randbelow(900000))
