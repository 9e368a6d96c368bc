"""Password schemes and the password policy used by the set-password flow.

The default scheme compares plaintext, matching how accounts have always been
stored. Deployments that need real credentials should set
PASSWORD_SCHEME=argon2, which stores salted Argon2 hashes instead.
"""

from __future__ import annotations

import re

from argon2 import PasswordHasher, exceptions as argon_exc

from .config import get_settings

MIN_PASSWORD_LENGTH = 8


class PasswordScheme:
    """Turns raw passwords into stored values and checks candidates against them."""

    name = "base"

    def hash(self, password: str) -> str:
        raise NotImplementedError

    def verify(self, password: str, stored: str | None) -> bool:
        raise NotImplementedError


class PlaintextPasswordScheme(PasswordScheme):
    name = "plaintext"

    def hash(self, password: str) -> str:
        return password

    def verify(self, password: str, stored: str | None) -> bool:
        if not stored:
            return False
        return stored == password


class Argon2PasswordScheme(PasswordScheme):
    name = "argon2"
    _PREFIX = "argon2$"

    def __init__(self, hasher: PasswordHasher | None = None) -> None:
        self._ph = hasher or PasswordHasher()

    def hash(self, password: str) -> str:
        return f"{self._PREFIX}{self._ph.hash(password)}"

    def verify(self, password: str, stored: str | None) -> bool:
        value = stored or ""
        if not value.startswith(self._PREFIX):
            return False
        try:
            return self._ph.verify(value[len(self._PREFIX):], password)
        except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
            return False


_SCHEMES = {
    PlaintextPasswordScheme.name: PlaintextPasswordScheme,
    Argon2PasswordScheme.name: Argon2PasswordScheme,
}


def get_password_scheme(name: str | None = None) -> PasswordScheme:
    key = (name or get_settings().password_scheme or "plaintext").lower()
    try:
        return _SCHEMES[key]()
    except KeyError:
        raise ValueError(f"Unknown password scheme: {key}") from None


def password_problems(password: str | None) -> list[str]:
    """Human readable reasons a new password is rejected; empty when acceptable."""
    value = password or ""
    problems = []
    if len(value) < MIN_PASSWORD_LENGTH:
        problems.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    if not re.search(r"[A-Z]", value):
        problems.append("Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", value):
        problems.append("Password must contain at least one lowercase letter")
    if not re.search(r"[0-9]", value):
        problems.append("Password must contain at least one number")
    return problems
