"""
Key-value stores holding the serialized buckets.

Every store speaks the same three calls (get/set/delete on string values), so
the repository above it does not care whether the bytes end up in memory, a
JSON file or the SQL database.
"""

from __future__ import annotations

from pathlib import Path
import json
import os
import tempfile
import threading


class MemoryStore:
    """Process-local store; nothing survives a restart."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileStore:
    """
    All buckets in a single JSON document, rewritten on every change.

    Request handlers run on a thread pool, so every read and read-modify-write
    holds the store lock, and writes land through a temp file plus os.replace:
    readers only ever see a complete document.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> dict:
        if self.path.exists():
            with self.path.open("r", encoding="utf-8") as f:
                return json.load(f)
        return {}

    def _write(self, db: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(db, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            db = self._load()
            db[key] = value
            self._write(db)

    def delete(self, key: str) -> None:
        with self._lock:
            db = self._load()
            if key in db:
                del db[key]
                self._write(db)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._load())
