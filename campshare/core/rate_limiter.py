"""Fixed-window request throttling keyed by client IP."""

from __future__ import annotations

import threading
import time

from fastapi import HTTPException, Request


class RateLimiter:
    def __init__(self) -> None:
        self._hits: dict[str, tuple[int, float]] = {}
        self._lock = threading.Lock()

    def hit(self, key: str, limit: int, window_seconds: int) -> None:
        """Count one request for key; raise 429 once the window's budget is spent."""
        if limit <= 0:
            return
        now = time.monotonic()
        with self._lock:
            count, window_end = self._hits.get(key, (0, now + window_seconds))
            if now > window_end:
                count, window_end = 0, now + window_seconds
            count += 1
            self._hits[key] = (count, window_end)
        if count > limit:
            raise HTTPException(429, "Too many attempts. Please try again shortly.")


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def rate_limit_ip(limiter: RateLimiter, request: Request, scope: str, *, limit: int, window_seconds: int) -> None:
    limiter.hit(f"{scope}:{client_ip(request)}", limit, window_seconds)
