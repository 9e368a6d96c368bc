"""Request-scoped accessors for objects built by the app factory."""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request

from campshare.domain.models import User
from campshare.services.app_context import AppContext


def get_context(request: Request) -> AppContext:
    context = getattr(request.app.state, "context", None)
    if context is None:
        raise RuntimeError("AppContext not configured on app.state")
    return context


def require_current_user(request: Request) -> User:
    user = get_context(request).get_current_user()
    if not user:
        raise HTTPException(401, "Not logged in")
    return user


def require_active_user(user: User = Depends(require_current_user)) -> User:
    """Session user who has replaced their temporary password."""
    if user.temp_password:
        raise HTTPException(403, "Set a new password before continuing")
    return user
