"""Application factory: the one place where the AppContext and its collaborators are built."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from campshare.core.config import Settings, get_settings
from campshare.core.log import configure_logging
from campshare.core.rate_limiter import RateLimiter
from campshare.core.security import get_password_scheme
from campshare.core.sms import TwilioSmsSender
from campshare.repositories.state_repository import StateRepository, build_store
from campshare.routers import auth as auth_router
from campshare.routers import calendar as calendar_router
from campshare.routers import sms as sms_router
from campshare.routers import tasks as tasks_router
from campshare.routers import users as users_router
from campshare.services.app_context import AppContext
from campshare.services.verification_service import VerificationStrategy, fixed_code_strategy

logger = logging.getLogger(__name__)

DEV_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:8080",
    "http://127.0.0.1:8080",
]


def build_context(settings: Settings | None = None, sms_sender=None) -> AppContext:
    """Wire store -> repository -> context from settings."""
    settings = settings or get_settings()
    passwords = get_password_scheme(settings.password_scheme)
    repository = StateRepository(build_store(settings), hash_password=passwords.hash)
    return AppContext(
        repository,
        sms_sender if sms_sender is not None else TwilioSmsSender(settings),
        password_scheme=passwords,
        settings=settings,
    )


def create_app(
    context: AppContext | None = None,
    *,
    settings: Settings | None = None,
    sms_sender=None,
    verification_strategy: VerificationStrategy | None = None,
) -> FastAPI:
    """Factory compatible with uvicorn (`uvicorn campshare.app:create_app --factory`)."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    sender = sms_sender if sms_sender is not None else TwilioSmsSender(settings)
    if context is None:
        context = build_context(settings, sender)

    app = FastAPI(title="CampShare API")
    app.state.settings = settings
    app.state.context = context
    app.state.sms_sender = sender
    app.state.rate_limiter = RateLimiter()
    app.state.verification_strategy = verification_strategy or fixed_code_strategy(settings.invitation_code)

    if settings.app_env != "prod":
        app.add_middleware(
            CORSMiddleware,
            allow_origins=DEV_ORIGINS,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )

    app.include_router(auth_router.router)
    app.include_router(calendar_router.router)
    app.include_router(tasks_router.maintenance_router)
    app.include_router(tasks_router.cleaning_router)
    app.include_router(users_router.router)
    app.include_router(sms_router.router)

    if not settings.sms_configured:
        logger.warning("Twilio credentials are not configured; SMS invitations will not be delivered")
    logger.info("CampShare API ready (env=%s, storage=%s)", settings.app_env, settings.storage_backend)
    return app
