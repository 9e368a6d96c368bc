from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request

from campshare.core.rate_limiter import rate_limit_ip
from campshare.core.security import password_problems
from campshare.domain.models import User
from campshare.routers.deps import get_context, require_current_user
from campshare.routers.schemas import LoginRequest, SetPasswordRequest, VerifyInvitationRequest, user_out
from campshare.services.app_context import AppContext
from campshare.services.verification_service import InvitationVerifier

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login")
def login(payload: LoginRequest, request: Request, context: AppContext = Depends(get_context)):
    settings = request.app.state.settings
    rate_limit_ip(
        request.app.state.rate_limiter,
        request,
        "auth:login",
        limit=settings.login_rate_limit,
        window_seconds=settings.login_rate_window_seconds,
    )
    user = context.login_with_phone_and_password(payload.phone_number, payload.password)
    if not user:
        raise HTTPException(401, "Invalid phone number or password")
    return {"user": user_out(user)}


@router.post("/logout")
def logout(context: AppContext = Depends(get_context)):
    context.logout()
    return {"ok": True}


@router.get("/me")
def me(user: User = Depends(require_current_user)):
    return {"user": user_out(user)}


@router.post("/reset-password")
def reset_password(
    payload: SetPasswordRequest,
    user: User = Depends(require_current_user),
    context: AppContext = Depends(get_context),
):
    if payload.new_password != payload.confirm_password:
        raise HTTPException(400, "New passwords do not match")
    problems = password_problems(payload.new_password)
    if problems:
        raise HTTPException(400, problems[0])
    if not context.reset_password(user.id, payload.current_password, payload.new_password):
        raise HTTPException(400, "Current password is incorrect")
    return {"user": user_out(context.get_current_user() or user)}


@router.post("/verify-invitation")
def verify_invitation(payload: VerifyInvitationRequest, request: Request, context: AppContext = Depends(get_context)):
    verifier = InvitationVerifier(context, request.app.state.verification_strategy)
    if not verifier.verify(payload.phone_number, payload.code):
        raise HTTPException(400, "Invalid verification code")
    return {"ok": True}
