from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from campshare.core.utils import normalize_phone
from campshare.domain.models import User
from campshare.domain.queries import active_users, pending_users
from campshare.routers.deps import get_context, require_active_user
from campshare.routers.schemas import (
    InviteRequest,
    PermissionsRequest,
    ProfileUpdate,
    ResendRequest,
    UserIn,
    user_out,
)
from campshare.services.app_context import AppContext

router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(require_active_user)])

_GROUPS = {"pending": pending_users, "active": active_users}


def _require_user(context: AppContext, user_id: str) -> User:
    user = context.get_user(user_id)
    if not user:
        raise HTTPException(404, "User not found")
    return user


@router.get("")
def list_users(group: Optional[str] = None, context: AppContext = Depends(get_context)):
    users = context.users
    if group:
        selector = _GROUPS.get(group)
        if not selector:
            raise HTTPException(400, "group must be 'pending' or 'active'")
        users = selector(users)
    return [user_out(u) for u in users]


@router.post("", status_code=201)
def create_user(payload: UserIn, context: AppContext = Depends(get_context)):
    created = context.add_user(User(**payload.model_dump()))
    return user_out(created)


@router.put("/{user_id}/permissions")
def set_permissions(user_id: str, payload: PermissionsRequest, context: AppContext = Depends(get_context)):
    _require_user(context, user_id)
    context.update_user_permissions(user_id, payload.permissions)
    return user_out(context.get_user(user_id))


@router.patch("/{user_id}")
def update_profile(user_id: str, payload: ProfileUpdate, context: AppContext = Depends(get_context)):
    _require_user(context, user_id)
    context.update_user_profile(user_id, **payload.model_dump(exclude_unset=True))
    return user_out(context.get_user(user_id))


@router.post("/invite")
async def invite(payload: InviteRequest, context: AppContext = Depends(get_context)):
    if not normalize_phone(payload.phone_number):
        raise HTTPException(400, "Phone number must contain digits")
    sent = await context.invite_user_by_sms(payload.phone_number, payload.name, payload.permissions, payload.sid)
    user = context.find_user_by_phone(payload.phone_number)
    return {"sent": sent, "user": user_out(user) if user else None}


@router.post("/{user_id}/resend-invitation")
async def resend_invitation(
    user_id: str, payload: Optional[ResendRequest] = None, context: AppContext = Depends(get_context)
):
    _require_user(context, user_id)
    sent = await context.resend_invitation(user_id, payload.sid if payload else None)
    return {"sent": sent, "user": user_out(context.get_user(user_id))}
