"""Pydantic schemas for API request validation and response shaping."""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from campshare.domain.models import (
    CleaningStatus,
    EventCategory,
    InvitationStatus,
    MaintenanceStatus,
    Permission,
    Priority,
    User,
)
from campshare.repositories.state_repository import encode_record

_TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"
_PRIVATE_USER_FIELDS = ("password", "temp_password")


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------

class LoginRequest(BaseModel):
    phone_number: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class SetPasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str
    confirm_password: str


class VerifyInvitationRequest(BaseModel):
    phone_number: str = Field(..., min_length=1)
    code: str = Field(..., min_length=1, max_length=12)


# ---------------------------------------------------------------------------
# Calendar
# ---------------------------------------------------------------------------

class EventIn(BaseModel):
    title: str = Field(..., min_length=1)
    date: datetime
    end_date: Optional[datetime] = None
    start_time: Optional[str] = Field(None, pattern=_TIME_PATTERN)
    end_time: Optional[str] = Field(None, pattern=_TIME_PATTERN)
    description: Optional[str] = None
    created_by: str = Field(..., min_length=1)
    category: Optional[EventCategory] = None
    color: Optional[str] = None

    @model_validator(mode="after")
    def end_not_before_start(self) -> "EventIn":
        if self.end_date and _day(self.end_date) < _day(self.date):
            raise ValueError("end_date must not be before date")
        return self


def _day(value: datetime | date) -> date:
    return value.date() if isinstance(value, datetime) else value


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------

class MaintenanceTaskIn(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    priority: Priority = Priority.MEDIUM
    status: MaintenanceStatus = MaintenanceStatus.PENDING
    assigned_to: Optional[str] = None
    due_date: Optional[datetime] = None


class CleaningTaskIn(BaseModel):
    area: str = Field(..., min_length=1)
    description: Optional[str] = None
    status: CleaningStatus = CleaningStatus.UNCLEAN
    assigned_to: Optional[str] = None
    last_cleaned: Optional[datetime] = None


class AssignRequest(BaseModel):
    user_id: str = Field(..., min_length=1)


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

class UserIn(BaseModel):
    name: str = Field(..., min_length=1)
    permissions: list[Permission] = Field(default_factory=list)
    phone_number: Optional[str] = None
    email: Optional[str] = None
    invitation_status: Optional[InvitationStatus] = None


class PermissionsRequest(BaseModel):
    permissions: list[Permission]


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    invitation_status: Optional[InvitationStatus] = None


class InviteRequest(BaseModel):
    phone_number: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    permissions: list[Permission] = Field(default_factory=lambda: [Permission.READ_ONLY])
    sid: Optional[str] = None


class ResendRequest(BaseModel):
    sid: Optional[str] = None


class SendSmsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    phone_number: Optional[str] = Field(None, alias="phoneNumber")
    message: Optional[str] = None
    sid: Optional[str] = None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

def record_out(record) -> dict:
    return encode_record(record)


def user_out(user: User) -> dict:
    """User as exposed over HTTP: secrets stripped, plus whether a password change is due."""
    data = encode_record(user)
    for key in _PRIVATE_USER_FIELDS:
        data.pop(key, None)
    data["must_set_password"] = bool(user.temp_password)
    return data
