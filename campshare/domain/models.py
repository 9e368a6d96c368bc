"""Records managed by the application context."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class EventCategory(str, Enum):
    RETREAT = "retreat"
    CAMP = "camp"
    APPOINTMENT = "appointment"
    DAY_OFF = "day-off"
    SPECIAL_EVENT = "special-event"
    OTHER = "other"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class MaintenanceStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class CleaningStatus(str, Enum):
    CLEAN = "clean"
    UNCLEAN = "unclean"


class Permission(str, Enum):
    ADMIN = "admin"
    MAINTENANCE = "maintenance"
    CLEANING = "cleaning"
    CALENDAR = "calendar"
    READ_ONLY = "read-only"


class InvitationStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"
    ACCEPTED = "accepted"
    # reserved, nothing expires invitations yet
    EXPIRED = "expired"


@dataclass
class Event:
    title: str
    date: datetime
    created_by: str
    id: str = ""
    end_date: Optional[datetime] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    description: Optional[str] = None
    category: Optional[EventCategory] = None
    color: Optional[str] = None


@dataclass
class MaintenanceTask:
    title: str
    priority: Priority = Priority.MEDIUM
    status: MaintenanceStatus = MaintenanceStatus.PENDING
    id: str = ""
    description: Optional[str] = None
    assigned_to: Optional[str] = None
    created_at: Optional[datetime] = None
    due_date: Optional[datetime] = None


@dataclass
class CleaningTask:
    area: str
    status: CleaningStatus = CleaningStatus.UNCLEAN
    id: str = ""
    description: Optional[str] = None
    assigned_to: Optional[str] = None
    last_cleaned: Optional[datetime] = None


@dataclass
class User:
    name: str
    permissions: list[Permission] = field(default_factory=list)
    id: str = ""
    phone_number: Optional[str] = None
    email: Optional[str] = None
    invitation_status: Optional[InvitationStatus] = None
    invitation_sent_at: Optional[datetime] = None
    last_login: Optional[datetime] = None
    profile_completed: bool = False
    temp_password: Optional[str] = None
    password: Optional[str] = None
    password_set_at: Optional[datetime] = None
