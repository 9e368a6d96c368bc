"""
Read-side helpers over the in-memory collections: calendar day lookups,
task filtering/ordering and user grouping.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional

from .models import (
    CleaningStatus,
    CleaningTask,
    Event,
    EventCategory,
    InvitationStatus,
    MaintenanceStatus,
    MaintenanceTask,
    Priority,
    User,
)

DEFAULT_COLOR = "#6B7280"

CATEGORY_COLORS = {
    EventCategory.RETREAT: "#8B5CF6",
    EventCategory.CAMP: "#10B981",
    EventCategory.APPOINTMENT: "#3B82F6",
    EventCategory.DAY_OFF: "#EC4899",
    EventCategory.SPECIAL_EVENT: "#F59E0B",
    EventCategory.OTHER: DEFAULT_COLOR,
}

CATEGORY_LABELS = {
    EventCategory.RETREAT: "Retreat",
    EventCategory.CAMP: "Camp",
    EventCategory.APPOINTMENT: "Appointment",
    EventCategory.DAY_OFF: "Day Off",
    EventCategory.SPECIAL_EVENT: "Special Event",
    EventCategory.OTHER: "Other",
}

_PRIORITY_ORDER = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}
_STATUS_ORDER = {MaintenanceStatus.PENDING: 0, MaintenanceStatus.IN_PROGRESS: 1, MaintenanceStatus.COMPLETED: 2}


def category_label(category: Optional[EventCategory]) -> str:
    return CATEGORY_LABELS.get(category, "Other")


def event_color(event: Event) -> str:
    if event.color:
        return event.color
    return CATEGORY_COLORS.get(event.category, DEFAULT_COLOR)


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def occurs_on(event: Event, day: date | datetime) -> bool:
    """Multi-day events cover every day from start to end inclusive."""
    target = _as_date(day)
    start = _as_date(event.date)
    if event.end_date:
        return start <= target <= _as_date(event.end_date)
    return start == target


def events_on_day(events: Iterable[Event], day: date | datetime) -> list[Event]:
    return [event for event in events if occurs_on(event, day)]


def filter_maintenance_tasks(
    tasks: Iterable[MaintenanceTask], status: Optional[MaintenanceStatus] = None
) -> list[MaintenanceTask]:
    """Tasks with the given status (all when None), high priority first, then by progress."""
    selected = [task for task in tasks if status is None or task.status == status]
    return sorted(selected, key=lambda t: (_PRIORITY_ORDER.get(t.priority, 3), _STATUS_ORDER.get(t.status, 3)))


def filter_cleaning_tasks(tasks: Iterable[CleaningTask], status: Optional[CleaningStatus] = None) -> list[CleaningTask]:
    return [task for task in tasks if status is None or task.status == status]


def pending_users(users: Iterable[User]) -> list[User]:
    return [u for u in users if u.invitation_status in (InvitationStatus.PENDING, InvitationStatus.SENT)]


def active_users(users: Iterable[User]) -> list[User]:
    return [u for u in users if u.invitation_status in (InvitationStatus.ACCEPTED, None)]


def assignee_name(users: Iterable[User], user_id: Optional[str]) -> str:
    for user in users:
        if user.id == user_id:
            return user.name
    return "Unknown"
