from __future__ import annotations

from datetime import date, datetime
import sys
from pathlib import Path

# Ensure the campshare package is importable during local test runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from campshare.domain.models import (  # noqa: E402
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
from campshare.domain.queries import (  # noqa: E402
    active_users,
    assignee_name,
    category_label,
    event_color,
    events_on_day,
    filter_cleaning_tasks,
    filter_maintenance_tasks,
    pending_users,
)


def test_events_on_day_includes_multi_day_span():
    single = Event(id="a", title="Dentist", date=datetime(2024, 7, 2, 14, 0), created_by="u")
    span = Event(id="b", title="Retreat", date=datetime(2024, 7, 1), end_date=datetime(2024, 7, 3), created_by="u")
    other = Event(id="c", title="Later", date=datetime(2024, 7, 9), created_by="u")
    events = [single, span, other]

    assert events_on_day(events, date(2024, 7, 2)) == [single, span]
    assert events_on_day(events, date(2024, 7, 3)) == [span]
    assert events_on_day(events, datetime(2024, 7, 4, 12)) == []


def test_event_color_and_label():
    camp = Event(title="Camp", date=datetime(2024, 7, 1), created_by="u", category=EventCategory.CAMP)
    custom = Event(title="Custom", date=datetime(2024, 7, 1), created_by="u", color="#123456")
    plain = Event(title="Plain", date=datetime(2024, 7, 1), created_by="u")

    assert event_color(camp) == "#10B981"
    assert event_color(custom) == "#123456"
    assert event_color(plain) == "#6B7280"
    assert category_label(EventCategory.DAY_OFF) == "Day Off"
    assert category_label(None) == "Other"


def test_maintenance_sorted_by_priority_then_status():
    tasks = [
        MaintenanceTask(id="1", title="low", priority=Priority.LOW),
        MaintenanceTask(id="2", title="high done", priority=Priority.HIGH, status=MaintenanceStatus.COMPLETED),
        MaintenanceTask(id="3", title="high new", priority=Priority.HIGH),
        MaintenanceTask(id="4", title="medium", priority=Priority.MEDIUM, status=MaintenanceStatus.IN_PROGRESS),
    ]

    assert [t.id for t in filter_maintenance_tasks(tasks)] == ["3", "2", "4", "1"]
    assert [t.id for t in filter_maintenance_tasks(tasks, MaintenanceStatus.COMPLETED)] == ["2"]


def test_filter_cleaning_tasks():
    tasks = [CleaningTask(id="1", area="A", status=CleaningStatus.CLEAN), CleaningTask(id="2", area="B")]
    assert [t.id for t in filter_cleaning_tasks(tasks, CleaningStatus.UNCLEAN)] == ["2"]
    assert len(filter_cleaning_tasks(tasks)) == 2


def test_user_groups_and_assignee_name():
    users = [
        User(id="1", name="Pending", invitation_status=InvitationStatus.PENDING),
        User(id="2", name="Sent", invitation_status=InvitationStatus.SENT),
        User(id="3", name="Accepted", invitation_status=InvitationStatus.ACCEPTED),
        User(id="4", name="Legacy"),
        User(id="5", name="Expired", invitation_status=InvitationStatus.EXPIRED),
    ]

    assert [u.id for u in pending_users(users)] == ["1", "2"]
    assert [u.id for u in active_users(users)] == ["3", "4"]
    assert assignee_name(users, "3") == "Accepted"
    assert assignee_name(users, "deleted-user") == "Unknown"
