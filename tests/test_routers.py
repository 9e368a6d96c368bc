"""
HTTP surface exercised through FastAPI's TestClient against an in-memory context.
"""
from __future__ import annotations

from dataclasses import replace
import re
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure the campshare package is importable during local test runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from campshare.app import create_app  # noqa: E402
from campshare.core.config import get_settings  # noqa: E402
from campshare.core.sms import SendResult  # noqa: E402
from campshare.repositories.state_repository import StateRepository  # noqa: E402
from campshare.repositories.stores import MemoryStore  # noqa: E402
from campshare.services.app_context import AppContext  # noqa: E402


class FakeSender:
    def __init__(self, success=True):
        self.success = success
        self.sent = []

    def send(self, phone, message, account_sid=None):
        self.sent.append((phone, message, account_sid))
        return SendResult(self.success, None if self.success else "provider down")


def _login(client, phone="1234567890", password="admin123"):
    return client.post("/auth/login", json={"phone_number": phone, "password": password})


def _client(sender=None, signed_in=True, **overrides):
    """App over a fresh in-memory context; signed in as the seeded admin unless told otherwise."""
    sender = sender or FakeSender()
    settings = replace(get_settings(), storage_backend="memory", app_env="dev", **overrides)
    context = AppContext(StateRepository(MemoryStore()), sender, settings=settings)
    test_client = TestClient(create_app(context, settings=settings, sms_sender=sender))
    if signed_in:
        assert _login(test_client).status_code == 200
    return test_client, context, sender


@pytest.fixture()
def client():
    test_client, _, _ = _client()
    return test_client


@pytest.fixture()
def anonymous():
    test_client, _, _ = _client(signed_in=False)
    return test_client


def test_login_and_me(anonymous):
    client = anonymous
    assert client.get("/auth/me").status_code == 401

    bad = _login(client, password="nope")
    assert bad.status_code == 401
    assert bad.json()["detail"] == "Invalid phone number or password"

    ok = _login(client, phone="(123) 456-7890")
    assert ok.status_code == 200
    user = ok.json()["user"]
    assert user["id"] == "admin-user-id"
    assert "password" not in user
    assert user["must_set_password"] is False

    assert client.get("/auth/me").json()["user"]["name"] == "Admin User"
    client.post("/auth/logout")
    assert client.get("/auth/me").status_code == 401


def test_login_rate_limit():
    client, _, _ = _client(signed_in=False, login_rate_limit=2)
    assert _login(client, password="x").status_code == 401
    assert _login(client, password="x").status_code == 401
    blocked = _login(client)
    assert blocked.status_code == 429


@pytest.mark.parametrize(
    "body,detail",
    [
        ({"current_password": "admin123", "new_password": "Abcdefg1", "confirm_password": "Abcdefg2"},
         "New passwords do not match"),
        ({"current_password": "admin123", "new_password": "short", "confirm_password": "short"},
         "Password must be at least 8 characters long"),
        ({"current_password": "wrong", "new_password": "Abcdefg1", "confirm_password": "Abcdefg1"},
         "Current password is incorrect"),
    ],
)
def test_reset_password_rejections(client, body, detail):
    _login(client)
    response = client.post("/auth/reset-password", json=body)
    assert response.status_code == 400
    assert response.json()["detail"] == detail


def test_reset_password_requires_session(anonymous):
    client = anonymous
    body = {"current_password": "admin123", "new_password": "Abcdefg1", "confirm_password": "Abcdefg1"}
    assert client.post("/auth/reset-password", json=body).status_code == 401


def test_reset_password_then_login_with_new_password(client):
    _login(client)
    body = {"current_password": "admin123", "new_password": "Abcdefg1", "confirm_password": "Abcdefg1"}
    response = client.post("/auth/reset-password", json=body)
    assert response.status_code == 200
    assert response.json()["user"]["invitation_status"] == "accepted"

    assert _login(client).status_code == 401
    assert _login(client, password="Abcdefg1").status_code == 200


def test_event_crud(client):
    payload = {
        "title": "Summer camp",
        "date": "2024-07-01T00:00:00",
        "end_date": "2024-07-05T00:00:00",
        "created_by": "admin-user-id",
        "category": "camp",
    }
    created = client.post("/events", json=payload)
    assert created.status_code == 201
    event = created.json()
    assert event["id"]
    assert event["display_color"] == "#10B981"
    assert event["category_label"] == "Camp"

    on_day = client.get("/events", params={"day": "2024-07-03"}).json()
    assert [e["id"] for e in on_day] == [event["id"]]
    assert client.get("/events", params={"day": "2024-07-06"}).json() == []

    updated = client.put(f"/events/{event['id']}", json={**payload, "title": "Renamed"})
    assert updated.json()["title"] == "Renamed"
    assert client.put("/events/missing", json=payload).status_code == 404

    assert client.delete(f"/events/{event['id']}").status_code == 204
    assert client.delete(f"/events/{event['id']}").status_code == 204
    assert client.get("/events").json() == []


def test_event_end_before_start_rejected(client):
    payload = {
        "title": "Backwards",
        "date": "2024-07-05T00:00:00",
        "end_date": "2024-07-01T00:00:00",
        "created_by": "u",
    }
    assert client.post("/events", json=payload).status_code == 422


def test_maintenance_listing_sorted_and_filtered(client):
    client.post("/maintenance", json={"title": "Paint shed", "priority": "low"})
    client.post("/maintenance", json={"title": "Fix roof", "priority": "high"})
    client.post("/maintenance", json={"title": "Mow", "status": "completed"})

    titles = [t["title"] for t in client.get("/maintenance").json()]
    assert titles == ["Fix roof", "Mow", "Paint shed"]
    completed = client.get("/maintenance", params={"status": "completed"}).json()
    assert [t["title"] for t in completed] == ["Mow"]


def test_maintenance_update_keeps_created_at(client):
    created = client.post("/maintenance", json={"title": "Fix roof"}).json()
    updated = client.put(f"/maintenance/{created['id']}", json={"title": "Fix roof", "status": "in-progress"}).json()
    assert updated["status"] == "in-progress"
    assert updated["created_at"] == created["created_at"]


def test_cleaning_toggle_and_assign(client):
    task = client.post("/cleaning", json={"area": "Dining hall"}).json()
    assert task["status"] == "unclean"

    toggled = client.post(f"/cleaning/{task['id']}/toggle").json()
    assert toggled["status"] == "clean"
    assert toggled["last_cleaned"]

    assigned = client.post(f"/cleaning/{task['id']}/assign", json={"user_id": "regular-user-id"}).json()
    assert assigned["assigned_to"] == "regular-user-id"
    assert assigned["assignee_name"] == "Regular User"

    assert client.post("/cleaning/missing/toggle").status_code == 404


def test_users_group_filter_and_invite():
    client, _, sender = _client()
    response = client.post("/users/invite", json={"phone_number": "555-111-2222", "name": "Casey"})
    assert response.status_code == 200
    body = response.json()
    assert body["sent"] is True
    assert body["user"]["invitation_status"] == "sent"
    assert body["user"]["permissions"] == ["read-only"]
    assert body["user"]["must_set_password"] is True
    assert len(sender.sent) == 1

    pending = client.get("/users", params={"group": "pending"}).json()
    assert [u["name"] for u in pending] == ["Casey"]
    active = client.get("/users", params={"group": "active"}).json()
    assert {u["id"] for u in active} == {"admin-user-id", "regular-user-id"}
    assert client.get("/users", params={"group": "everyone"}).status_code == 400

    resent = client.post(f"/users/{body['user']['id']}/resend-invitation")
    assert resent.json()["sent"] is True
    assert len(sender.sent) == 2


def test_user_permissions_and_profile(client):
    created = client.post("/users", json={"name": "Robin", "phone_number": "555 444 3333"})
    assert created.status_code == 201
    user_id = created.json()["id"]

    perms = client.put(f"/users/{user_id}/permissions", json={"permissions": ["cleaning", "calendar"]})
    assert perms.json()["permissions"] == ["cleaning", "calendar"]

    profile = client.patch(f"/users/{user_id}", json={"email": "robin@example.com"})
    assert profile.json()["email"] == "robin@example.com"
    assert profile.json()["phone_number"] == "5554443333"

    assert client.patch("/users/missing", json={"email": "x@example.com"}).status_code == 404


def test_verify_invitation():
    client, _, _ = _client(invitation_code="654321")
    client.post("/users/invite", json={"phone_number": "5551112222", "name": "Casey"})

    assert client.post("/auth/verify-invitation", json={"phone_number": "5551112222", "code": "000000"}).status_code == 400
    ok = client.post("/auth/verify-invitation", json={"phone_number": "5551112222", "code": "654321"})
    assert ok.status_code == 200


def test_send_sms_endpoint():
    client, _, sender = _client()
    missing = client.post("/api/send-sms", json={"phoneNumber": "5551112222"})
    assert missing.status_code == 400
    assert missing.json() == {"success": False, "error": "Phone number and message are required"}

    ok = client.post("/api/send-sms", json={"phoneNumber": "5551112222", "message": "hi", "sid": "AC1"})
    assert ok.json() == {"success": True}
    assert sender.sent[-1] == ("5551112222", "hi", "AC1")

    failing, _, _ = _client(sender=FakeSender(success=False))
    response = failing.post("/api/send-sms", json={"phoneNumber": "5551112222", "message": "hi"})
    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "provider down"}


@pytest.mark.parametrize(
    "method,path,body",
    [
        ("get", "/events", None),
        ("get", "/maintenance", None),
        ("post", "/cleaning", {"area": "Lodge"}),
        ("put", "/users/regular-user-id/permissions", {"permissions": ["admin"]}),
        ("post", "/users/invite", {"phone_number": "5551112222", "name": "Casey", "permissions": ["admin"]}),
        ("post", "/api/send-sms", {"phoneNumber": "5551112222", "message": "hi"}),
    ],
)
def test_data_routes_require_session(method, path, body):
    client, context, sender = _client(signed_in=False)
    kwargs = {"json": body} if body is not None else {}

    response = getattr(client, method)(path, **kwargs)

    assert response.status_code == 401
    assert context.get_user("regular-user-id").permissions == ["read-only"]
    assert sender.sent == []


def test_temporary_password_session_must_reset_first():
    client, _, sender = _client()
    client.post("/users/invite", json={"phone_number": "5551112222", "name": "Casey"})
    temp_password = re.search(r"temporary password is: (\d+)", sender.sent[-1][1]).group(1)
    client.post("/auth/logout")

    login = _login(client, phone="5551112222", password=temp_password)
    assert login.json()["user"]["must_set_password"] is True
    assert client.get("/events").status_code == 403
    assert client.get("/users").status_code == 403
    assert client.get("/auth/me").status_code == 200

    body = {"current_password": temp_password, "new_password": "Abcdefg1", "confirm_password": "Abcdefg1"}
    assert client.post("/auth/reset-password", json=body).status_code == 200
    assert client.get("/events").status_code == 200


def test_invite_rejects_phone_without_digits():
    client, context, sender = _client()
    before = len(context.users)

    response = client.post("/users/invite", json={"phone_number": "abc", "name": "Nobody"})

    assert response.status_code == 400
    assert len(context.users) == before
    assert sender.sent == []
