"""
Application context: the in-memory state of a CampShare instance.

Holds the events, maintenance tasks, cleaning tasks and users collections plus
the current session, and writes every mutation straight through to the
StateRepository. One instance is built at the application root and handed to
whoever needs it.

Failures are reported as return values (False/None) or silent no-ops, never
as exceptions: an update for an unknown id does nothing, a bad login returns
None, an SMS that could not be delivered returns False.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace
from datetime import datetime
import functools
import logging
import threading
from typing import Callable, Iterable, Optional

from campshare.core.config import Settings, get_settings
from campshare.core.security import PasswordScheme, get_password_scheme
from campshare.core.sms import send_invitation_with_temp_password
from campshare.core.utils import generate_temp_password, new_id, normalize_phone, utcnow
from campshare.domain.models import (
    CleaningStatus,
    CleaningTask,
    Event,
    InvitationStatus,
    MaintenanceTask,
    Permission,
    User,
)
from campshare.repositories import state_repository as buckets
from campshare.repositories.state_repository import StateRepository

logger = logging.getLogger(__name__)


def _synchronized(method):
    """Run a mutation under the context lock so memory and store change together."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)

    return wrapper


class AppContext:
    """CRUD, user management and phone/password authentication over the app state."""

    def __init__(
        self,
        repository: StateRepository,
        sms_sender=None,
        *,
        password_scheme: PasswordScheme | None = None,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = utcnow,
        temp_password_factory: Callable[[], str] = generate_temp_password,
    ) -> None:
        self.settings = settings or get_settings()
        self.repository = repository
        self.sms_sender = sms_sender
        self.passwords = password_scheme or get_password_scheme(self.settings.password_scheme)
        self._now = clock
        self._new_temp_password = temp_password_factory
        self._lock = threading.RLock()
        if repository.hash_password is None:
            repository.hash_password = self.passwords.hash

        self._events: list[Event] = repository.load_events()
        self._maintenance_tasks: list[MaintenanceTask] = repository.load_maintenance_tasks()
        self._cleaning_tasks: list[CleaningTask] = repository.load_cleaning_tasks()
        self._users: list[User] = repository.load_users()
        self._current_user: Optional[User] = repository.load_current_user()

    # -------------------------------------- helpers --------------------------------------
    @staticmethod
    def _find(records: Iterable, record_id: str):
        for record in records:
            if record.id == record_id:
                return record
        return None

    @staticmethod
    def _replaced(records: list, updated) -> tuple[list, bool]:
        found = False
        result = []
        for record in records:
            if record.id == updated.id:
                result.append(updated)
                found = True
            else:
                result.append(record)
        return result, found

    def _save_events(self) -> None:
        self.repository.save(buckets.EVENTS, self._events)

    def _save_maintenance(self) -> None:
        self.repository.save(buckets.MAINTENANCE, self._maintenance_tasks)

    def _save_cleaning(self) -> None:
        self.repository.save(buckets.CLEANING, self._cleaning_tasks)

    def _save_users(self) -> None:
        self.repository.save(buckets.USERS, self._users)

    def _put_user(self, updated: User) -> None:
        self._users, _ = self._replaced(self._users, updated)
        self._save_users()

    # -------------------------------------- events --------------------------------------
    @property
    def events(self) -> list[Event]:
        return list(self._events)

    def get_event(self, event_id: str) -> Optional[Event]:
        return self._find(self._events, event_id)

    @_synchronized
    def add_event(self, event: Event) -> Event:
        created = replace(event, id=new_id())
        self._events = [*self._events, created]
        self._save_events()
        return created

    @_synchronized
    def update_event(self, event: Event) -> None:
        self._events, found = self._replaced(self._events, event)
        if found:
            self._save_events()

    @_synchronized
    def delete_event(self, event_id: str) -> None:
        remaining = [e for e in self._events if e.id != event_id]
        if len(remaining) != len(self._events):
            self._events = remaining
            self._save_events()

    # -------------------------------------- maintenance --------------------------------------
    @property
    def maintenance_tasks(self) -> list[MaintenanceTask]:
        return list(self._maintenance_tasks)

    def get_maintenance_task(self, task_id: str) -> Optional[MaintenanceTask]:
        return self._find(self._maintenance_tasks, task_id)

    @_synchronized
    def add_maintenance_task(self, task: MaintenanceTask) -> MaintenanceTask:
        created = replace(task, id=new_id(), created_at=self._now())
        self._maintenance_tasks = [*self._maintenance_tasks, created]
        self._save_maintenance()
        return created

    @_synchronized
    def update_maintenance_task(self, task: MaintenanceTask) -> None:
        self._maintenance_tasks, found = self._replaced(self._maintenance_tasks, task)
        if found:
            self._save_maintenance()

    @_synchronized
    def delete_maintenance_task(self, task_id: str) -> None:
        remaining = [t for t in self._maintenance_tasks if t.id != task_id]
        if len(remaining) != len(self._maintenance_tasks):
            self._maintenance_tasks = remaining
            self._save_maintenance()

    # -------------------------------------- cleaning --------------------------------------
    @property
    def cleaning_tasks(self) -> list[CleaningTask]:
        return list(self._cleaning_tasks)

    def get_cleaning_task(self, task_id: str) -> Optional[CleaningTask]:
        return self._find(self._cleaning_tasks, task_id)

    @_synchronized
    def add_cleaning_task(self, task: CleaningTask) -> CleaningTask:
        created = replace(task, id=new_id())
        self._cleaning_tasks = [*self._cleaning_tasks, created]
        self._save_cleaning()
        return created

    @_synchronized
    def update_cleaning_task(self, task: CleaningTask) -> None:
        self._cleaning_tasks, found = self._replaced(self._cleaning_tasks, task)
        if found:
            self._save_cleaning()

    @_synchronized
    def delete_cleaning_task(self, task_id: str) -> None:
        remaining = [t for t in self._cleaning_tasks if t.id != task_id]
        if len(remaining) != len(self._cleaning_tasks):
            self._cleaning_tasks = remaining
            self._save_cleaning()

    @_synchronized
    def toggle_clean_status(self, task_id: str) -> None:
        """Flip clean/unclean; only becoming clean stamps last_cleaned."""
        task = self.get_cleaning_task(task_id)
        if not task:
            return
        if task.status == CleaningStatus.CLEAN:
            toggled = replace(task, status=CleaningStatus.UNCLEAN)
        else:
            toggled = replace(task, status=CleaningStatus.CLEAN, last_cleaned=self._now())
        self.update_cleaning_task(toggled)

    @_synchronized
    def assign_cleaning_task(self, task_id: str, user_id: str) -> None:
        task = self.get_cleaning_task(task_id)
        if not task:
            return
        self._cleaning_tasks, _ = self._replaced(self._cleaning_tasks, replace(task, assigned_to=user_id))
        self._save_cleaning()

    # -------------------------------------- users --------------------------------------
    @property
    def users(self) -> list[User]:
        return list(self._users)

    def get_user(self, user_id: str) -> Optional[User]:
        return self._find(self._users, user_id)

    def find_user_by_phone(self, phone: str) -> Optional[User]:
        """First user whose stored number equals the normalized input."""
        digits = normalize_phone(phone)
        if not digits:
            return None
        for user in self._users:
            if user.phone_number == digits:
                return user
        return None

    @_synchronized
    def add_user(self, user: User) -> User:
        phone = normalize_phone(user.phone_number) or None
        created = replace(
            user,
            id=new_id(),
            phone_number=phone,
            permissions=list(user.permissions or [Permission.READ_ONLY]),
            invitation_status=user.invitation_status or InvitationStatus.PENDING,
            profile_completed=bool(phone),
            password=self.passwords.hash(user.password) if user.password else None,
        )
        self._users = [*self._users, created]
        self._save_users()
        return created

    @_synchronized
    def update_user_permissions(self, user_id: str, permissions: list[Permission]) -> None:
        user = self.get_user(user_id)
        if not user:
            return
        self._put_user(replace(user, permissions=list(permissions)))

    @_synchronized
    def update_user_profile(self, user_id: str, **changes) -> None:
        """
        Merge the supplied fields into the user.

        Invitation status can only move to "accepted" through here (which also
        stamps last_login); a supplied phone number marks the profile complete.
        """
        user = self.get_user(user_id)
        if not user:
            return
        changes.pop("id", None)
        accepting = changes.get("invitation_status") == InvitationStatus.ACCEPTED
        if changes.get("phone_number"):
            changes["phone_number"] = normalize_phone(changes["phone_number"])
        for secret in ("password", "temp_password"):
            if changes.get(secret):
                changes[secret] = self.passwords.hash(changes[secret])
        merged = replace(user, **changes)
        merged.invitation_status = InvitationStatus.ACCEPTED if accepting else user.invitation_status
        merged.profile_completed = True if changes.get("phone_number") else user.profile_completed
        merged.last_login = self._now() if accepting else user.last_login
        self._put_user(merged)

    # -------------------------------------- invitations --------------------------------------
    async def _send_invitation(self, phone: str, temp_password: str, account_sid: str | None) -> bool:
        if self.sms_sender is None:
            logger.warning("No SMS sender configured; invitation to %s not delivered", phone)
            return False
        try:
            result = await asyncio.to_thread(
                send_invitation_with_temp_password,
                self.sms_sender,
                phone,
                temp_password,
                account_sid,
                self.settings.product_name,
            )
        except Exception:
            logger.exception("Error sending invitation SMS to %s", phone)
            return False
        if not result.success:
            logger.warning("Invitation SMS to %s failed: %s", phone, result.error)
        return result.success

    async def invite_user_by_sms(
        self,
        phone_number: str,
        name: str,
        permissions: list[Permission] | None = None,
        account_sid: str | None = None,
    ) -> bool:
        """
        Create or refresh an invitation for phone_number and text the user a
        temporary password.

        The user record is saved before the SMS goes out and stays saved when
        delivery fails, so the invitation can be resent later. A number with no
        digits records nothing and returns False.
        """
        phone = normalize_phone(phone_number)
        if not phone:
            logger.error("Cannot invite %s: phone number %r has no digits", name, phone_number)
            return False
        temp_password = self._new_temp_password()
        self._record_invitation(phone, name, list(permissions or [Permission.READ_ONLY]), temp_password)
        success = await self._send_invitation(phone, temp_password, account_sid)
        logger.info("SMS invitation %s for %s", "sent" if success else "not sent", name)
        return success

    @_synchronized
    def _record_invitation(self, phone: str, name: str, granted: list[Permission], temp_password: str) -> None:
        now = self._now()
        existing = self.find_user_by_phone(phone)
        if existing:
            self._put_user(
                replace(
                    existing,
                    invitation_status=InvitationStatus.SENT,
                    invitation_sent_at=now,
                    permissions=granted,
                    temp_password=self.passwords.hash(temp_password),
                    password=None,
                )
            )
            logger.info("Re-inviting existing user %s", existing.id)
            return
        created = User(
            id=new_id(),
            name=name,
            phone_number=phone,
            permissions=granted,
            invitation_status=InvitationStatus.SENT,
            invitation_sent_at=now,
            profile_completed=False,
            temp_password=self.passwords.hash(temp_password),
        )
        self._users = [*self._users, created]
        self._save_users()
        logger.info("Invited new user %s", created.id)

    async def resend_invitation(self, user_id: str, account_sid: str | None = None) -> bool:
        temp_password = self._new_temp_password()
        phone = self._refresh_invitation(user_id, temp_password)
        if not phone:
            logger.error("Cannot resend invitation: user %s not found or has no phone number", user_id)
            return False
        return await self._send_invitation(phone, temp_password, account_sid)

    @_synchronized
    def _refresh_invitation(self, user_id: str, temp_password: str) -> Optional[str]:
        user = self.get_user(user_id)
        if not user or not user.phone_number:
            return None
        self._put_user(
            replace(
                user,
                invitation_status=InvitationStatus.SENT,
                invitation_sent_at=self._now(),
                temp_password=self.passwords.hash(temp_password),
            )
        )
        return user.phone_number

    # -------------------------------------- authentication --------------------------------------
    @_synchronized
    def login_with_phone_and_password(self, phone_number: str, password: str) -> Optional[User]:
        """
        Authenticate by phone number and password.

        A matching temporary password wins and leaves the record untouched (the
        caller should force the set-password flow next); a matching permanent
        password stamps last_login. Unknown phone and wrong password both
        return None.
        """
        user = self.find_user_by_phone(phone_number)
        if not user:
            logger.info("Login failed: no user with phone %s", normalize_phone(phone_number))
            return None

        if user.temp_password and self.passwords.verify(password, user.temp_password):
            self.set_current_user(user)
            logger.info("User %s logged in with temporary password", user.id)
            return user

        if user.password and self.passwords.verify(password, user.password):
            updated = replace(user, last_login=self._now())
            self._put_user(updated)
            self.set_current_user(updated)
            logger.info("User %s logged in", user.id)
            return updated

        logger.info("Login failed: password mismatch for user %s", user.id)
        return None

    @_synchronized
    def reset_password(self, user_id: str, old_password: str, new_password: str) -> bool:
        """Set a permanent password if old_password matches the temporary or current one."""
        user = self.get_user(user_id)
        if not user:
            return False
        matches_temp = bool(user.temp_password) and self.passwords.verify(old_password, user.temp_password)
        matches_current = bool(user.password) and self.passwords.verify(old_password, user.password)
        if not (matches_temp or matches_current):
            return False

        changes = dict(
            password=self.passwords.hash(new_password),
            temp_password=None,
            invitation_status=InvitationStatus.ACCEPTED,
            password_set_at=self._now(),
            profile_completed=True,
        )
        self._put_user(replace(user, **changes))
        if self._current_user and self._current_user.id == user_id:
            self.set_current_user(replace(self._current_user, **changes))
        logger.info("Password set for user %s", user_id)
        return True

    # -------------------------------------- session --------------------------------------
    def get_current_user(self) -> Optional[User]:
        return self._current_user

    @_synchronized
    def set_current_user(self, user: Optional[User]) -> None:
        self._current_user = user
        self.repository.save(buckets.CURRENT_USER, user)

    @_synchronized
    def logout(self) -> None:
        self.set_current_user(None)
