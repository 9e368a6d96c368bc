"""Invitation acceptance by verification code.

How a code is checked is a pluggable strategy; the stock one compares against
a single configured code (INVITATION_CODE), which is what the demo flow uses.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from campshare.core.config import get_settings
from campshare.domain.models import InvitationStatus, User
from campshare.services.app_context import AppContext

logger = logging.getLogger(__name__)

VerificationStrategy = Callable[[User, str], bool]


def fixed_code_strategy(expected: str | None = None) -> VerificationStrategy:
    code = expected if expected is not None else get_settings().invitation_code

    def check(user: User, supplied: str) -> bool:
        return (supplied or "").strip() == code

    return check


class InvitationVerifier:
    def __init__(self, context: AppContext, strategy: VerificationStrategy | None = None) -> None:
        self.context = context
        self.strategy = strategy or fixed_code_strategy()

    def pending_invitation_for(self, phone_number: str) -> Optional[User]:
        user = self.context.find_user_by_phone(phone_number)
        if user and user.invitation_status != InvitationStatus.ACCEPTED:
            return user
        return None

    def verify(self, phone_number: str, code: str) -> bool:
        user = self.pending_invitation_for(phone_number)
        if not user:
            return False
        if not self.strategy(user, code):
            logger.info("Invalid invitation code for user %s", user.id)
            return False
        self.context.update_user_profile(user.id, invitation_status=InvitationStatus.ACCEPTED)
        return True
