from __future__ import annotations

import asyncio
import sys
from pathlib import Path

# Ensure the campshare package is importable during local test runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from campshare.core.sms import SendResult  # noqa: E402
from campshare.domain.models import InvitationStatus  # noqa: E402
from campshare.repositories.state_repository import StateRepository  # noqa: E402
from campshare.repositories.stores import MemoryStore  # noqa: E402
from campshare.services.app_context import AppContext  # noqa: E402
from campshare.services.verification_service import InvitationVerifier, fixed_code_strategy  # noqa: E402


class OkSender:
    def send(self, phone, message, account_sid=None):
        return SendResult(True)


def _invited_context():
    context = AppContext(StateRepository(MemoryStore()), OkSender())
    asyncio.run(context.invite_user_by_sms("555-300-4000", "Morgan"))
    return context


def test_fixed_code_strategy_accepts_invitation():
    context = _invited_context()
    verifier = InvitationVerifier(context, fixed_code_strategy("123456"))

    assert verifier.pending_invitation_for("5553004000") is not None
    assert verifier.verify("5553004000", "123456") is True

    user = context.find_user_by_phone("5553004000")
    assert user.invitation_status == InvitationStatus.ACCEPTED
    assert user.last_login is not None
    assert verifier.pending_invitation_for("5553004000") is None


def test_wrong_code_leaves_invitation_pending():
    context = _invited_context()
    verifier = InvitationVerifier(context, fixed_code_strategy("123456"))

    assert verifier.verify("5553004000", "000000") is False
    assert context.find_user_by_phone("5553004000").invitation_status == InvitationStatus.SENT


def test_custom_strategy_is_used():
    context = _invited_context()
    seen = []

    def strategy(user, code):
        seen.append((user.name, code))
        return code == "open-sesame"

    verifier = InvitationVerifier(context, strategy)

    assert verifier.verify("5553004000", "open-sesame") is True
    assert seen == [("Morgan", "open-sesame")]


def test_already_accepted_or_unknown_phone_fails():
    context = _invited_context()
    verifier = InvitationVerifier(context, fixed_code_strategy("123456"))

    assert verifier.verify("1234567890", "123456") is False
    assert verifier.verify("9999999999", "123456") is False
