"""
SMS adapter for the CampShare backend.

The default implementation talks to the Twilio REST API, reading credentials
from Settings. Failures never raise: callers get a SendResult with the error
detail so a missing/broken provider only fails the one send.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Optional

import requests

from .config import Settings, get_settings
from .utils import normalize_phone

logger = logging.getLogger(__name__)

INVITATION_TEMPLATE = (
    "Welcome to {product}! Your temporary password is: {temp_password}. "
    "Please log in and change your password as soon as possible."
)


@dataclass
class SendResult:
    success: bool
    error: Optional[str] = None
    message_sid: Optional[str] = None


def format_phone(phone: str, country_code: str = "+1") -> str:
    """
    E.164 form for the provider. Numbers written with a leading "+" keep their
    own prefix; stored digit-only numbers that already start with the country
    code (e.g. 15552223333) only gain the "+"; anything else gets country_code.
    """
    raw = (phone or "").strip()
    digits = normalize_phone(raw)
    if raw.startswith("+"):
        return f"+{digits}"
    prefix = normalize_phone(country_code)
    if prefix and len(digits) > 10 and digits.startswith(prefix):
        return f"+{digits}"
    return f"+{prefix}{digits}"


def invitation_message(temp_password: str, product_name: str | None = None) -> str:
    product = product_name or get_settings().product_name
    return INVITATION_TEMPLATE.format(product=product, temp_password=temp_password)


class TwilioSmsSender:
    """Sends text messages through Twilio's Messages endpoint."""

    def __init__(self, settings: Settings | None = None, session: requests.Session | None = None) -> None:
        self.settings = settings or get_settings()
        self.http = session or requests.Session()

    def send(self, phone: str, message: str, account_sid: str | None = None) -> SendResult:
        settings = self.settings
        sid = account_sid or settings.twilio_account_sid
        if not (sid and settings.twilio_auth_token and settings.twilio_phone_number):
            logger.warning("[sms] Twilio credentials missing; not sending")
            return SendResult(False, "Twilio credentials not properly configured")
        if not phone or not message:
            return SendResult(False, "Phone number and message are required")
        to = format_phone(phone, settings.sms_country_code)
        url = f"{settings.twilio_api_base}/Accounts/{sid}/Messages.json"
        try:
            response = self.http.post(
                url,
                data={"To": to, "From": settings.twilio_phone_number, "Body": message},
                auth=(sid, settings.twilio_auth_token),
                timeout=settings.sms_timeout_seconds,
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            detail = _error_detail(exc.response) or str(exc)
            logger.error("[sms] Twilio rejected message to %s: %s", to, detail)
            return SendResult(False, detail)
        except requests.RequestException as exc:
            logger.error("[sms] Failed to send to %s: %s", to, exc)
            return SendResult(False, str(exc))
        message_sid = None
        try:
            message_sid = response.json().get("sid")
        except ValueError:
            pass
        logger.info("[sms] Message sent to %s (sid=%s)", to, message_sid)
        return SendResult(True, message_sid=message_sid)


def _error_detail(response: requests.Response | None) -> str | None:
    if response is None:
        return None
    try:
        payload = response.json()
    except ValueError:
        return response.text or None
    return payload.get("message") or payload.get("error") or None


def send_invitation_with_temp_password(
    sender, phone: str, temp_password: str, account_sid: str | None = None, product_name: str | None = None
) -> SendResult:
    return sender.send(phone, invitation_message(temp_password, product_name), account_sid=account_sid)
