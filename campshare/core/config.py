"""
Configuration helpers for the CampShare backend.

Routers/services should read settings through get_settings() instead of
touching os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

DEFAULT_DATA_FILE = Path(__file__).resolve().parents[1] / "data.json"


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    log_level: str
    storage_backend: str
    data_file: str
    database_url: str
    twilio_account_sid: str
    twilio_auth_token: str
    twilio_phone_number: str
    twilio_api_base: str
    sms_country_code: str
    sms_timeout_seconds: int
    product_name: str
    password_scheme: str
    invitation_code: str
    login_rate_limit: int
    login_rate_window_seconds: int

    @property
    def sms_configured(self) -> bool:
        return bool(self.twilio_account_sid and self.twilio_auth_token and self.twilio_phone_number)


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        storage_backend=(os.getenv("STORAGE_BACKEND") or "json").strip().lower(),
        data_file=os.getenv("DATA_FILE", str(DEFAULT_DATA_FILE)),
        database_url=os.getenv("DATABASE_URL", ""),
        twilio_account_sid=os.getenv("TWILIO_ACCOUNT_SID", ""),
        twilio_auth_token=os.getenv("TWILIO_AUTH_TOKEN", ""),
        twilio_phone_number=os.getenv("TWILIO_PHONE_NUMBER", ""),
        twilio_api_base=os.getenv("TWILIO_API_BASE", "https://api.twilio.com/2010-04-01").rstrip("/"),
        sms_country_code=os.getenv("SMS_COUNTRY_CODE", "+1"),
        sms_timeout_seconds=_int(os.getenv("SMS_TIMEOUT_SECONDS", "10"), 10),
        product_name=os.getenv("PRODUCT_NAME", "HOTBC Management"),
        password_scheme=(os.getenv("PASSWORD_SCHEME") or "plaintext").strip().lower(),
        invitation_code=os.getenv("INVITATION_CODE", "123456"),
        login_rate_limit=_int(os.getenv("LOGIN_RATE_LIMIT", "10"), 10),
        login_rate_window_seconds=_int(os.getenv("LOGIN_RATE_WINDOW_SECONDS", "60"), 60),
    )
