#!/usr/bin/env python3
"""
Invite a user by SMS from the command line, using the configured store and Twilio credentials.

Usage:
  python scripts/invite_user.py --phone "(555) 123-4567" --name "Jane Doe" [--permission cleaning --permission calendar]
"""
from __future__ import annotations

import argparse
import asyncio
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from campshare.app import build_context  # noqa: E402
from campshare.core.log import configure_logging  # noqa: E402
from campshare.core.utils import normalize_phone  # noqa: E402
from campshare.domain.models import Permission  # noqa: E402


def main() -> None:
    ap = argparse.ArgumentParser(description="Invite a CampShare user by SMS")
    ap.add_argument("--phone", required=True, help="Phone number (any formatting)")
    ap.add_argument("--name", required=True, help="Display name for a new user")
    ap.add_argument(
        "--permission",
        action="append",
        choices=[p.value for p in Permission],
        help="Permission to grant (repeatable; default: read-only)",
    )
    args = ap.parse_args()

    phone = normalize_phone(args.phone)
    if not phone:
        raise SystemExit("Invalid phone number")
    name = (args.name or "").strip()
    if not name:
        raise SystemExit("Name is required")
    permissions = [Permission(p) for p in (args.permission or [Permission.READ_ONLY.value])]

    configure_logging()
    context = build_context()
    sent = asyncio.run(context.invite_user_by_sms(phone, name, permissions))
    user = context.find_user_by_phone(phone)
    print("OK: invitation recorded")
    print(f"  User id: {user.id if user else '?'}")
    print(f"  Phone: {phone}")
    print(f"  Permissions: {', '.join(p.value for p in permissions)}")
    print(f"  SMS delivered: {'yes' if sent else 'no (use resend later)'}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
