#!/usr/bin/env python3
"""
Create the SQL schema used by STORAGE_BACKEND=sql.

Usage:
  DATABASE_URL=postgresql+psycopg://... python scripts/create_tables.py
"""
from __future__ import annotations

from pathlib import Path
import sys

# Ensure the campshare package is importable when run directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sqlalchemy.exc import SQLAlchemyError  # noqa: E402

from campshare.db.session import init_schema  # noqa: E402


if __name__ == "__main__":
    try:
        init_schema()
        print("Database tables created successfully.")
    except SQLAlchemyError as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc
