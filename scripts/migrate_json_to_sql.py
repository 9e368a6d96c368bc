"""One-off migration script: JSON bucket file (data.json) -> SQL buckets table."""
from __future__ import annotations

import argparse
from pathlib import Path
import sys

# Ensure the campshare package is importable when run directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from campshare.core.config import get_settings  # noqa: E402
from campshare.db.session import init_schema  # noqa: E402
from campshare.repositories.sql_store import SQLStore  # noqa: E402
from campshare.repositories.state_repository import BUCKETS  # noqa: E402
from campshare.repositories.stores import JsonFileStore  # noqa: E402


def migrate(data_file: Path, target: SQLStore | None = None) -> list[str]:
    """Copy every known bucket present in data_file; returns the names copied."""
    if not data_file.exists():
        raise SystemExit(f"File not found: {data_file}")
    source = JsonFileStore(data_file)
    target = target or SQLStore()
    copied = []
    for bucket in BUCKETS:
        value = source.get(bucket)
        if value is None:
            continue
        target.set(bucket, value)
        copied.append(bucket)
    return copied


if __name__ == "__main__":
    ap = argparse.ArgumentParser(description="Copy JSON buckets into the SQL store")
    ap.add_argument("--data-file", default=get_settings().data_file, help="Path to the JSON store")
    args = ap.parse_args()
    init_schema()
    names = migrate(Path(args.data_file))
    print(f"Migrated {len(names)} bucket(s) to SQL: {', '.join(names) or '-'}")
