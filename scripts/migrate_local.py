#!/usr/bin/env python3
"""Apply Alembic migrations to the local PostgreSQL database.

Creates the trips and audit_logs tables using the same DB_* settings as the
service itself.

Usage:
    python scripts/migrate_local.py [revision]
"""

import logging
import os
import sys
from pathlib import Path

root = Path(__file__).parent.parent
sys.path.insert(0, str(root / "src"))

from core.services.migration import run_migrations  # noqa: E402


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    os.environ.setdefault("ALEMBIC_CONFIG", str(root / "alembic.ini"))
    os.environ.setdefault("ALEMBIC_SCRIPT_LOCATION", str(root / "alembic"))

    revision = sys.argv[1] if len(sys.argv) > 1 else "head"
    print(f"Migrating local database to {revision}...")
    result = run_migrations(revision)
    print(f"✓ {result['status']}")


if __name__ == "__main__":
    main()
