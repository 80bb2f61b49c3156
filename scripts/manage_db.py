"""Database setup for local development.

    python scripts/manage_db.py init      # create the database and apply schema.sql
    python scripts/manage_db.py seed      # load seed.sql and refresh demo logins
    python scripts/manage_db.py reset     # both of the above
    python scripts/manage_db.py tables    # list tables

APP_ENV picks the settings module (see config/__init__.py).
"""

from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.school_management.school_management.database.bootstrap import (
    apply_schema,
    apply_seed_sql,
    ensure_demo_accounts,
    list_tables,
)
from src.school_management.school_management.database.connection import DBConfig

DATABASE_DIR = REPO_ROOT / "database"


def _init(db_config: dict) -> None:
    apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
    print(f"OK: schema applied ({len(list_tables(db_config))} tables)")


def _seed(db_config: dict) -> None:
    apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
    ensure_demo_accounts(db_config)
    print("OK: demo data loaded (admin/admin123, sjohnson/teacher123)")


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("command", choices=("init", "seed", "reset", "tables"))
    args = parser.parse_args(argv)

    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)
    print(f"Target: {DBConfig.from_mapping(db_config).describe()}")

    if args.command in ("init", "reset"):
        _init(db_config)
    if args.command in ("seed", "reset"):
        _seed(db_config)
    if args.command == "tables":
        for name in list_tables(db_config):
            print(name)


if __name__ == "__main__":
    main()
