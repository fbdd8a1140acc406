from __future__ import annotations

import argparse
import os
import sys


def main() -> None:
    parser = argparse.ArgumentParser(description="List database tables and their row counts.")
    parser.add_argument("--database", default=None, help="SQLite file path (defaults to DATABASE_PATH)")
    args = parser.parse_args()

    if args.database:
        os.environ["DATABASE_PATH"] = args.database

    from nextgen.db.connection import close_db, fetch_all, fetch_value
    from nextgen.db.schema import TABLE_NAMES

    try:
        found = {
            row["name"]
            for row in fetch_all("SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%'")
        }
        missing = [name for name in TABLE_NAMES if name not in found]
        for name in sorted(found):
            print(f"{name}: {fetch_value(f'SELECT COUNT(*) FROM {name}')} rows")
    finally:
        close_db()

    if missing:
        print(f"Missing tables: {', '.join(missing)}", file=sys.stderr)
        sys.exit(1)
    print("Database verification successful.")


if __name__ == "__main__":
    main()
