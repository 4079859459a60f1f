"""Create or reset the catalog schema."""

from __future__ import annotations

import argparse
import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from unicatalog.db.database import Store
from unicatalog.utils.logging_setup import configure_logging


logger = logging.getLogger("unicatalog.scripts.manage_db")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manage the university catalog database")
    parser.add_argument(
        "--database-url",
        default=None,
        help="SQLAlchemy URL (default: DATABASE_URL or the local SQLite file)",
    )
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("init", help="Create tables and indexes that do not exist yet")
    reset = sub.add_parser("reset", help="Drop every catalog table and recreate it empty")
    reset.add_argument(
        "--yes",
        action="store_true",
        help="Confirm that all catalog data may be deleted",
    )
    return parser.parse_args(argv)


def run(command: str, store: Store, confirmed: bool = False) -> int:
    if command == "init":
        store.create_schema()
        print("Catalog schema is ready.")
        return 0

    if not confirmed:
        print("Refusing to reset the catalog without --yes.", file=sys.stderr)
        return 1
    store.reset_schema()
    print("Catalog schema dropped and recreated.")
    return 0


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    args = parse_args(argv)
    store = Store.from_url(args.database_url)
    try:
        return run(args.command, store, confirmed=getattr(args, "yes", False))
    except SQLAlchemyError as e:
        logger.error(f"Database command {args.command!r} failed: {str(e)}")
        print(f"Database command failed: {e}", file=sys.stderr)
        return 1
    finally:
        store.dispose()


if __name__ == "__main__":  # pragma: no cover - manual execution path
    sys.exit(main())
