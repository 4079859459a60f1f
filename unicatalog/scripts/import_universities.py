"""Import universities from the public JSON feed (or a saved copy of it)."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import requests

from unicatalog.db.database import Store
from unicatalog.db.repositories import UniversityRepository
from unicatalog.services.import_service import ImportService, fetch_payload
from unicatalog.utils.logging_setup import configure_logging
from unicatalog.utils.settings import get_settings


logger = logging.getLogger("unicatalog.scripts.import_universities")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile universities from the feed into the catalog")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--file", type=Path, help="Read feed entries from a JSON file")
    source.add_argument("--url", help="Feed URL (default: UNIVERSITIES_SOURCE_URL)")
    parser.add_argument("--country", help="Only fetch universities of this country (URL source only)")
    parser.add_argument("--database-url", default=None, help="SQLAlchemy URL of the catalog")
    args = parser.parse_args(argv)
    if args.file is not None and args.country:
        parser.error("--country only applies to URL sources")
    return args


def load_entries(args: argparse.Namespace) -> list:
    if args.file is not None:
        data = json.loads(args.file.read_text(encoding="utf-8"))
        if not isinstance(data, list):
            raise RuntimeError(f"{args.file} does not contain a JSON array")
        return data
    settings = get_settings()
    return fetch_payload(
        args.url or settings.source_url,
        country=args.country,
        timeout=settings.import_timeout_seconds,
    )


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    args = parse_args(argv)

    try:
        entries = load_entries(args)
    except (OSError, ValueError, RuntimeError, requests.RequestException) as e:
        logger.error(f"Could not load feed entries: {str(e)}")
        print(f"Could not load feed entries: {e}", file=sys.stderr)
        return 2

    store = Store.from_url(args.database_url)
    try:
        store.create_schema()
        summary = ImportService(UniversityRepository(store)).import_payload(entries)
    finally:
        store.dispose()

    print(
        f"Processed {summary.total} entries: {summary.inserted} inserted, {summary.updated} updated, "
        f"{summary.skipped} kept local edits, {summary.failed} failed, {summary.invalid} invalid."
    )
    return 1 if summary.failed else 0


if __name__ == "__main__":  # pragma: no cover - manual execution path
    sys.exit(main())
