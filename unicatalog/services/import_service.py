"""
Import of university records from the public universities JSON feed.

Feed entries look like::

    {"name": "...", "country": "...", "alpha_two_code": "GR",
     "state-province": null, "domains": ["..."], "web_pages": ["..."]}

Each entry becomes an unmodified candidate that is reconciled into the store,
so records a person has edited locally are never overwritten by a re-import.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

import requests

from unicatalog.db import models, schemas
from unicatalog.db.repositories import UniversityRepository

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = 30.0


def _column_length(column_name: str) -> Optional[int]:
    return getattr(models.University.__table__.c[column_name].type, "length", None)


def _joined(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v).strip() for v in value if v is not None and str(v).strip())
    return str(value).strip()


def _key_text(value: Any, column_name: str) -> str:
    # Clipping a key column could merge two distinct feed entries into one record.
    text = _joined(value)
    limit = _column_length(column_name)
    if limit and len(text) > limit:
        raise ValueError(f"Feed entry {column_name} exceeds {limit} characters")
    return text


def _text(value: Any, column_name: str) -> str:
    text = _joined(value)
    limit = _column_length(column_name)
    if limit and len(text) > limit:
        logger.warning("Clipping %s from %d to %d characters", column_name, len(text), limit)
        return text[:limit]
    return text


def candidate_from_payload(item: Dict[str, Any]) -> schemas.UniversityCreate:
    """Map one feed entry to an import candidate.

    Raises ValueError when name or country is missing or longer than its column.
    """
    name = _key_text(item.get("name"), "name")
    country = _key_text(item.get("country"), "country")
    if not name or not country:
        raise ValueError("Feed entry is missing name or country")
    state = item.get("state-province", item.get("state_province"))
    return schemas.UniversityCreate(
        name=name,
        country=country,
        alpha_two_code=_text(item.get("alpha_two_code"), "alpha_two_code"),
        state_province=_text(state, "state_province"),
        domains=_text(item.get("domains"), "domains"),
        web_pages=_text(item.get("web_pages"), "web_pages"),
        modified=False,
    )


def fetch_payload(url: str, country: Optional[str] = None, timeout: float = _DEFAULT_TIMEOUT) -> List[Dict[str, Any]]:
    """GET the feed (optionally filtered by country) and return its entries."""
    params = {"country": country} if country else None
    response = requests.get(url, params=params, timeout=timeout)
    response.raise_for_status()
    data = response.json()
    if not isinstance(data, list):
        raise RuntimeError("Unexpected universities feed structure: expected a JSON array")
    logger.info("Fetched %d feed entries from %s", len(data), url)
    return data


@dataclass
class ImportSummary:
    inserted: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0
    invalid: int = 0
    failed_names: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.inserted + self.updated + self.skipped + self.failed + self.invalid

    def record(self, outcome: schemas.ReconcileOutcome, name: str) -> None:
        if outcome == schemas.ReconcileOutcome.INSERTED:
            self.inserted += 1
        elif outcome == schemas.ReconcileOutcome.UPDATED:
            self.updated += 1
        elif outcome == schemas.ReconcileOutcome.SKIPPED_CONFLICT:
            self.skipped += 1
        else:
            self.failed += 1
            self.failed_names.append(name)


class ImportService:
    """Reconciles feed entries into the catalog."""

    def __init__(self, repository: UniversityRepository):
        self.repository = repository

    def import_payload(self, items: Iterable[Dict[str, Any]]) -> ImportSummary:
        summary = ImportSummary()
        for item in items:
            try:
                candidate = candidate_from_payload(item)
            except (ValueError, AttributeError) as e:
                logger.warning(f"Skipping invalid feed entry {item!r}: {str(e)}")
                summary.invalid += 1
                continue
            summary.record(self.repository.reconcile(candidate), candidate.name)

        logger.info(
            "Import finished: inserted=%d updated=%d skipped=%d failed=%d invalid=%d",
            summary.inserted,
            summary.updated,
            summary.skipped,
            summary.failed,
            summary.invalid,
        )
        return summary
