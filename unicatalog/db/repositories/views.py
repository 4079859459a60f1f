"""
University view counter repository.

Counters are created lazily: a missing row means zero views. Increments are a
single INSERT ... ON CONFLICT DO UPDATE so concurrent viewers never both
create the row and never lose a count.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from unicatalog.db import models, schemas
from unicatalog.db.database import Store
from unicatalog.db.dialects import upsert_insert

logger = logging.getLogger(__name__)

_table = models.UniversityView.__table__


def increment_view_count(db: Session, university_id: int) -> None:
    stmt = upsert_insert(db, _table).values(university_id=university_id, view_count=1)
    stmt = stmt.on_conflict_do_update(
        index_elements=[_table.c.university_id],
        set_={"view_count": _table.c.view_count + 1},
    )
    db.execute(stmt)


def get_view_count(db: Session, university_id: int) -> int:
    count = (
        db.query(models.UniversityView.view_count)
        .filter(models.UniversityView.university_id == university_id)
        .scalar()
    )
    return int(count or 0)


def get_popular_universities(db: Session, limit: Optional[int] = None):
    # Inner join: records that were never viewed are not listed.
    q = (
        db.query(
            models.University.id,
            models.University.name,
            models.University.country,
            models.UniversityView.view_count,
        )
        .join(models.UniversityView, models.UniversityView.university_id == models.University.id)
        .order_by(models.UniversityView.view_count.desc(), models.University.id.asc())
    )
    if limit is not None:
        q = q.limit(limit)
    return q.all()


class ViewCounterRepository:
    """Per-record popularity counters."""

    def __init__(self, store: Store):
        self.store = store

    def increment(self, university_id: int) -> bool:
        """Add one view to ``university_id``, creating its counter on first view."""
        try:
            with self.store.session_scope() as db:
                increment_view_count(db, university_id)
        except SQLAlchemyError as e:
            logger.error(f"Error increasing view count for university id={university_id}: {str(e)}")
            return False
        logger.info("View count increased for university id=%s", university_id)
        return True

    def get_count(self, university_id: int) -> int:
        try:
            with self.store.session_scope() as db:
                return get_view_count(db, university_id)
        except SQLAlchemyError as e:
            logger.error(f"Error reading view count for university id={university_id}: {str(e)}")
            return 0

    def top_by_popularity(self, limit: Optional[int] = None) -> List[schemas.PopularUniversity]:
        """Viewed records by descending view count; ties by ascending id."""
        try:
            with self.store.session_scope() as db:
                rows = get_popular_universities(db, limit)
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving most popular universities: {str(e)}")
            return []
        return [
            schemas.PopularUniversity(id=r.id, name=r.name, country=r.country, view_count=r.view_count)
            for r in rows
        ]
