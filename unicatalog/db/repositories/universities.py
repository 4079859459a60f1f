"""
University record repository.

Session-level functions implement the individual statements; the
`UniversityRepository` class wraps each public operation in its own store
session and turns storage failures into degraded results (empty list, None,
False, or `ReconcileOutcome.FAILED`) after logging them.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import false, insert, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from unicatalog.db import models, schemas
from unicatalog.db.database import Store
from unicatalog.db.dialects import contains_literal, upsert_insert

logger = logging.getLogger(__name__)

_table = models.University.__table__


def get_university(db: Session, university_id: int):
    return db.query(models.University).filter(models.University.id == university_id).first()


def get_university_by_key(db: Session, name: str, country: str):
    return (
        db.query(models.University)
        .filter(models.University.name == name, models.University.country == country)
        .first()
    )


def insert_university(db: Session, values: dict) -> int:
    result = db.execute(insert(_table).values(**values))
    return int(result.inserted_primary_key[0])


def insert_university_if_absent(db: Session, values: dict) -> Optional[int]:
    """Insert unless a row with the same (name, country) exists; return the new id or None."""
    stmt = (
        upsert_insert(db, _table)
        .values(**values)
        .on_conflict_do_nothing(index_elements=[_table.c.name, _table.c.country])
        .returning(_table.c.id)
    )
    row = db.execute(stmt).first()
    return int(row[0]) if row is not None else None


def update_university_by_id(db: Session, university_id: int, values: dict) -> bool:
    result = db.execute(update(_table).where(_table.c.id == university_id).values(**values))
    return result.rowcount > 0


def update_university_if_unmodified(db: Session, values: dict) -> bool:
    """Overwrite the row matching (name, country) only while its modified flag is false."""
    stmt = (
        update(_table)
        .where(
            _table.c.name == values["name"],
            _table.c.country == values["country"],
            _table.c.modified == false(),
        )
        .values(**values)
    )
    return db.execute(stmt).rowcount > 0


def search_universities(db: Session, name_pattern: str = "", country_pattern: str = "", ordered: bool = False):
    q = db.query(models.University)
    if name_pattern:
        q = q.filter(contains_literal(db, models.University.name, name_pattern))
    if country_pattern:
        q = q.filter(contains_literal(db, models.University.country, country_pattern))
    if ordered:
        q = q.order_by(models.University.name, models.University.country, models.University.id)
    return q.all()


def get_countries(db: Session) -> List[str]:
    rows = (
        db.query(models.University.country)
        .distinct()
        .order_by(models.University.country.asc())
        .all()
    )
    return [row.country for row in rows]


def count_universities(db: Session) -> int:
    return db.query(models.University).count()


class UniversityRepository:
    """Reconciliation, lookups and listings over university records."""

    def __init__(self, store: Store):
        self.store = store

    def reconcile(self, candidate: schemas.UniversityBase) -> schemas.ReconcileOutcome:
        """Merge an imported candidate into the store.

        Inserts when no record has the candidate's (name, country), overwrites
        an existing record only while its ``modified`` flag is false, and
        otherwise leaves the hand-edited record untouched. Both writes are
        conditional statements evaluated by the database inside a single
        transaction, so concurrent reconciles of one key cannot duplicate it
        and an edit committed first is never overwritten.
        """
        values = candidate.column_values()
        try:
            with self.store.session_scope() as db:
                new_id = insert_university_if_absent(db, values)
                if new_id is not None:
                    outcome = schemas.ReconcileOutcome.INSERTED
                elif update_university_if_unmodified(db, values):
                    outcome = schemas.ReconcileOutcome.UPDATED
                else:
                    outcome = schemas.ReconcileOutcome.SKIPPED_CONFLICT
        except SQLAlchemyError as e:
            logger.error(f"Error reconciling university {candidate.name!r} ({candidate.country}): {str(e)}")
            return schemas.ReconcileOutcome.FAILED

        if outcome == schemas.ReconcileOutcome.INSERTED:
            logger.info("Inserted university %r (%s) as id=%s", candidate.name, candidate.country, new_id)
        elif outcome == schemas.ReconcileOutcome.UPDATED:
            logger.info("Updated university %r (%s) from import", candidate.name, candidate.country)
        else:
            logger.warning(
                "University %r (%s) was modified locally; import skipped", candidate.name, candidate.country
            )
        return outcome

    def find_by_key(self, name: str, country: str) -> Optional[schemas.University]:
        try:
            with self.store.session_scope() as db:
                row = get_university_by_key(db, name, country)
                return schemas.University.model_validate(row) if row is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving university {name!r} ({country}): {str(e)}")
            return None

    def find_by_id(self, university_id: int) -> Optional[schemas.University]:
        try:
            with self.store.session_scope() as db:
                row = get_university(db, university_id)
                return schemas.University.model_validate(row) if row is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving university id={university_id}: {str(e)}")
            return None

    def insert(self, record: schemas.UniversityBase) -> Optional[int]:
        """Insert ``record`` as a new row and return its id (None on failure)."""
        try:
            with self.store.session_scope() as db:
                new_id = insert_university(db, record.column_values())
        except SQLAlchemyError as e:
            logger.error(f"Error inserting university {record.name!r}: {str(e)}")
            return None
        logger.info("Inserted university %r as id=%s", record.name, new_id)
        return new_id

    def update_fields(self, record: schemas.University) -> bool:
        """Overwrite every persisted field of the row with ``record.id``."""
        try:
            with self.store.session_scope() as db:
                updated = update_university_by_id(db, record.id, record.column_values())
        except SQLAlchemyError as e:
            logger.error(f"Error updating university id={record.id}: {str(e)}")
            return False
        if updated:
            logger.info("Updated university id=%s (%r)", record.id, record.name)
        else:
            logger.warning("No university with id=%s; nothing updated", record.id)
        return updated

    def apply_user_edit(self, record: schemas.University) -> bool:
        """Save a hand edit; marks the record modified so imports stop touching it."""
        return self.update_fields(record.model_copy(update={"modified": True}))

    def search(
        self, name_pattern: Optional[str] = "", country_pattern: Optional[str] = "", ordered: bool = False
    ) -> List[schemas.University]:
        """Substring search on name and country; empty patterns do not filter."""
        try:
            with self.store.session_scope() as db:
                rows = search_universities(db, name_pattern or "", country_pattern or "", ordered)
                return [schemas.University.model_validate(r) for r in rows]
        except SQLAlchemyError as e:
            logger.error(f"Error searching universities name={name_pattern!r} country={country_pattern!r}: {str(e)}")
            return []

    def list_all(self, ordered: bool = False) -> List[schemas.University]:
        return self.search("", "", ordered=ordered)

    def list_countries(self) -> List[str]:
        try:
            with self.store.session_scope() as db:
                return get_countries(db)
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving countries: {str(e)}")
            return []

    def count(self) -> int:
        try:
            with self.store.session_scope() as db:
                return count_universities(db)
        except SQLAlchemyError as e:
            logger.error(f"Error counting universities: {str(e)}")
            return 0
