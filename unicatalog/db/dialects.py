"""Dialect-specific constructs: ON CONFLICT upserts and literal substring search.

Reconciliation and the view counter rely on ``INSERT ... ON CONFLICT``, which
SQLAlchemy only exposes through the per-dialect ``insert`` functions.
"""
from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def upsert_insert(db: Session, table):
    """Return an ON CONFLICT capable ``insert(table)`` for the session's dialect."""
    dialect = db.get_bind().dialect.name
    try:
        factory = _INSERTS[dialect]
    except KeyError:
        raise ValueError(f"Unsupported database dialect for upserts: {dialect}") from None
    return factory(table)


# Position-of-substring functions; unlike LIKE they are case-sensitive on
# both backends and treat % and _ in the pattern literally.
_POSITION_FUNCTIONS = {
    "sqlite": func.instr,
    "postgresql": func.strpos,
}


def contains_literal(db: Session, column, pattern: str):
    """Case-sensitive ``pattern in column`` filter for the session's dialect."""
    dialect = db.get_bind().dialect.name
    try:
        position = _POSITION_FUNCTIONS[dialect]
    except KeyError:
        raise ValueError(f"Unsupported database dialect for substring search: {dialect}") from None
    return position(column, pattern) > 0
