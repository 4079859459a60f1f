"""
Pydantic schemas for catalog records.

Repositories hand these detached value objects to callers so nothing outside
`unicatalog.db` ever holds a live ORM instance or session.
"""

from .universities import (
    DESCRIPTIVE_FIELDS,
    ReconcileOutcome,
    UniversityBase,
    UniversityCreate,
    University,
    PopularUniversity,
)

__all__ = [
    "DESCRIPTIVE_FIELDS",
    "ReconcileOutcome",
    "UniversityBase",
    "UniversityCreate",
    "University",
    "PopularUniversity",
]
