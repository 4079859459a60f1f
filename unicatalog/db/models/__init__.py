"""
SQLAlchemy models for the university catalog.

Exposes `Base` plus the ORM classes so callers can write
`from unicatalog.db import models` and reach everything from one place.
"""

from .base import Base  # re-export

from .universities import University, UniversityView

__all__ = [
    "Base",
    "University",
    "UniversityView",
]
