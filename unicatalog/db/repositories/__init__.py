"""
Per-entity repository modules for database access.

Each module pairs plain session-level query functions with a repository class
that owns session acquisition for one operation at a time.
"""
from .universities import UniversityRepository
from .views import ViewCounterRepository

__all__ = ["UniversityRepository", "ViewCounterRepository"]
