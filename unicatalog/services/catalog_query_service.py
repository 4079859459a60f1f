"""Read-only catalog queries for display and export callers."""
from __future__ import annotations

from typing import List, Optional

from unicatalog.db import schemas
from unicatalog.db.repositories import UniversityRepository, ViewCounterRepository


class CatalogQueryService:
    """Thin composition of the record repository and the view counter.

    Every call goes straight to the store; nothing is cached here.
    """

    def __init__(self, repository: UniversityRepository, counter: ViewCounterRepository):
        self.repository = repository
        self.counter = counter

    def all_records(self) -> List[schemas.University]:
        return self.repository.list_all()

    def search(self, name: str = "", country: str = "") -> List[schemas.University]:
        return self.repository.search(name, country)

    def countries(self) -> List[str]:
        return self.repository.list_countries()

    def popular(self) -> List[schemas.PopularUniversity]:
        """Viewed records, already sorted for the export consumer."""
        return self.counter.top_by_popularity()

    def by_id(self, university_id: int) -> Optional[schemas.University]:
        return self.repository.find_by_id(university_id)
