"""Business logic services package with public service helpers."""

from .catalog_query_service import CatalogQueryService
from .import_service import (
    ImportService,
    ImportSummary,
    candidate_from_payload,
    fetch_payload,
)

__all__ = [
    "CatalogQueryService",
    "ImportService",
    "ImportSummary",
    "candidate_from_payload",
    "fetch_payload",
]
