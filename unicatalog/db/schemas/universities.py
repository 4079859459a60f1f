from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


# Descriptive columns that are stored as '' rather than NULL.
DESCRIPTIVE_FIELDS = (
    'alpha_two_code',
    'state_province',
    'domains',
    'web_pages',
    'school',
    'department',
    'description',
    'contact',
    'comments',
)


class ReconcileOutcome(str, Enum):
    INSERTED = "inserted"
    UPDATED = "updated"
    SKIPPED_CONFLICT = "skipped_conflict"
    # Storage failure; the candidate was not written.
    FAILED = "failed"


class UniversityBase(BaseModel):
    name: str
    country: str
    alpha_two_code: Optional[str] = ''
    state_province: Optional[str] = ''
    domains: Optional[str] = ''
    web_pages: Optional[str] = ''
    school: Optional[str] = ''
    department: Optional[str] = ''
    description: Optional[str] = ''
    contact: Optional[str] = ''
    comments: Optional[str] = ''
    modified: bool = False

    @field_validator(*DESCRIPTIVE_FIELDS, mode='before')
    @classmethod
    def _none_to_empty(cls, value):
        return '' if value is None else value

    def column_values(self) -> dict:
        """Return the persisted columns, without id or derived values."""
        return self.model_dump(include=set(UniversityBase.model_fields))


class UniversityCreate(UniversityBase):
    pass


class University(UniversityBase):
    id: int
    view_count: int = 0
    model_config = ConfigDict(from_attributes=True)


class PopularUniversity(BaseModel):
    id: int
    name: str
    country: str
    view_count: int
    model_config = ConfigDict(from_attributes=True)
