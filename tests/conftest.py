import pytest

from unicatalog.db import schemas
from unicatalog.db.database import Store
from unicatalog.db.repositories import UniversityRepository, ViewCounterRepository
from unicatalog.utils.settings import refresh_settings_cache


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    """Keep developer DATABASE_URL / POSTGRES_* values out of the tests."""
    for var in ("DATABASE_URL", "POSTGRES_USER", "POSTGRES_PASSWORD", "POSTGRES_HOST", "POSTGRES_PORT", "POSTGRES_DB"):
        monkeypatch.delenv(var, raising=False)
    refresh_settings_cache()
    yield
    refresh_settings_cache()


@pytest.fixture
def store():
    s = Store.from_url("sqlite+pysqlite:///:memory:", echo=False)
    s.create_schema()
    try:
        yield s
    finally:
        s.dispose()


@pytest.fixture
def repo(store):
    return UniversityRepository(store)


@pytest.fixture
def counter(store):
    return ViewCounterRepository(store)


@pytest.fixture
def make_candidate():
    """Factory for import candidates; keyword overrides replace any field."""
    return _make_candidate


def _make_candidate(name="Metropolitan University", country="Greece", **overrides):
    fields = dict(
        name=name,
        country=country,
        alpha_two_code="GR",
        state_province="Attica",
        domains="mitropolitiko.edu.gr",
        web_pages="https://mitropolitiko.edu.gr",
    )
    fields.update(overrides)
    return schemas.UniversityCreate(**fields)
