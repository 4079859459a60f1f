from unittest.mock import Mock

import pytest

from unicatalog.db import schemas
from unicatalog.services import CatalogQueryService


@pytest.fixture
def service(repo, counter):
    return CatalogQueryService(repo, counter)


def test_queries_read_through_to_store(service, repo, counter):
    greek = repo.insert(schemas.UniversityCreate(name="Metropolitan University", country="Greece"))
    french = repo.insert(schemas.UniversityCreate(name="State College", country="France"))
    counter.increment(french)

    assert sorted(r.name for r in service.all_records()) == ["Metropolitan University", "State College"]
    assert [r.id for r in service.search("trop")] == [greek]
    assert service.countries() == ["France", "Greece"]
    assert [p.id for p in service.popular()] == [french]
    assert service.by_id(greek).name == "Metropolitan University"
    assert service.by_id(9999) is None

    # No caching: a new record is visible on the next call.
    repo.insert(schemas.UniversityCreate(name="Aalto University", country="Finland"))
    assert service.countries() == ["Finland", "France", "Greece"]


def test_delegation_arguments():
    repository = Mock()
    counter = Mock()
    service = CatalogQueryService(repository, counter)

    service.search("name", "country")
    service.by_id(3)
    service.popular()

    repository.search.assert_called_once_with("name", "country")
    repository.find_by_id.assert_called_once_with(3)
    counter.top_by_popularity.assert_called_once_with()
