"""
Concurrent reconcile / increment against a file-backed SQLite store.

Each worker goes through its own pooled connection, so these runs exercise the
database's own locking rather than any in-process serialization.
"""
from concurrent.futures import ThreadPoolExecutor
from threading import Barrier

import pytest

from unicatalog.db import schemas
from unicatalog.db.database import Store
from unicatalog.db.repositories import UniversityRepository, ViewCounterRepository

WORKERS = 8


@pytest.fixture
def file_store(tmp_path):
    s = Store.from_url(f"sqlite:///{tmp_path / 'concurrency.db'}", echo=False)
    s.create_schema()
    try:
        yield s
    finally:
        s.dispose()


def _run_together(fn, calls):
    barrier = Barrier(WORKERS)

    def _worker(arg):
        barrier.wait()
        return fn(arg)

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        return list(pool.map(_worker, calls))


def test_concurrent_increments_are_not_lost(file_store):
    repo = UniversityRepository(file_store)
    counter = ViewCounterRepository(file_store)
    uid = repo.insert(schemas.UniversityCreate(name="Busy University", country="Greece"))
    per_worker = 25

    def _hammer(_):
        return all(counter.increment(uid) for _ in range(per_worker))

    assert all(_run_together(_hammer, range(WORKERS)))
    assert counter.get_count(uid) == WORKERS * per_worker


def test_concurrent_reconcile_of_one_key_creates_one_record(file_store):
    repo = UniversityRepository(file_store)
    candidate = schemas.UniversityCreate(name="Contested University", country="France", domains="contested.fr")

    outcomes = _run_together(lambda _: repo.reconcile(candidate), range(WORKERS))

    assert outcomes.count(schemas.ReconcileOutcome.INSERTED) == 1
    assert outcomes.count(schemas.ReconcileOutcome.UPDATED) == WORKERS - 1
    assert len(repo.search("Contested", "France")) == 1


def test_concurrent_reconcile_never_overwrites_committed_edit(file_store):
    repo = UniversityRepository(file_store)
    repo.reconcile(schemas.UniversityCreate(name="Edited University", country="Spain"))
    record = repo.find_by_key("Edited University", "Spain")
    assert repo.apply_user_edit(record.model_copy(update={"comments": "hand edit"}))

    candidates = [
        schemas.UniversityCreate(name="Edited University", country="Spain", comments=f"import {i}")
        for i in range(WORKERS)
    ]
    outcomes = _run_together(repo.reconcile, candidates)

    assert set(outcomes) == {schemas.ReconcileOutcome.SKIPPED_CONFLICT}
    assert repo.find_by_key("Edited University", "Spain").comments == "hand edit"
