import pytest
from sqlalchemy import inspect, text
from sqlalchemy.pool import StaticPool

from unicatalog.db import models, schemas
from unicatalog.db.database import Store, build_engine
from unicatalog.db.dialects import contains_literal, upsert_insert


def test_memory_engine_uses_static_pool_and_foreign_keys():
    engine = build_engine("sqlite+pysqlite:///:memory:", echo=False)
    try:
        assert isinstance(engine.pool, StaticPool)
        with engine.connect() as conn:
            assert conn.execute(text("PRAGMA foreign_keys")).scalar() == 1
    finally:
        engine.dispose()


def test_file_engine_uses_wal(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'catalog.db'}", echo=False)
    try:
        with engine.connect() as conn:
            assert conn.execute(text("PRAGMA journal_mode")).scalar().lower() == "wal"
    finally:
        engine.dispose()


def test_create_schema_builds_tables_and_unique_key(store):
    inspector = inspect(store.engine)
    assert {"universities", "university_views"} <= set(inspector.get_table_names())
    unique = [ix for ix in inspector.get_indexes("universities") if ix["unique"]]
    assert [ix["column_names"] for ix in unique] == [["name", "country"]]
    plain = [ix["column_names"] for ix in inspector.get_indexes("universities") if not ix["unique"]]
    assert plain == [["country"]]


def test_create_schema_is_repeatable(store, repo):
    repo.insert(schemas.UniversityCreate(name="Kept", country="Greece"))
    store.create_schema()
    assert repo.count() == 1


def test_reset_schema_empties_tables(store, repo, counter):
    uid = repo.insert(schemas.UniversityCreate(name="Gone", country="Greece"))
    counter.increment(uid)
    store.reset_schema()
    assert repo.count() == 0
    assert counter.top_by_popularity() == []


def test_session_scope_commits_and_rolls_back(store):
    with store.session_scope() as db:
        db.add(models.University(name="Committed", country="Greece"))

    with pytest.raises(RuntimeError):
        with store.session_scope() as db:
            db.add(models.University(name="Rolled Back", country="Greece"))
            db.flush()
            raise RuntimeError("boom")

    with store.session_scope() as db:
        names = [u.name for u in db.query(models.University).all()]
    assert names == ["Committed"]


def test_upsert_insert_rejects_unknown_dialect():
    class _Dialect:
        name = "oracle"

    class _Bind:
        dialect = _Dialect()

    class _Session:
        def get_bind(self):
            return _Bind()

    with pytest.raises(ValueError):
        upsert_insert(_Session(), models.University.__table__)


def test_contains_literal_rejects_unknown_dialect():
    class _Dialect:
        name = "oracle"

    class _Bind:
        dialect = _Dialect()

    class _Session:
        def get_bind(self):
            return _Bind()

    with pytest.raises(ValueError):
        contains_literal(_Session(), models.University.name, "x")
