"""
Pytest configuration. Report routes run against an in-memory SQLite store injected
through dependency overrides, with "today" pinned to TODAY.
"""
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from spintel.db import MetricStore, get_store
from spintel.main import app
from spintel.scripts.init_schema import create_schema
from spintel.scripts.seed_sample import insert_rows
from spintel.utils.time_window import FixedClock, get_clock

TODAY = date(2024, 6, 15)
ORG = "UNI0024"


def _sqlite_engine():
    return create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture
def engine():
    engine = _sqlite_engine()
    with engine.connect() as conn:
        create_schema(conn)
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine):
    return MetricStore(engine)


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_clock] = lambda: FixedClock(TODAY)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def broken_client():
    """Client whose store has no tables, so every query fails."""
    engine = _sqlite_engine()
    app.dependency_overrides[get_store] = lambda: MetricStore(engine)
    app.dependency_overrides[get_clock] = lambda: FixedClock(TODAY)
    yield TestClient(app)
    app.dependency_overrides.clear()
    engine.dispose()


@pytest.fixture
def insert(engine):
    """insert(table, rows): rows are dicts of column -> value; organisation defaults to ORG."""

    def _insert(table, rows):
        rows = [{"organisation_id": ORG, "user_id": "u1", "shift": "1", **r} for r in rows]
        with engine.begin() as conn:
            insert_rows(conn, table, rows)

    return _insert
