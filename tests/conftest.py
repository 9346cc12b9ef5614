"""
Pytest fixtures for storehouse tests.

Core tests run once per backend: the dict-backed MemoryStorage and SqlStorage
over an in-memory SQLite database.
"""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from storehouse.database import init_db, make_engine
from storehouse.main import create_app
from storehouse.services.warehouse import Warehouse
from storehouse.storage.memory import MemoryStorage, MemoryStorageProvider
from storehouse.storage.sql import SqlStorage

CLOCK_START = datetime(2024, 1, 10, 9, 0, tzinfo=timezone.utc)


class TickingClock:
    """Each call returns a time one minute after the previous one."""

    def __init__(self, start=CLOCK_START, step=timedelta(minutes=1)):
        self.now = start
        self.step = step

    def __call__(self):
        current = self.now
        self.now = current + self.step
        return current


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def sql_session_factory():
    """Fresh in-memory SQLite database with all tables."""
    engine = make_engine("sqlite://")
    init_db(engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture(params=["memory", "sql"])
def storage(request, sql_session_factory):
    if request.param == "memory":
        yield MemoryStorage()
    else:
        db = sql_session_factory()
        try:
            yield SqlStorage(db)
        finally:
            db.close()


@pytest.fixture
def warehouse(storage, clock):
    """Seeded warehouse with the default (asymmetric) kanban logging policy."""
    wh = Warehouse(storage, clock=clock)
    wh.initialize()
    return wh


@pytest.fixture
def product():
    return {
        "product_name": "Widget",
        "product_code": "W1",
        "quantity": 10,
        "entry_date": "2024-01-15",
    }


@pytest.fixture
def client(clock):
    app = create_app(storage_provider=MemoryStorageProvider(), clock=clock)
    with TestClient(app) as test_client:
        yield test_client
