"""Pytest configuration and shared fixtures."""

from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from sitebook.domain.db import Base
from sitebook.domain.kvstore import MemoryKeyValueStore
from sitebook.domain.models import Expense, Shift, Site, Worker
from sitebook.domain.repositories import DataStore


def pytest_configure(config):
    """Configure pytest."""
    # Add custom markers
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (deselect with '-m \"not integration\"')"
    )


@pytest.fixture
def db_session():
    """Create in-memory database session for testing."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def kv():
    return MemoryKeyValueStore()


@pytest.fixture
def store(kv):
    return DataStore(kv)


@pytest.fixture
def site_a_scenario(store):
    """Site A: budget 1000, one 200 expense, one 5h shift by a 40/hr worker."""
    worker = Worker(name="W", specialization="Mason", hourly_rate=40.0)
    site = Site(name="Site A", budget=1000.0, deadline=datetime(2030, 6, 1), worker_ids=[worker.id])
    store.add_worker(worker)
    store.add_site(site)
    store.add_expense(Expense(site_id=site.id, title="Bricks", amount=200.0, date=datetime(2025, 3, 1)))
    store.add_shift(Shift(worker_id=worker.id, site_id=site.id, date=datetime(2025, 3, 2, 8), hours=5.0))
    return site, worker
