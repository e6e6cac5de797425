"""Tests for persisting and reloading the DataStore."""

import json
import uuid
from datetime import date, datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from sitebook.domain.db import StoredBlob
from sitebook.domain.kvstore import MemoryKeyValueStore, SqlKeyValueStore
from sitebook.domain.models import Expense, Profile, Shift, Site, Worker
from sitebook.domain.repositories import DataStore


class FailingKeyValueStore(MemoryKeyValueStore):
    """Memory store whose writes fail for selected keys."""

    def __init__(self, failing_keys):
        super().__init__()
        self.failing_keys = set(failing_keys)

    def set(self, key, value):
        if key in self.failing_keys:
            raise OSError(f"disk full writing {key}")
        super().set(key, value)


def _workers(count):
    return [
        Worker(
            name=f"Worker {i}",
            specialization="Framer",
            education="Apprenticeship",
            experience=f"{i} years",
            hourly_rate=20.0 + i,
            photo_data=bytes([i, 255, 0]) if i % 2 else None,
        )
        for i in range(count)
    ]


@pytest.mark.parametrize("count", [0, 1, 4])
def test_workers_round_trip(kv, count):
    """Persisted collections reload equal, order and fields preserved."""
    store = DataStore(kv)
    workers = _workers(count)
    for w in workers:
        store.add_worker(w)
    if count == 0:
        # Nothing was written yet; force an empty blob
        store.delete_worker(uuid.uuid4())

    reloaded = DataStore.load(kv)
    assert reloaded.workers == workers


def test_full_state_round_trip_through_sql(db_session):
    """Every key survives a write/reload cycle through the SQL-backed store."""
    store = DataStore(SqlKeyValueStore(db_session))
    worker = Worker(name="Ana", hourly_rate=33.5, photo_data=b"\x89PNG\r\n")
    site = Site(
        name="Pier 9",
        image_data=b"\xff\xd8\xff\xe0",
        deadline=datetime(2026, 2, 28, 17, 0),
        budget=98000.0,
        worker_ids=[worker.id],
    )
    shift = Shift(worker_id=worker.id, site_id=site.id, date=datetime(2025, 11, 3, 7, 30), hours=7.5)
    expense = Expense(site_id=site.id, title="Rebar", amount=1875.4, date=datetime(2025, 11, 2))
    store.add_worker(worker)
    store.add_site(site)
    store.add_shift(shift)
    store.add_expense(expense)
    store.update_profile(Profile(name="Dana", company="Dana Builds"))
    store.complete_onboarding()

    reloaded = DataStore.load(SqlKeyValueStore(db_session))

    assert reloaded.workers == [worker]
    assert reloaded.sites == [site]
    assert reloaded.shifts == [shift]
    assert reloaded.expenses == [expense]
    assert reloaded.profile == Profile(name="Dana", company="Dana Builds")
    assert reloaded.has_seen_onboarding is True
    assert db_session.get(StoredBlob, "sites") is not None


def test_stored_layout_is_readable_json(kv):
    """Blobs are JSON documents under fixed keys with camelCase fields."""
    store = DataStore(kv)
    site = Site(name="Lot 4", deadline=datetime(2026, 1, 5), budget=10.0)
    store.add_site(site)

    data = json.loads(kv.data["sites"])
    assert data == [
        {
            "id": str(site.id),
            "name": "Lot 4",
            "imageData": None,
            "deadline": "2026-01-05T00:00:00",
            "budget": 10.0,
            "workerIds": [],
        }
    ]


def test_missing_keys_load_defaults():
    """A fresh store starts empty with a default profile."""
    store = DataStore.load(MemoryKeyValueStore())

    assert store.sites == [] and store.workers == [] and store.shifts == [] and store.expenses == []
    assert store.profile == Profile()
    assert store.has_seen_onboarding is False


def test_corrupt_blobs_fall_back_to_defaults(capsys):
    """Unreadable blobs degrade to defaults per key without affecting the others."""
    good_worker = Worker(name="Survivor")
    seed = DataStore(MemoryKeyValueStore())
    seed.add_worker(good_worker)

    kv = MemoryKeyValueStore(
        {
            "sites": "{not json",
            "workers": seed.kv.get("workers"),
            "shifts": json.dumps([{"id": "not-a-uuid", "workerId": "x", "siteId": "y"}]),
            "expenses": json.dumps({"wrong": "shape"}),
            "profile": "[1, 2]",
            "hasSeenOnboarding": "maybe",
        }
    )
    store = DataStore.load(kv)

    assert store.sites == []
    assert store.workers == [good_worker]
    assert store.shifts == []
    assert store.expenses == []
    assert store.profile == Profile()
    assert store.has_seen_onboarding is False
    assert "[WARN]" in capsys.readouterr().out


def test_write_failure_is_reported_not_raised(capsys):
    """A failed write returns a failed SaveResult and memory stays authoritative."""
    kv = FailingKeyValueStore({"shifts"})
    store = DataStore(kv)
    site = Site(name="S")
    store.add_site(site)

    shift = Shift(worker_id=uuid.uuid4(), site_id=site.id)
    result = store.add_shift(shift)

    assert not result
    assert result.failed_keys == ["shifts"]
    assert "disk full" in result.errors["shifts"]
    assert store.shift_by_id(shift.id) is not None
    assert "shifts" not in kv.data
    assert "[WARN] Failed to persist 'shifts'" in capsys.readouterr().out


def test_partial_cascade_failure(capsys):
    """A cascade writes every key it can even when one key fails."""
    kv = FailingKeyValueStore({"expenses"})
    store = DataStore(kv)
    site = Site(name="S")
    store.add_site(site)
    store.add_shift(Shift(worker_id=uuid.uuid4(), site_id=site.id))

    result = store.delete_site(site)

    assert result.failed_keys == ["expenses"]
    assert set(result.saved_keys) == {"sites", "shifts"}
    assert json.loads(kv.data["sites"]) == []


def test_unencodable_record_is_reported():
    """Encoding errors surface in the SaveResult instead of raising."""
    store = DataStore(MemoryKeyValueStore())
    bad = Site(name="Bad", deadline="not a datetime")

    result = store.add_site(bad)

    assert result.failed_keys == ["sites"]
    assert store.site_by_id(bad.id) is not None


def test_sql_store_missing_table_falls_back():
    """A database without the blob table loads as an empty store."""
    engine = create_engine("sqlite:///:memory:")
    session = sessionmaker(bind=engine)()
    try:
        store = DataStore.load(SqlKeyValueStore(session))
        assert store.sites == []

        result = store.add_site(Site(name="Nowhere to go"))
        assert result.failed_keys == ["sites"]
        assert len(store.sites) == 1
    finally:
        session.close()


def test_sql_store_overwrites_value(db_session):
    """Setting a key twice keeps a single row with the latest value."""
    kv = SqlKeyValueStore(db_session)
    kv.set("profile", '{"name": "a"}')
    kv.set("profile", '{"name": "b"}')

    assert kv.get("profile") == '{"name": "b"}'
    assert db_session.query(StoredBlob).count() == 1

    kv.delete("profile")
    assert kv.get("profile") is None


def test_sql_store_raises_on_broken_connection():
    """The SQL store itself propagates database errors."""
    engine = create_engine("sqlite:///:memory:")
    session = sessionmaker(bind=engine)()
    try:
        with pytest.raises(OperationalError):
            SqlKeyValueStore(session).set("sites", "[]")
    finally:
        session.close()


def test_calendar_dates_reload_as_midnight(kv):
    """Plain dates are stored as local-midnight timestamps and reload unchanged."""
    store = DataStore(kv)
    site = Site(name="Lot 4", deadline=date(2030, 1, 1))
    expense = Expense(site_id=site.id, title="Permit", amount=80.0, date=date(2029, 12, 1))
    store.add_site(site)
    store.add_expense(expense)

    assert site.deadline == datetime(2030, 1, 1)

    later = store.site_by_id(site.id)
    later.deadline = date(2030, 2, 1)
    store.update_site(later)

    reloaded = DataStore.load(kv)
    assert reloaded.sites[0].deadline == datetime(2030, 2, 1)
    assert reloaded.expenses == [expense]
