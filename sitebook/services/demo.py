"""Sample portfolio for previews and first-run demos."""

from __future__ import annotations

from datetime import datetime, timedelta

from sitebook.domain.models import Expense, Profile, Shift, Site, Worker
from sitebook.domain.repositories import DataStore, SaveResult


def seed_demo_data(store: DataStore, now: datetime | None = None) -> SaveResult:
    """
    Populate the store with three workers, three sites, expenses and shifts.

    Existing records are kept; the demo records are appended after them.

    Args:
        store: DataStore to populate
        now: Reference time for deadlines and dates (default: now)

    Returns:
        Combined SaveResult of every write
    """
    now = now or datetime.now()
    day = timedelta(days=1)

    electrician = Worker(
        name="John Smith",
        specialization="Electrician",
        education="Technical College",
        experience="5 years in residential wiring",
        hourly_rate=35,
    )
    plumber = Worker(
        name="Mike Johnson",
        specialization="Plumber",
        education="Trade School",
        experience="8 years in commercial plumbing",
        hourly_rate=40,
    )
    carpenter = Worker(
        name="Alex Brown",
        specialization="Carpenter",
        education="Apprenticeship",
        experience="3 years in framing",
        hourly_rate=30,
    )

    downtown = Site(name="Downtown Office", deadline=now + 30 * day, budget=150000,
                    worker_ids=[electrician.id, plumber.id])
    riverside = Site(name="Riverside Apartments", deadline=now + 60 * day, budget=320000,
                     worker_ids=[plumber.id, carpenter.id])
    mall = Site(name="Mall Renovation", deadline=now + 7 * day, budget=85000,
                worker_ids=[electrician.id])

    expenses = [
        Expense(site_id=downtown.id, title="Concrete mix", amount=4500, date=now - 5 * day),
        Expense(site_id=downtown.id, title="Electrical wiring", amount=2200, date=now - 3 * day),
        Expense(site_id=riverside.id, title="Lumber delivery", amount=8700, date=now - 2 * day),
        Expense(site_id=mall.id, title="Paint supplies", amount=1200, date=now),
    ]
    shifts = [
        Shift(worker_id=electrician.id, site_id=downtown.id, date=now, hours=8),
        Shift(worker_id=plumber.id, site_id=downtown.id, date=now, hours=6),
        Shift(worker_id=plumber.id, site_id=riverside.id, date=now - day, hours=8),
        Shift(worker_id=carpenter.id, site_id=riverside.id, date=now, hours=4),
        Shift(worker_id=electrician.id, site_id=mall.id, date=now + day, hours=8),
    ]

    result = SaveResult()
    writes = (
        [store.add_worker(w) for w in (electrician, plumber, carpenter)]
        + [store.add_site(s) for s in (downtown, riverside, mall)]
        + [store.add_expense(e) for e in expenses]
        + [store.add_shift(s) for s in shifts]
        + [store.update_profile(Profile(name="David Miller", company="Miller Construction"))]
        + [store.complete_onboarding()]
    )
    for write in writes:
        result.merge(write)

    print(f"[INFO] Seeded demo data: {len(store.sites)} sites, {len(store.workers)} workers")
    return result
