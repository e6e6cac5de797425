"""Dashboard and calendar queries."""

from __future__ import annotations

from datetime import date, datetime
from typing import Dict, List
from uuid import UUID

from sitebook.domain.models import Expense, Shift, Site, as_datetime
from sitebook.domain.repositories import DataStore


def _as_naive_local(value: date | datetime) -> datetime:
    # Aware and naive timestamps cannot be compared directly
    value = as_datetime(value)
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def upcoming_deadlines(store: DataStore, now: datetime | None = None, limit: int = 5) -> List[Site]:
    """Sites whose deadline has not passed, soonest first."""
    now = _as_naive_local(now or datetime.now())
    upcoming = [s for s in store.sites if _as_naive_local(s.deadline) >= now]
    upcoming.sort(key=lambda s: _as_naive_local(s.deadline))
    return upcoming[:limit]


def recent_expenses(store: DataStore, limit: int = 5) -> List[Expense]:
    expenses = sorted(store.expenses, key=lambda e: _as_naive_local(e.date), reverse=True)
    return expenses[:limit]


def recent_shifts_for_worker(store: DataStore, worker_id: UUID, limit: int = 10) -> List[Shift]:
    shifts = sorted(store.shifts_for_worker(worker_id), key=lambda s: _as_naive_local(s.date), reverse=True)
    return shifts[:limit]


def days_until(deadline: datetime, today: date | None = None) -> int:
    """Whole calendar days from today to the deadline (negative once past)."""
    today = today or date.today()
    return (_as_naive_local(deadline).date() - today).days


def is_overdue(site: Site, now: datetime | None = None) -> bool:
    now = _as_naive_local(now or datetime.now())
    return _as_naive_local(site.deadline) < now


def shift_days_in_month(store: DataStore, year: int, month: int) -> List[int]:
    """Days of the month that have at least one shift (calendar markers)."""
    days = set()
    for shift in store.shifts:
        day = _as_naive_local(shift.date).date()
        if day.year == year and day.month == month:
            days.add(day.day)
    return sorted(days)


def dashboard_metrics(store: DataStore) -> Dict[str, float]:
    return {
        "sites": len(store.sites),
        "workers": len(store.workers),
        "total_budget": store.total_budget,
        "total_spent": store.total_spent,
        "total_remaining": store.total_remaining,
    }
