"""CSV export utilities. Image payloads are never exported."""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from sitebook.domain.repositories import DataStore
from sitebook.services.budget import budget_overview


def _write(df: pd.DataFrame, csv_path: str | Path, label: str) -> int:
    df.to_csv(csv_path, index=False)
    print(f"[INFO] Exported {len(df)} {label} to {csv_path}")
    return len(df)


def export_sites_csv(store: DataStore, csv_path: str | Path) -> int:
    """
    Export sites to CSV.

    Args:
        store: DataStore
        csv_path: Output CSV path

    Returns:
        Number of rows written
    """
    rows = [
        {
            "site_id": str(s.id),
            "name": s.name,
            "deadline": s.deadline.isoformat(),
            "budget": s.budget,
            # Semicolon-separated, assignment order
            "worker_ids": ";".join(str(wid) for wid in s.worker_ids),
        }
        for s in store.sites
    ]
    df = pd.DataFrame(rows, columns=["site_id", "name", "deadline", "budget", "worker_ids"])
    return _write(df, csv_path, "sites")


def export_workers_csv(store: DataStore, csv_path: str | Path) -> int:
    rows = [
        {
            "worker_id": str(w.id),
            "name": w.name,
            "specialization": w.specialization,
            "education": w.education,
            "experience": w.experience,
            "hourly_rate": w.hourly_rate,
        }
        for w in store.workers
    ]
    df = pd.DataFrame(
        rows, columns=["worker_id", "name", "specialization", "education", "experience", "hourly_rate"]
    )
    return _write(df, csv_path, "workers")


def export_shifts_csv(store: DataStore, csv_path: str | Path) -> int:
    """Export shifts with the labor cost at each worker's current rate."""
    rows = []
    for s in store.shifts:
        worker = store.worker_by_id(s.worker_id)
        rate = worker.hourly_rate if worker is not None else 0.0
        rows.append(
            {
                "shift_id": str(s.id),
                "worker_id": str(s.worker_id),
                "site_id": str(s.site_id),
                "date": s.date.isoformat(),
                "hours": s.hours,
                "labor_cost": s.hours * rate,
            }
        )
    df = pd.DataFrame(rows, columns=["shift_id", "worker_id", "site_id", "date", "hours", "labor_cost"])
    return _write(df, csv_path, "shifts")


def export_expenses_csv(store: DataStore, csv_path: str | Path) -> int:
    rows = [
        {
            "expense_id": str(e.id),
            "site_id": str(e.site_id),
            "title": e.title,
            "amount": e.amount,
            "date": e.date.isoformat(),
        }
        for e in store.expenses
    ]
    df = pd.DataFrame(rows, columns=["expense_id", "site_id", "title", "amount", "date"])
    return _write(df, csv_path, "expenses")


def export_budget_csv(store: DataStore, csv_path: str | Path) -> int:
    """Export the per-site budget overview."""
    return _write(budget_overview(store), csv_path, "budget rows")
