"""CSV import utilities to load records into a DataStore."""

from __future__ import annotations

import uuid
from pathlib import Path

import pandas as pd

from sitebook.domain.models import Expense, Worker
from sitebook.domain.repositories import DataStore, SaveResult


def _text(row, column: str) -> str:
    value = row.get(column)
    return str(value) if pd.notna(value) else ""


def _check_saved(result: SaveResult, csv_path: str | Path) -> None:
    if not result:
        raise RuntimeError(
            f"Rows from {csv_path} were not saved: could not persist {', '.join(result.failed_keys)}"
        )


def import_workers_csv(store: DataStore, csv_path: str | Path) -> int:
    """
    Import workers from CSV. Every row becomes a new worker with a fresh id.

    Args:
        store: DataStore
        csv_path: CSV with a ``name`` column and optional specialization,
            education, experience and hourly_rate columns

    Returns:
        Number of workers imported

    Raises:
        RuntimeError: If the imported workers could not be persisted
    """
    df = pd.read_csv(csv_path)

    # Normalize column names
    df.columns = df.columns.str.lower().str.strip()
    if "name" not in df.columns:
        raise ValueError(f"{csv_path} has no 'name' column")

    result = SaveResult()
    count = 0
    for _, row in df.iterrows():
        worker = Worker(
            name=_text(row, "name"),
            specialization=_text(row, "specialization"),
            education=_text(row, "education"),
            experience=_text(row, "experience"),
            hourly_rate=float(row["hourly_rate"]) if pd.notna(row.get("hourly_rate")) else 0.0,
        )
        result.merge(store.add_worker(worker))
        count += 1

    _check_saved(result, csv_path)
    print(f"[INFO] Imported {count} workers from {csv_path}")
    return count


def import_expenses_csv(store: DataStore, csv_path: str | Path) -> int:
    """
    Import expenses from CSV.

    Args:
        store: DataStore
        csv_path: CSV with site_id, title, amount and optional date columns

    Returns:
        Number of expenses imported; rows for unknown sites are skipped

    Raises:
        RuntimeError: If the imported expenses could not be persisted
    """
    df = pd.read_csv(csv_path)

    # Normalize column names
    df.columns = df.columns.str.lower().str.strip()
    missing = [c for c in ("site_id", "amount") if c not in df.columns]
    if missing:
        raise ValueError(f"{csv_path} is missing columns: {', '.join(missing)}")

    if "date" in df.columns:
        df["date"] = pd.to_datetime(df["date"])

    result = SaveResult()
    count = 0
    for _, row in df.iterrows():
        try:
            site_id = uuid.UUID(str(row["site_id"]).strip())
        except ValueError:
            print(f"[WARN] Skipping expense with invalid site_id {row['site_id']!r}")
            continue
        if store.site_by_id(site_id) is None:
            print(f"[WARN] Skipping expense for unknown site {site_id}")
            continue

        expense = Expense(
            site_id=site_id,
            title=_text(row, "title"),
            amount=float(row["amount"]) if pd.notna(row["amount"]) else 0.0,
        )
        if pd.notna(row.get("date")):
            expense.date = row["date"].to_pydatetime()
        result.merge(store.add_expense(expense))
        count += 1

    _check_saved(result, csv_path)
    print(f"[INFO] Imported {count} expenses from {csv_path}")
    return count
