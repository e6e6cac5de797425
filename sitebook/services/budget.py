"""Budget rollups per site and across the portfolio."""

from __future__ import annotations

from typing import Dict, Optional
from uuid import UUID

import pandas as pd

from sitebook.domain.repositories import DataStore

BUDGET_COLUMNS = ["site_id", "name", "budget", "expenses", "labor", "spent", "remaining", "progress"]


def budget_progress(spent: float, budget: float) -> float:
    """Fraction of budget used, capped at 1.0; 0 when there is no budget."""
    if budget <= 0:
        return 0.0
    return min(spent / budget, 1.0)


def portfolio_progress(store: DataStore) -> float:
    return budget_progress(store.total_spent, store.total_budget)


def site_budget_breakdown(store: DataStore, site_id: UUID) -> Optional[Dict[str, float]]:
    """
    Materials/labor split for one site.

    Args:
        store: DataStore
        site_id: Site identifier

    Returns:
        Dict with budget, materials, labor, spent, remaining and progress,
        or None if the site does not exist
    """
    site = store.site_by_id(site_id)
    if site is None:
        return None
    materials = store.total_expenses_for_site(site_id)
    labor = store.total_labor_cost_for_site(site_id)
    spent = materials + labor
    return {
        "budget": site.budget,
        "materials": materials,
        "labor": labor,
        "spent": spent,
        "remaining": site.budget - spent,
        "progress": budget_progress(spent, site.budget),
    }


def budget_overview(store: DataStore) -> pd.DataFrame:
    """One row per site (insertion order) with spend and remaining budget."""
    rows = []
    for site in store.sites:
        expenses = store.total_expenses_for_site(site.id)
        labor = store.total_labor_cost_for_site(site.id)
        spent = expenses + labor
        rows.append(
            {
                "site_id": str(site.id),
                "name": site.name,
                "budget": site.budget,
                "expenses": expenses,
                "labor": labor,
                "spent": spent,
                "remaining": site.budget - spent,
                "progress": budget_progress(spent, site.budget),
            }
        )
    return pd.DataFrame(rows, columns=BUDGET_COLUMNS)
