"""Services built on top of the DataStore."""

from .budget import budget_overview, budget_progress, portfolio_progress, site_budget_breakdown
from .dashboard import (
    dashboard_metrics,
    days_until,
    is_overdue,
    recent_expenses,
    recent_shifts_for_worker,
    shift_days_in_month,
    upcoming_deadlines,
)
from .demo import seed_demo_data
from .images import compress_image

__all__ = [
    "budget_overview",
    "budget_progress",
    "portfolio_progress",
    "site_budget_breakdown",
    "dashboard_metrics",
    "days_until",
    "is_overdue",
    "recent_expenses",
    "recent_shifts_for_worker",
    "shift_days_in_month",
    "upcoming_deadlines",
    "seed_demo_data",
    "compress_image",
]
