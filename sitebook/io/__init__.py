"""I/O utilities for CSV import/export."""

from .export_csv import (
    export_budget_csv,
    export_expenses_csv,
    export_shifts_csv,
    export_sites_csv,
    export_workers_csv,
)
from .import_csv import import_expenses_csv, import_workers_csv

__all__ = [
    "export_sites_csv",
    "export_workers_csv",
    "export_shifts_csv",
    "export_expenses_csv",
    "export_budget_csv",
    "import_workers_csv",
    "import_expenses_csv",
]
