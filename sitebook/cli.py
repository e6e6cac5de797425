"""Command-line interface for administering a sitebook database."""

from __future__ import annotations

import argparse
import uuid
from pathlib import Path

from sitebook.config import StoreConfig, load_config
from sitebook.domain.db import get_session, init_database
from sitebook.domain.kvstore import SqlKeyValueStore
from sitebook.domain.models import Profile
from sitebook.domain.repositories import DataStore
from sitebook.io.export_csv import (
    export_budget_csv,
    export_expenses_csv,
    export_shifts_csv,
    export_sites_csv,
    export_workers_csv,
)
from sitebook.io.import_csv import import_expenses_csv, import_workers_csv
from sitebook.services.budget import budget_overview, portfolio_progress
from sitebook.services.dashboard import (
    dashboard_metrics,
    days_until,
    recent_expenses,
    recent_shifts_for_worker,
    upcoming_deadlines,
)
from sitebook.services.demo import seed_demo_data
from sitebook.services.images import compress_image


def _config(args: argparse.Namespace) -> StoreConfig:
    cfg = load_config(args.config)
    if args.db:
        cfg.db_url = args.db
    return cfg


def _cmd_init_db(args: argparse.Namespace) -> None:
    """Initialize the database."""
    cfg = _config(args)
    init_database(cfg.db_url)
    print(f"[OK] Database initialized: {cfg.db_url}")


def _cmd_seed_demo(args: argparse.Namespace) -> None:
    """Append the demo portfolio."""
    cfg = _config(args)
    session = get_session(cfg.db_url, echo=cfg.echo)
    try:
        store = DataStore.load(SqlKeyValueStore(session))
        result = seed_demo_data(store)
        if not result:
            raise RuntimeError(f"could not persist {', '.join(result.failed_keys)}")
        print("[OK] Demo data seeded")
    except Exception as e:
        print(f"[ERROR] Seeding failed: {e}")
        raise
    finally:
        session.close()


def _cmd_summary(args: argparse.Namespace) -> None:
    """Print portfolio totals, per-site budgets and upcoming deadlines."""
    cfg = _config(args)
    session = get_session(cfg.db_url, echo=cfg.echo)
    try:
        store = DataStore.load(SqlKeyValueStore(session))
        profile = store.profile
        if profile.company or profile.name:
            print(f"{profile.company} ({profile.name})")

        metrics = dashboard_metrics(store)
        print(f"Sites: {metrics['sites']}  Workers: {metrics['workers']}")
        print(
            f"Budget: ${metrics['total_budget']:,.0f}  Spent: ${metrics['total_spent']:,.0f}  "
            f"Remaining: ${metrics['total_remaining']:,.0f}  ({portfolio_progress(store):.0%} used)"
        )

        overview = budget_overview(store)
        if overview.empty:
            print("No sites.")
        else:
            print("")
            print(overview.drop(columns=["site_id"]).to_string(index=False))

        upcoming = upcoming_deadlines(store, limit=cfg.upcoming_deadline_limit)
        if upcoming:
            print("")
            print("Upcoming deadlines:")
            for site in upcoming:
                print(f"  {site.name}: {site.deadline:%Y-%m-%d} ({days_until(site.deadline)} days)")

        expenses = recent_expenses(store, limit=cfg.recent_expense_limit)
        if expenses:
            print("")
            print("Recent expenses:")
            for expense in expenses:
                site = store.site_by_id(expense.site_id)
                site_name = site.name if site is not None else "Unknown"
                print(f"  {expense.date:%Y-%m-%d} {expense.title} ${expense.amount:,.2f} ({site_name})")
    finally:
        session.close()


def _cmd_export(args: argparse.Namespace) -> None:
    """Export every collection and the budget overview to CSV files."""
    cfg = _config(args)
    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    session = get_session(cfg.db_url, echo=cfg.echo)
    try:
        store = DataStore.load(SqlKeyValueStore(session))
        export_sites_csv(store, out_dir / "sites.csv")
        export_workers_csv(store, out_dir / "workers.csv")
        export_shifts_csv(store, out_dir / "shifts.csv")
        export_expenses_csv(store, out_dir / "expenses.csv")
        export_budget_csv(store, out_dir / "budget.csv")
        print(f"[OK] Exported CSV files to {out_dir}")
    except Exception as e:
        print(f"[ERROR] Export failed: {e}")
        raise
    finally:
        session.close()


def _cmd_import(args: argparse.Namespace) -> None:
    """Import workers and/or expenses from CSV."""
    cfg = _config(args)
    session = get_session(cfg.db_url, echo=cfg.echo)
    try:
        store = DataStore.load(SqlKeyValueStore(session))
        if args.workers:
            count = import_workers_csv(store, args.workers)
            print(f"[OK] Imported {count} workers")
        if args.expenses:
            count = import_expenses_csv(store, args.expenses)
            print(f"[OK] Imported {count} expenses")
    except Exception as e:
        print(f"[ERROR] Import failed: {e}")
        raise
    finally:
        session.close()


def _cmd_profile(args: argparse.Namespace) -> None:
    """Show or update the owner profile."""
    cfg = _config(args)
    session = get_session(cfg.db_url, echo=cfg.echo)
    try:
        store = DataStore.load(SqlKeyValueStore(session))
        profile = store.profile
        if args.name is not None or args.company is not None:
            profile = Profile(
                name=args.name if args.name is not None else profile.name,
                company=args.company if args.company is not None else profile.company,
            )
            result = store.update_profile(profile)
            if not result:
                raise RuntimeError(f"could not persist {', '.join(result.failed_keys)}")
            print("[OK] Profile updated")
        print(f"Name: {profile.name}")
        print(f"Company: {profile.company}")
    except Exception as e:
        print(f"[ERROR] Profile update failed: {e}")
        raise
    finally:
        session.close()


def _cmd_worker(args: argparse.Namespace) -> None:
    """Show one worker's sites and most recent shifts."""
    cfg = _config(args)
    session = get_session(cfg.db_url, echo=cfg.echo)
    try:
        store = DataStore.load(SqlKeyValueStore(session))
        worker = store.worker_by_id(uuid.UUID(args.id))
        if worker is None:
            raise SystemExit(f"No worker with id {args.id}")

        print(f"{worker.name} - {worker.specialization} (${worker.hourly_rate:,.2f}/hr)")
        sites = store.sites_for_worker(worker)
        print("Sites: " + (", ".join(s.name for s in sites) if sites else "none"))
        for shift in recent_shifts_for_worker(store, worker.id, limit=cfg.recent_shift_limit):
            site = store.site_by_id(shift.site_id)
            site_name = site.name if site is not None else "Unknown"
            print(f"  {shift.date:%Y-%m-%d} {shift.hours:g}h at {site_name}")
    finally:
        session.close()


def _cmd_photo(args: argparse.Namespace) -> None:
    """Compress an image file and attach it to a site or worker."""
    cfg = _config(args)
    raw = Path(args.file).read_bytes()
    data = compress_image(raw, max_dim=cfg.image.max_dim, quality=cfg.image.jpeg_quality)
    print(f"[INFO] Compressed {args.file}: {len(raw)} -> {len(data)} bytes")

    session = get_session(cfg.db_url, echo=cfg.echo)
    try:
        store = DataStore.load(SqlKeyValueStore(session))
        if args.site:
            site = store.site_by_id(uuid.UUID(args.site))
            if site is None:
                raise SystemExit(f"No site with id {args.site}")
            site.image_data = data
            result = store.update_site(site)
        else:
            worker = store.worker_by_id(uuid.UUID(args.worker))
            if worker is None:
                raise SystemExit(f"No worker with id {args.worker}")
            worker.photo_data = data
            result = store.update_worker(worker)
        if not result:
            raise RuntimeError(f"could not persist {', '.join(result.failed_keys)}")
        print("[OK] Photo saved")
    except Exception as e:
        print(f"[ERROR] Photo update failed: {e}")
        raise
    finally:
        session.close()


def _cmd_reset(args: argparse.Namespace) -> None:
    """Delete all sites, workers, shifts, expenses and the profile."""
    if not args.yes:
        raise SystemExit("Refusing to delete all data without --yes")
    cfg = _config(args)
    session = get_session(cfg.db_url, echo=cfg.echo)
    try:
        store = DataStore.load(SqlKeyValueStore(session))
        result = store.reset_all_data()
        if not result:
            raise RuntimeError(f"could not persist {', '.join(result.failed_keys)}")
        print("[OK] All data deleted")
    except Exception as e:
        print(f"[ERROR] Reset failed: {e}")
        raise
    finally:
        session.close()


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="sitebook",
        description="Job sites, crews, shifts and budgets for small construction businesses",
    )

    # Global options
    parser.add_argument("--db", help="Database URL (default: sqlite:///sitebook.db)")
    parser.add_argument("--config", help="Path to config JSON/YAML")

    sub = parser.add_subparsers(dest="command", required=True)

    init = sub.add_parser("init-db", help="Initialize database")
    init.set_defaults(func=_cmd_init_db)

    seed = sub.add_parser("seed-demo", help="Add the demo portfolio")
    seed.set_defaults(func=_cmd_seed_demo)

    summ = sub.add_parser("summary", help="Print budget summary")
    summ.set_defaults(func=_cmd_summary)

    exp = sub.add_parser("export", help="Export data to CSV files")
    exp.add_argument("--out-dir", required=True, help="Directory for the CSV files")
    exp.set_defaults(func=_cmd_export)

    imp = sub.add_parser("import", help="Import CSV data")
    imp.add_argument("--workers", help="Path to workers CSV")
    imp.add_argument("--expenses", help="Path to expenses CSV")
    imp.set_defaults(func=_cmd_import)

    prof = sub.add_parser("profile", help="Show or update the owner profile")
    prof.add_argument("--name", help="Owner name")
    prof.add_argument("--company", help="Company name")
    prof.set_defaults(func=_cmd_profile)

    wrk = sub.add_parser("worker", help="Show a worker's sites and recent shifts")
    wrk.add_argument("--id", required=True, help="Worker id")
    wrk.set_defaults(func=_cmd_worker)

    photo = sub.add_parser("photo", help="Attach a compressed photo to a site or worker")
    target = photo.add_mutually_exclusive_group(required=True)
    target.add_argument("--site", help="Site id")
    target.add_argument("--worker", help="Worker id")
    photo.add_argument("--file", required=True, help="Image file")
    photo.set_defaults(func=_cmd_photo)

    reset = sub.add_parser("reset", help="Delete all data")
    reset.add_argument("--yes", action="store_true", help="Confirm deletion")
    reset.set_defaults(func=_cmd_reset)

    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
