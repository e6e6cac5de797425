"""DataStore: the single source of truth for sites, workers, shifts and expenses."""

from __future__ import annotations

import copy
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from . import codec
from .codec import CodecError
from .kvstore import KeyValueStore
from .models import Expense, Profile, Shift, Site, Worker

SITES_KEY = "sites"
WORKERS_KEY = "workers"
SHIFTS_KEY = "shifts"
EXPENSES_KEY = "expenses"
PROFILE_KEY = "profile"
ONBOARDING_KEY = "hasSeenOnboarding"

COLLECTION_KEYS = (SITES_KEY, WORKERS_KEY, SHIFTS_KEY, EXPENSES_KEY)

# Failures that degrade to a logged warning instead of propagating
_STORAGE_ERRORS = (CodecError, SQLAlchemyError, OSError)


@dataclass
class SaveResult:
    """Outcome of persisting one or more keys; truthy when every write succeeded."""

    saved_keys: List[str] = field(default_factory=list)
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def failed_keys(self) -> List[str]:
        return list(self.errors)

    def __bool__(self) -> bool:
        return self.ok

    def merge(self, other: "SaveResult") -> "SaveResult":
        for key in other.saved_keys:
            if key not in self.saved_keys:
                self.saved_keys.append(key)
        self.errors.update(other.errors)
        return self


def _local_day(value: date | datetime) -> date:
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    return value


def _entity_id(entity_or_id) -> Optional[UUID]:
    if isinstance(entity_or_id, UUID):
        return entity_or_id
    return entity_or_id.id


def _replace_by_id(items: list, entity) -> Optional[list]:
    """Return a copy of ``items`` with the first record matching ``entity.id`` replaced."""
    for index, existing in enumerate(items):
        if existing.id == entity.id:
            updated = list(items)
            updated[index] = copy.deepcopy(entity)
            return updated
    return None


class DataStore:
    """
    In-memory repository flushed to a key-value store on every mutation.

    Records have value semantics: the store keeps private copies and every
    getter returns copies, so changes only land through add/update/delete.
    Persistence failures never raise; they are reported through SaveResult
    and the in-memory state stays authoritative for the session.
    """

    def __init__(
        self,
        kv: KeyValueStore,
        sites: List[Site] | None = None,
        workers: List[Worker] | None = None,
        shifts: List[Shift] | None = None,
        expenses: List[Expense] | None = None,
        profile: Profile | None = None,
        has_seen_onboarding: bool = False,
    ):
        self.kv = kv
        self._sites: List[Site] = list(sites or [])
        self._workers: List[Worker] = list(workers or [])
        self._shifts: List[Shift] = list(shifts or [])
        self._expenses: List[Expense] = list(expenses or [])
        self._profile: Profile = profile or Profile()
        self._has_seen_onboarding = bool(has_seen_onboarding)

    @classmethod
    def load(cls, kv: KeyValueStore) -> "DataStore":
        """Build a store from persisted state; unreadable or missing keys fall back to defaults."""
        collections = {key: cls._load_collection(kv, key) for key in COLLECTION_KEYS}

        profile = Profile()
        payload = cls._read(kv, PROFILE_KEY)
        if payload is not None:
            try:
                profile = codec.decode_profile(payload)
            except CodecError as e:
                print(f"[WARN] Could not decode '{PROFILE_KEY}', using default: {e}")

        seen = False
        payload = cls._read(kv, ONBOARDING_KEY)
        if payload is not None:
            try:
                seen = codec.decode_flag(payload)
            except CodecError as e:
                print(f"[WARN] Could not decode '{ONBOARDING_KEY}', using default: {e}")

        return cls(
            kv,
            sites=collections[SITES_KEY],
            workers=collections[WORKERS_KEY],
            shifts=collections[SHIFTS_KEY],
            expenses=collections[EXPENSES_KEY],
            profile=profile,
            has_seen_onboarding=seen,
        )

    @staticmethod
    def _read(kv: KeyValueStore, key: str) -> Optional[str]:
        try:
            return kv.get(key)
        except _STORAGE_ERRORS as e:
            print(f"[WARN] Could not read '{key}', using default: {e}")
            return None

    @classmethod
    def _load_collection(cls, kv: KeyValueStore, key: str) -> list:
        payload = cls._read(kv, key)
        if payload is None:
            return []
        try:
            return codec.decode_collection(key, payload)
        except CodecError as e:
            print(f"[WARN] Could not decode '{key}', using empty collection: {e}")
            return []

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _encode(self, key: str) -> str:
        if key == SITES_KEY:
            return codec.encode_collection(key, self._sites)
        if key == WORKERS_KEY:
            return codec.encode_collection(key, self._workers)
        if key == SHIFTS_KEY:
            return codec.encode_collection(key, self._shifts)
        if key == EXPENSES_KEY:
            return codec.encode_collection(key, self._expenses)
        if key == PROFILE_KEY:
            return codec.encode_profile(self._profile)
        if key == ONBOARDING_KEY:
            return codec.encode_flag(self._has_seen_onboarding)
        raise KeyError(key)

    def _persist(self, *keys: str) -> SaveResult:
        result = SaveResult()
        for key in keys:
            try:
                self.kv.set(key, self._encode(key))
            except _STORAGE_ERRORS as e:
                print(f"[WARN] Failed to persist '{key}': {e}")
                result.errors[key] = str(e)
            else:
                result.saved_keys.append(key)
        return result

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    @property
    def sites(self) -> List[Site]:
        return copy.deepcopy(self._sites)

    @property
    def workers(self) -> List[Worker]:
        return copy.deepcopy(self._workers)

    @property
    def shifts(self) -> List[Shift]:
        return copy.deepcopy(self._shifts)

    @property
    def expenses(self) -> List[Expense]:
        return copy.deepcopy(self._expenses)

    # ------------------------------------------------------------------
    # Sites
    # ------------------------------------------------------------------

    def add_site(self, site: Site) -> SaveResult:
        if site.id is None:
            site.id = uuid.uuid4()
        self._sites = self._sites + [copy.deepcopy(site)]
        return self._persist(SITES_KEY)

    def update_site(self, site: Site) -> SaveResult:
        updated = _replace_by_id(self._sites, site)
        if updated is None:
            return SaveResult()
        self._sites = updated
        return self._persist(SITES_KEY)

    def delete_site(self, site: Site | UUID) -> SaveResult:
        """Remove a site together with every shift and expense recorded against it."""
        site_id = _entity_id(site)
        self._sites = [s for s in self._sites if s.id != site_id]
        self._shifts = [s for s in self._shifts if s.site_id != site_id]
        self._expenses = [e for e in self._expenses if e.site_id != site_id]
        return self._persist(SITES_KEY, SHIFTS_KEY, EXPENSES_KEY)

    def site_by_id(self, site_id: UUID) -> Optional[Site]:
        site = self._find_site(site_id)
        return None if site is None else copy.deepcopy(site)

    def _find_site(self, site_id: UUID) -> Optional[Site]:
        return next((s for s in self._sites if s.id == site_id), None)

    # ------------------------------------------------------------------
    # Workers
    # ------------------------------------------------------------------

    def add_worker(self, worker: Worker) -> SaveResult:
        if worker.id is None:
            worker.id = uuid.uuid4()
        self._workers = self._workers + [copy.deepcopy(worker)]
        return self._persist(WORKERS_KEY)

    def update_worker(self, worker: Worker) -> SaveResult:
        updated = _replace_by_id(self._workers, worker)
        if updated is None:
            return SaveResult()
        self._workers = updated
        return self._persist(WORKERS_KEY)

    def delete_worker(self, worker: Worker | UUID) -> SaveResult:
        """Remove a worker, their shifts, and their id from every site's crew list."""
        worker_id = _entity_id(worker)
        self._workers = [w for w in self._workers if w.id != worker_id]
        self._shifts = [s for s in self._shifts if s.worker_id != worker_id]
        sites = []
        for site in self._sites:
            if worker_id in site.worker_ids:
                site = copy.deepcopy(site)
                site.worker_ids = [wid for wid in site.worker_ids if wid != worker_id]
            sites.append(site)
        self._sites = sites
        return self._persist(WORKERS_KEY, SHIFTS_KEY, SITES_KEY)

    def worker_by_id(self, worker_id: UUID) -> Optional[Worker]:
        worker = self._find_worker(worker_id)
        return None if worker is None else copy.deepcopy(worker)

    def _find_worker(self, worker_id: UUID) -> Optional[Worker]:
        return next((w for w in self._workers if w.id == worker_id), None)

    # ------------------------------------------------------------------
    # Shifts
    # ------------------------------------------------------------------

    def add_shift(self, shift: Shift) -> SaveResult:
        if shift.id is None:
            shift.id = uuid.uuid4()
        self._shifts = self._shifts + [copy.deepcopy(shift)]
        return self._persist(SHIFTS_KEY)

    def update_shift(self, shift: Shift) -> SaveResult:
        updated = _replace_by_id(self._shifts, shift)
        if updated is None:
            return SaveResult()
        self._shifts = updated
        return self._persist(SHIFTS_KEY)

    def delete_shift(self, shift: Shift | UUID) -> SaveResult:
        shift_id = _entity_id(shift)
        self._shifts = [s for s in self._shifts if s.id != shift_id]
        return self._persist(SHIFTS_KEY)

    def shift_by_id(self, shift_id: UUID) -> Optional[Shift]:
        shift = next((s for s in self._shifts if s.id == shift_id), None)
        return None if shift is None else copy.deepcopy(shift)

    def shifts_for_site(self, site_id: UUID) -> List[Shift]:
        return [copy.deepcopy(s) for s in self._shifts if s.site_id == site_id]

    def shifts_for_worker(self, worker_id: UUID) -> List[Shift]:
        return [copy.deepcopy(s) for s in self._shifts if s.worker_id == worker_id]

    def shifts_on_date(self, day: date | datetime) -> List[Shift]:
        """Shifts falling on the same local calendar day as ``day``."""
        target = _local_day(day)
        return [copy.deepcopy(s) for s in self._shifts if _local_day(s.date) == target]

    # ------------------------------------------------------------------
    # Expenses
    # ------------------------------------------------------------------

    def add_expense(self, expense: Expense) -> SaveResult:
        if expense.id is None:
            expense.id = uuid.uuid4()
        self._expenses = self._expenses + [copy.deepcopy(expense)]
        return self._persist(EXPENSES_KEY)

    def update_expense(self, expense: Expense) -> SaveResult:
        updated = _replace_by_id(self._expenses, expense)
        if updated is None:
            return SaveResult()
        self._expenses = updated
        return self._persist(EXPENSES_KEY)

    def delete_expense(self, expense: Expense | UUID) -> SaveResult:
        expense_id = _entity_id(expense)
        self._expenses = [e for e in self._expenses if e.id != expense_id]
        return self._persist(EXPENSES_KEY)

    def expense_by_id(self, expense_id: UUID) -> Optional[Expense]:
        expense = next((e for e in self._expenses if e.id == expense_id), None)
        return None if expense is None else copy.deepcopy(expense)

    def expenses_for_site(self, site_id: UUID) -> List[Expense]:
        return [copy.deepcopy(e) for e in self._expenses if e.site_id == site_id]

    # ------------------------------------------------------------------
    # Cross-collection lookups
    # ------------------------------------------------------------------

    def workers_for_site(self, site: Site) -> List[Worker]:
        """Resolve a site's crew in assignment order, skipping ids that no longer exist."""
        workers = []
        for worker_id in site.worker_ids:
            worker = self._find_worker(worker_id)
            if worker is not None:
                workers.append(copy.deepcopy(worker))
        return workers

    def sites_for_worker(self, worker: Worker) -> List[Site]:
        return [copy.deepcopy(s) for s in self._sites if worker.id in s.worker_ids]

    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------

    def total_expenses_for_site(self, site_id: UUID) -> float:
        return sum((e.amount for e in self._expenses if e.site_id == site_id), 0.0)

    def total_labor_cost_for_site(self, site_id: UUID) -> float:
        """Hours times each worker's current rate; shifts of deleted workers cost nothing."""
        rates: Dict[UUID, float] = {}
        for worker in self._workers:
            rates.setdefault(worker.id, worker.hourly_rate)
        return sum(
            (s.hours * rates.get(s.worker_id, 0.0) for s in self._shifts if s.site_id == site_id),
            0.0,
        )

    def total_spent_for_site(self, site_id: UUID) -> float:
        return self.total_expenses_for_site(site_id) + self.total_labor_cost_for_site(site_id)

    def remaining_budget_for_site(self, site_id: UUID) -> float:
        site = self._find_site(site_id)
        if site is None:
            return 0.0
        return site.budget - self.total_spent_for_site(site_id)

    @property
    def total_budget(self) -> float:
        return sum((s.budget for s in self._sites), 0.0)

    @property
    def total_spent(self) -> float:
        return sum((self.total_spent_for_site(s.id) for s in self._sites), 0.0)

    @property
    def total_remaining(self) -> float:
        return self.total_budget - self.total_spent

    # ------------------------------------------------------------------
    # Profile and onboarding
    # ------------------------------------------------------------------

    @property
    def profile(self) -> Profile:
        return copy.deepcopy(self._profile)

    def update_profile(self, profile: Profile) -> SaveResult:
        self._profile = copy.deepcopy(profile)
        return self._persist(PROFILE_KEY)

    @property
    def has_seen_onboarding(self) -> bool:
        return self._has_seen_onboarding

    def complete_onboarding(self) -> SaveResult:
        """Mark the first-run experience as seen (completed or skipped)."""
        self._has_seen_onboarding = True
        return self._persist(ONBOARDING_KEY)

    def reset_all_data(self) -> SaveResult:
        """Clear every collection, the profile and the onboarding flag."""
        self._sites = []
        self._workers = []
        self._shifts = []
        self._expenses = []
        self._profile = Profile()
        self._has_seen_onboarding = False
        return self._persist(*COLLECTION_KEYS, PROFILE_KEY, ONBOARDING_KEY)
