"""Domain entities for job sites, crews, shifts and expenses."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional
from uuid import UUID


def _new_id() -> UUID:
    return uuid.uuid4()


def as_datetime(value: date | datetime) -> datetime:
    """Promote a calendar date to local midnight; datetimes pass through."""
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)


@dataclass
class Site:
    """Construction project with a budget, deadline and assigned workers."""

    id: Optional[UUID] = field(default_factory=_new_id)
    name: str = ""
    image_data: Optional[bytes] = None
    deadline: datetime = field(default_factory=datetime.now)
    budget: float = 0.0
    # Assignment order; duplicates are not prevented
    worker_ids: List[UUID] = field(default_factory=list)

    def __post_init__(self):
        self.deadline = as_datetime(self.deadline)

    def __repr__(self) -> str:
        return f"<Site(id={self.id}, name='{self.name}', budget={self.budget})>"


@dataclass
class Worker:
    """Laborer with an hourly billing rate."""

    id: Optional[UUID] = field(default_factory=_new_id)
    name: str = ""
    specialization: str = ""
    education: str = ""
    experience: str = ""
    hourly_rate: float = 0.0
    photo_data: Optional[bytes] = None

    def __repr__(self) -> str:
        return f"<Worker(id={self.id}, name='{self.name}', rate={self.hourly_rate})>"


@dataclass
class Shift:
    """One worker's recorded hours on one site on one date."""

    worker_id: UUID
    site_id: UUID
    id: Optional[UUID] = field(default_factory=_new_id)
    date: datetime = field(default_factory=datetime.now)
    hours: float = 8.0

    def __post_init__(self):
        self.date = as_datetime(self.date)

    def __repr__(self) -> str:
        return f"<Shift(id={self.id}, worker={self.worker_id}, site={self.site_id}, hours={self.hours})>"


@dataclass
class Expense:
    """Material or other non-labor cost attributed to a site."""

    site_id: UUID
    id: Optional[UUID] = field(default_factory=_new_id)
    title: str = ""
    amount: float = 0.0
    date: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        self.date = as_datetime(self.date)

    def __repr__(self) -> str:
        return f"<Expense(id={self.id}, site={self.site_id}, title='{self.title}', amount={self.amount})>"


@dataclass
class Profile:
    """Owner profile (singleton)."""

    name: str = ""
    company: str = ""
