"""JSON record codec for persisted collections.

Each record is stored field-for-field under camelCase keys. Timestamps are
ISO-8601 strings, binary images are base64 strings and absent images are
``null``. Missing optional keys decode to the entity defaults.
"""

from __future__ import annotations

import base64
import binascii
import json
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional
from uuid import UUID

from .models import Expense, Profile, Shift, Site, Worker, as_datetime


class CodecError(ValueError):
    """Raised when a record cannot be encoded or decoded."""


def _encode_bytes(value: Optional[bytes]) -> Optional[str]:
    if value is None:
        return None
    return base64.b64encode(value).decode("ascii")


def _decode_bytes(value: Any) -> Optional[bytes]:
    if value is None:
        return None
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, TypeError) as e:
        raise CodecError(f"Invalid image payload: {e}") from e


def _encode_time(value: date | datetime) -> str:
    return as_datetime(value).isoformat()


def _decode_time(value: Any) -> datetime:
    if not isinstance(value, str):
        raise CodecError(f"Timestamp must be a string, got {type(value).__name__}")
    return datetime.fromisoformat(value)


def _decode_id(value: Any) -> UUID:
    if not isinstance(value, str):
        raise CodecError(f"Identifier must be a string, got {type(value).__name__}")
    return UUID(value)


def site_to_dict(site: Site) -> Dict[str, Any]:
    return {
        "id": str(site.id),
        "name": site.name,
        "imageData": _encode_bytes(site.image_data),
        "deadline": _encode_time(site.deadline),
        "budget": float(site.budget),
        "workerIds": [str(wid) for wid in site.worker_ids],
    }


def site_from_dict(data: Dict[str, Any]) -> Site:
    site = Site(id=_decode_id(data["id"]))
    site.name = str(data.get("name", ""))
    site.image_data = _decode_bytes(data.get("imageData"))
    if "deadline" in data:
        site.deadline = _decode_time(data["deadline"])
    site.budget = float(data.get("budget", 0.0))
    site.worker_ids = [_decode_id(wid) for wid in data.get("workerIds", [])]
    return site


def worker_to_dict(worker: Worker) -> Dict[str, Any]:
    return {
        "id": str(worker.id),
        "name": worker.name,
        "specialization": worker.specialization,
        "education": worker.education,
        "experience": worker.experience,
        "hourlyRate": float(worker.hourly_rate),
        "photoData": _encode_bytes(worker.photo_data),
    }


def worker_from_dict(data: Dict[str, Any]) -> Worker:
    return Worker(
        id=_decode_id(data["id"]),
        name=str(data.get("name", "")),
        specialization=str(data.get("specialization", "")),
        education=str(data.get("education", "")),
        experience=str(data.get("experience", "")),
        hourly_rate=float(data.get("hourlyRate", 0.0)),
        photo_data=_decode_bytes(data.get("photoData")),
    )


def shift_to_dict(shift: Shift) -> Dict[str, Any]:
    return {
        "id": str(shift.id),
        "workerId": str(shift.worker_id),
        "siteId": str(shift.site_id),
        "date": _encode_time(shift.date),
        "hours": float(shift.hours),
    }


def shift_from_dict(data: Dict[str, Any]) -> Shift:
    shift = Shift(
        id=_decode_id(data["id"]),
        worker_id=_decode_id(data["workerId"]),
        site_id=_decode_id(data["siteId"]),
        hours=float(data.get("hours", 8.0)),
    )
    if "date" in data:
        shift.date = _decode_time(data["date"])
    return shift


def expense_to_dict(expense: Expense) -> Dict[str, Any]:
    return {
        "id": str(expense.id),
        "siteId": str(expense.site_id),
        "title": expense.title,
        "amount": float(expense.amount),
        "date": _encode_time(expense.date),
    }


def expense_from_dict(data: Dict[str, Any]) -> Expense:
    expense = Expense(
        id=_decode_id(data["id"]),
        site_id=_decode_id(data["siteId"]),
        title=str(data.get("title", "")),
        amount=float(data.get("amount", 0.0)),
    )
    if "date" in data:
        expense.date = _decode_time(data["date"])
    return expense


def profile_to_dict(profile: Profile) -> Dict[str, Any]:
    return {"name": profile.name, "company": profile.company}


def profile_from_dict(data: Dict[str, Any]) -> Profile:
    return Profile(name=str(data.get("name", "")), company=str(data.get("company", "")))


_RECORD_CODECS: Dict[str, tuple[Callable[[Any], Dict[str, Any]], Callable[[Dict[str, Any]], Any]]] = {
    "sites": (site_to_dict, site_from_dict),
    "workers": (worker_to_dict, worker_from_dict),
    "shifts": (shift_to_dict, shift_from_dict),
    "expenses": (expense_to_dict, expense_from_dict),
}


def encode_collection(key: str, records: List[Any]) -> str:
    """Serialize a whole collection for storage under ``key``."""
    to_dict, _ = _RECORD_CODECS[key]
    try:
        return json.dumps([to_dict(record) for record in records])
    except (AttributeError, TypeError, ValueError) as e:
        raise CodecError(f"Cannot encode '{key}': {e}") from e


def decode_collection(key: str, payload: str) -> List[Any]:
    """Parse a stored collection; raises CodecError on any malformed content."""
    _, from_dict = _RECORD_CODECS[key]
    try:
        data = json.loads(payload)
        if not isinstance(data, list):
            raise CodecError(f"'{key}' payload is not a list")
        return [from_dict(item) for item in data]
    except CodecError:
        raise
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise CodecError(f"Cannot decode '{key}': {e}") from e


def encode_profile(profile: Profile) -> str:
    try:
        return json.dumps(profile_to_dict(profile))
    except (AttributeError, TypeError, ValueError) as e:
        raise CodecError(f"Cannot encode profile: {e}") from e


def decode_profile(payload: str) -> Profile:
    try:
        data = json.loads(payload)
        if not isinstance(data, dict):
            raise CodecError("profile payload is not an object")
        return profile_from_dict(data)
    except CodecError:
        raise
    except (TypeError, ValueError) as e:
        raise CodecError(f"Cannot decode profile: {e}") from e


def encode_flag(value: bool) -> str:
    return "true" if value else "false"


def decode_flag(payload: str) -> bool:
    text = payload.strip().lower()
    if text in ("true", "1", "yes"):
        return True
    if text in ("false", "0", "no", ""):
        return False
    raise CodecError(f"Invalid flag value: {payload!r}")
