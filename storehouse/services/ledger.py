"""
Movement ledger: append-only history of every state change.

Entries are written by the position grid and the kanban queue inside the same
unit of work as the change they describe. Nothing here updates or deletes an
entry.
"""

import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from storehouse.exceptions import InvariantViolation, ValidationFailure
from storehouse.models.movement import MovementHistory, MovementType
from storehouse.schemas.movement import MovementFilter
from storehouse.storage.base import Storage
from storehouse.validators import validate_payload

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("timestamp", "movement_type", "product_name", "product_code", "quantity", "location")
OPTIONAL_FIELDS = ("client_name", "previous_location", "details")

# Date-only bounds are widened by a day on each side so entries stamped in a
# different UTC offset than the caller's calendar still fall inside.
RANGE_PADDING = timedelta(days=1)

SEARCHABLE_FIELDS = ("product_name", "product_code", "client_name", "location", "previous_location", "details")

EXPORT_HEADERS = [
    "id", "timestamp", "movement_type", "product_name", "product_code", "client_name",
    "quantity", "location", "previous_location", "details"
]

DateBound = Union[date, str]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_date_bound(value: DateBound, field: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ValidationFailure.single(field, f"{field} must be a date in YYYY-MM-DD format")


def history_window(start: DateBound, end: DateBound) -> Tuple[datetime, datetime]:
    """Inclusive UTC bounds for a date-only range, padded by a day on both ends."""
    start_date = parse_date_bound(start, "start_date")
    end_date = parse_date_bound(end, "end_date")
    if start_date > end_date:
        raise ValidationFailure.single("start_date", "start_date cannot be after end_date")

    lower = datetime.combine(start_date, time.min, tzinfo=timezone.utc) - RANGE_PADDING
    upper = datetime.combine(end_date, time(23, 59, 59, 999000), tzinfo=timezone.utc) + RANGE_PADDING
    return lower, upper


class MovementLedger:

    def __init__(self, storage: Storage):
        self.storage = storage

    def append(self, **entry: Any) -> MovementHistory:
        """
        Store one history entry verbatim and return it with its new id.

        The caller supplies the timestamp and every descriptive field; an entry
        missing any required field is a programming error, not a bad request.
        """
        unknown = set(entry) - set(REQUIRED_FIELDS) - set(OPTIONAL_FIELDS)
        if unknown:
            raise InvariantViolation("Unknown movement history fields", fields=sorted(unknown))

        missing = [f for f in REQUIRED_FIELDS if entry.get(f) is None or entry.get(f) == ""]
        if missing:
            raise InvariantViolation("Movement history entry is incomplete", missing=missing)

        if not isinstance(entry["timestamp"], datetime):
            raise InvariantViolation("Movement timestamp must be a datetime", timestamp=entry["timestamp"])

        try:
            movement_type = MovementType(entry["movement_type"])
        except ValueError:
            raise InvariantViolation("Unknown movement type", movement_type=entry["movement_type"])

        values: Dict[str, Any] = {f: entry.get(f) for f in REQUIRED_FIELDS + OPTIONAL_FIELDS}
        values["timestamp"] = as_utc(entry["timestamp"])
        values["movement_type"] = movement_type

        movement = self.storage.insert_movement(values)
        logger.debug(f"Appended {movement_type.value} movement for '{values['product_code']}' at {values['location']}")
        return movement

    def list_all(self) -> List[MovementHistory]:
        return self.storage.list_movements()

    def list_by_range(self, start: DateBound, end: DateBound) -> List[MovementHistory]:
        lower, upper = history_window(start, end)
        return self.storage.list_movements(start=lower, end=upper)

    def search(self, filters: Optional[Union[MovementFilter, Dict[str, Any]]] = None) -> List[MovementHistory]:
        """History filtered by date window, movement types and a free-text term."""
        filters = validate_payload(MovementFilter, filters, partial=True)

        if (filters.start_date is None) != (filters.end_date is None):
            missing = "end_date" if filters.end_date is None else "start_date"
            raise ValidationFailure.single(missing, "start_date and end_date must be given together")

        if filters.start_date is not None:
            entries = self.list_by_range(filters.start_date, filters.end_date)
        else:
            entries = self.list_all()

        if filters.movement_types:
            wanted = set(filters.movement_types)
            entries = [e for e in entries if MovementType(e.movement_type) in wanted]

        term = (filters.search or "").strip().lower()
        if term:
            entries = [e for e in entries if _matches(e, term)]

        return entries

    def export_rows(self, filters: Optional[Union[MovementFilter, Dict[str, Any]]] = None) -> List[Dict[str, Any]]:
        rows: List[Dict[str, Any]] = []
        for entry in self.search(filters):
            rows.append({
                "id": entry.id,
                "timestamp": as_utc(entry.timestamp).isoformat(),
                "movement_type": MovementType(entry.movement_type).value,
                "product_name": entry.product_name,
                "product_code": entry.product_code,
                "client_name": entry.client_name or "",
                "quantity": entry.quantity,
                "location": entry.location,
                "previous_location": entry.previous_location or "",
                "details": entry.details or "",
            })
        return rows


def _matches(entry: MovementHistory, term: str) -> bool:
    return any(term in (getattr(entry, f) or "").lower() for f in SEARCHABLE_FIELDS)


def describe_changes(before: Dict[str, Any], after: Dict[str, Any], fields: Iterable[str]) -> Optional[str]:
    changed = [f.replace("_", " ") for f in fields if before.get(f) != after.get(f)]
    if not changed:
        return None
    return "Changed: " + ", ".join(changed)
