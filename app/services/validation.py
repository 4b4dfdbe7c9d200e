"""Structural checks on submitted reservation and table fields.

Pure functions of their input: no persistence access, no clock. Each
validator returns a cleaned copy of the fields with dates, times and ids
parsed, or raises ``ValidationError`` with one of the kinds
``UnknownField``, ``MissingField`` or ``MalformedValue``.
"""

import re
from datetime import date, datetime, time
from typing import Any, Dict, Iterable, Mapping, Optional
from uuid import UUID

from app.services.errors import ValidationError

RESERVATION_FIELDS = (
    "reservation_id",
    "id",
    "first_name",
    "last_name",
    "mobile_number",
    "reservation_date",
    "reservation_time",
    "people",
    "status",
    "created_at",
    "updated_at",
)
RESERVATION_REQUIRED_FIELDS = (
    "first_name",
    "last_name",
    "mobile_number",
    "reservation_date",
    "reservation_time",
    "people",
)

TABLE_FIELDS = (
    "table_id",
    "id",
    "table_name",
    "capacity",
    "reservation_id",
    "created_at",
    "updated_at",
)
TABLE_REQUIRED_FIELDS = ("table_name", "capacity")

# Maintained by storage; accepted in a body, never written from it
STORAGE_FIELDS = frozenset({"id", "created_at", "updated_at"})

TIME_FORMATS = ("%H:%M", "%H:%M:%S")

_ALPHA = re.compile(r"[a-z]", re.IGNORECASE)


def check_known_fields(fields: Mapping[str, Any], known: Iterable[str]) -> None:
    known = set(known)
    unknown = [name for name in fields if name not in known]
    if unknown:
        raise ValidationError(
            f"Invalid Field(s): {', '.join(unknown)}",
            kind=ValidationError.UNKNOWN_FIELD,
        )


def check_required_fields(fields: Mapping[str, Any], required: Iterable[str]) -> None:
    for name in required:
        value = fields.get(name)
        if value is None or value == "":
            raise ValidationError(
                f"A '{name}' property is required.",
                kind=ValidationError.MISSING_FIELD,
            )


def require_data(data: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    """Unwrap the request ``data`` envelope"""
    if data is None:
        raise ValidationError(
            "Body must have a data property.",
            kind=ValidationError.MISSING_FIELD,
        )
    if not isinstance(data, Mapping):
        raise ValidationError("data must be an object")
    return data


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def parse_people(value: Any) -> int:
    if not _is_integer(value) or value < 1:
        raise ValidationError(f"people: {value!r} is not a valid number!")
    return value


def parse_reservation_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or _ALPHA.search(value):
        raise ValidationError(f"reservation_date: {value!r} is not a date!")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"reservation_date: {value!r} is not a date!")


def parse_reservation_time(value: Any) -> time:
    if isinstance(value, time):
        return value
    if not isinstance(value, str) or _ALPHA.search(value):
        raise ValidationError(f"reservation_time: {value!r} is not a valid time!")
    for fmt in TIME_FORMATS:
        try:
            return datetime.strptime(value, fmt).time()
        except ValueError:
            continue
    raise ValidationError(f"reservation_time: {value!r} is not a valid time!")


def parse_uuid(name: str, value: Any) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        raise ValidationError(f"{name}: {value!r} is not a valid id")


def _check_text(fields: Dict[str, Any], names: Iterable[str]) -> None:
    for name in names:
        if not isinstance(fields[name], str) or not fields[name].strip():
            raise ValidationError(f"{name} must be a non-empty string")


def validate_reservation_fields(fields: Mapping[str, Any]) -> Dict[str, Any]:
    """Check a reservation body for create or full update"""
    check_known_fields(fields, RESERVATION_FIELDS)
    check_required_fields(fields, RESERVATION_REQUIRED_FIELDS)

    cleaned = {
        name: value for name, value in fields.items() if name not in STORAGE_FIELDS
    }
    _check_text(cleaned, ("first_name", "last_name", "mobile_number"))
    cleaned["people"] = parse_people(cleaned["people"])
    cleaned["reservation_date"] = parse_reservation_date(cleaned["reservation_date"])
    cleaned["reservation_time"] = parse_reservation_time(cleaned["reservation_time"])

    if cleaned.get("reservation_id") is not None:
        cleaned["reservation_id"] = parse_uuid("reservation_id", cleaned["reservation_id"])
    else:
        cleaned.pop("reservation_id", None)

    if "status" in cleaned and cleaned["status"] is None:
        del cleaned["status"]
    return cleaned


def validate_table_fields(fields: Mapping[str, Any]) -> Dict[str, Any]:
    """Check a new table body"""
    check_known_fields(fields, TABLE_FIELDS)
    check_required_fields(fields, TABLE_REQUIRED_FIELDS)

    cleaned = {
        name: value
        for name, value in fields.items()
        if name not in STORAGE_FIELDS and name != "table_id"
    }
    table_name = cleaned["table_name"]
    if not isinstance(table_name, str) or len(table_name) < 2:
        raise ValidationError("table_name must be at least 2 characters long")
    capacity = cleaned["capacity"]
    if not _is_integer(capacity) or capacity < 1:
        raise ValidationError("Table must have a capacity of at least 1.")

    if cleaned.get("reservation_id") is not None:
        cleaned["reservation_id"] = parse_uuid("reservation_id", cleaned["reservation_id"])
    return cleaned


def validate_seat_request(fields: Mapping[str, Any]) -> UUID:
    """Check a seating body and return the reservation id it names"""
    reservation_id = fields.get("reservation_id")
    if reservation_id is None or reservation_id == "":
        raise ValidationError(
            "reservation_id is missing.",
            kind=ValidationError.MISSING_FIELD,
        )
    return parse_uuid("reservation_id", reservation_id)


def validate_status_request(fields: Mapping[str, Any]) -> str:
    """Check a status-change body and return the submitted status"""
    status = fields.get("status")
    if status is None or status == "":
        raise ValidationError(
            "A 'status' property is required.",
            kind=ValidationError.MISSING_FIELD,
        )
    if not isinstance(status, str):
        raise ValidationError(f"status: {status!r} is not a valid status")
    return status


def check_body_id(fields: Mapping[str, Any], reservation_id: UUID) -> None:
    """A reservation_id in an update body must name the reservation being updated"""
    submitted = fields.get("reservation_id")
    if submitted is not None and submitted != reservation_id:
        raise ValidationError(
            f"reservation_id {submitted} does not match reservation {reservation_id}"
        )
