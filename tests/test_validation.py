"""Tests for structural validation of submitted fields"""

from datetime import date, time
from uuid import uuid4

import pytest

from app.services.errors import ValidationError
from app.services.validation import (
    check_body_id,
    require_data,
    validate_reservation_fields,
    validate_seat_request,
    validate_status_request,
    validate_table_fields,
)
from conftest import WEDNESDAY, reservation_fields


def test_valid_reservation_is_parsed():
    cleaned = validate_reservation_fields(reservation_fields())
    
    assert cleaned["reservation_date"] == WEDNESDAY
    assert cleaned["reservation_time"] == time(18, 0)
    assert cleaned["people"] == 4


def test_storage_fields_are_accepted_and_dropped():
    cleaned = validate_reservation_fields(
        reservation_fields(created_at="2030-01-01T00:00:00", updated_at="2030-01-01T00:00:00")
    )
    
    assert "created_at" not in cleaned
    assert "updated_at" not in cleaned


def test_unknown_field_rejected():
    with pytest.raises(ValidationError) as exc_info:
        validate_reservation_fields(reservation_fields(favorite_color="blue"))
    
    assert exc_info.value.kind == "UnknownField"
    assert "favorite_color" in exc_info.value.reason


@pytest.mark.parametrize(
    "missing",
    ["first_name", "last_name", "mobile_number", "reservation_date", "reservation_time", "people"],
)
def test_missing_required_field_rejected(missing):
    fields = reservation_fields()
    del fields[missing]
    
    with pytest.raises(ValidationError) as exc_info:
        validate_reservation_fields(fields)
    
    assert exc_info.value.kind == "MissingField"
    assert missing in exc_info.value.reason


def test_empty_string_counts_as_missing():
    with pytest.raises(ValidationError) as exc_info:
        validate_reservation_fields(reservation_fields(first_name=""))
    
    assert exc_info.value.kind == "MissingField"


@pytest.mark.parametrize("people", ["4", 0, -2, 2.5, True])
def test_people_must_be_positive_integer(people):
    with pytest.raises(ValidationError) as exc_info:
        validate_reservation_fields(reservation_fields(people=people))
    
    assert exc_info.value.kind == "MalformedValue"


@pytest.mark.parametrize("value", ["not-a-date", "2030-13-45", "2030-01-09T18:00"])
def test_reservation_date_must_be_a_date(value):
    with pytest.raises(ValidationError) as exc_info:
        validate_reservation_fields(reservation_fields(reservation_date=value))
    
    assert exc_info.value.kind == "MalformedValue"


@pytest.mark.parametrize("value", ["not-a-time", "6pm", "25:00"])
def test_reservation_time_must_be_a_time(value):
    with pytest.raises(ValidationError) as exc_info:
        validate_reservation_fields(reservation_fields(reservation_time=value))
    
    assert exc_info.value.kind == "MalformedValue"


def test_time_with_seconds_is_accepted():
    cleaned = validate_reservation_fields(reservation_fields(reservation_time="18:30:00"))
    
    assert cleaned["reservation_time"] == time(18, 30)


def test_valid_table():
    cleaned = validate_table_fields({"table_name": "Bar #1", "capacity": 1})
    
    assert cleaned == {"table_name": "Bar #1", "capacity": 1}


def test_table_name_too_short():
    with pytest.raises(ValidationError) as exc_info:
        validate_table_fields({"table_name": "A", "capacity": 4})
    
    assert exc_info.value.kind == "MalformedValue"


@pytest.mark.parametrize("capacity", [0, "4", None])
def test_table_capacity_must_be_at_least_one(capacity):
    with pytest.raises(ValidationError):
        validate_table_fields({"table_name": "Patio", "capacity": capacity})


def test_table_unknown_field():
    with pytest.raises(ValidationError) as exc_info:
        validate_table_fields({"table_name": "Patio", "capacity": 4, "shape": "round"})
    
    assert exc_info.value.kind == "UnknownField"


def test_missing_data_envelope():
    with pytest.raises(ValidationError) as exc_info:
        require_data(None)
    
    assert exc_info.value.kind == "MissingField"


def test_seat_request_requires_reservation_id():
    with pytest.raises(ValidationError) as exc_info:
        validate_seat_request({})
    
    assert exc_info.value.kind == "MissingField"


def test_seat_request_rejects_malformed_id():
    with pytest.raises(ValidationError) as exc_info:
        validate_seat_request({"reservation_id": "table-for-two"})
    
    assert exc_info.value.kind == "MalformedValue"


def test_seat_request_parses_id():
    reservation_id = uuid4()
    
    assert validate_seat_request({"reservation_id": str(reservation_id)}) == reservation_id


def test_status_request_requires_status():
    with pytest.raises(ValidationError) as exc_info:
        validate_status_request({})
    
    assert exc_info.value.kind == "MissingField"


def test_body_id_must_match_path():
    with pytest.raises(ValidationError):
        check_body_id({"reservation_id": uuid4()}, uuid4())
