"""Tests for booking and seating rules"""

from datetime import datetime, time, timedelta
from types import SimpleNamespace

import pytest

from app.services.errors import InvalidStatusError, RuleError, TransitionError
from app.services.rules import (
    RestaurantPolicy,
    check_assignment,
    check_future,
    check_initial_status,
    check_new_table,
    check_open_day,
    check_operating_hours,
    check_reservation_rules,
    check_status_guard,
    check_update_allowed,
)
from conftest import LAST_SUNDAY, MONDAY, NOW, TUESDAY, WEDNESDAY


def test_future_reservation_allowed():
    check_future(WEDNESDAY, time(18, 0), NOW)


def test_past_day_rejected():
    with pytest.raises(RuleError):
        check_future(LAST_SUNDAY, time(18, 0), NOW)


def test_earlier_hour_today_rejected():
    with pytest.raises(RuleError):
        check_future(MONDAY, time(11, 59), NOW)


def test_earlier_minute_in_current_hour_allowed():
    # Comparison stops at the hour: 12:05 against a 12:40 clock passes
    check_future(MONDAY, time(12, 5), datetime(2030, 1, 7, 12, 40))


def test_tuesday_closed():
    with pytest.raises(RuleError) as exc_info:
        check_open_day(TUESDAY, RestaurantPolicy())
    
    assert "Tuesday" in exc_info.value.reason


def test_closed_day_is_configurable():
    policy = RestaurantPolicy(closed_weekday=0)
    
    check_open_day(TUESDAY, policy)
    with pytest.raises(RuleError):
        check_open_day(MONDAY, policy)


@pytest.mark.parametrize("value", [time(10, 30), time(12, 0), time(21, 30)])
def test_within_operating_hours(value):
    check_operating_hours(value, RestaurantPolicy())


@pytest.mark.parametrize("value", [time(9, 0), time(10, 29), time(21, 31), time(22, 15), time(23, 0)])
def test_outside_operating_hours(value):
    with pytest.raises(RuleError):
        check_operating_hours(value, RestaurantPolicy())


def test_closing_buffer_moves_last_seating():
    policy = RestaurantPolicy(closing_buffer=timedelta(minutes=30))
    
    assert policy.last_seating_time == time(22, 0)
    check_operating_hours(time(21, 45), policy)


@pytest.mark.parametrize("status", ["seated", "finished"])
def test_status_guard_rejects_seated_and_finished(status):
    with pytest.raises(RuleError):
        check_status_guard(status)


@pytest.mark.parametrize("status", [None, "booked", "cancelled"])
def test_status_guard_allows_other_statuses(status):
    check_status_guard(status)


@pytest.mark.parametrize("status", ["seated", "finished"])
def test_booking_rules_reject_seated_or_finished(status):
    fields = {"reservation_date": WEDNESDAY, "reservation_time": time(18, 0), "status": status}
    
    with pytest.raises(RuleError):
        check_reservation_rules(fields, RestaurantPolicy(), NOW)


def test_new_reservation_must_start_booked():
    check_initial_status({"status": "booked"})
    check_initial_status({})
    with pytest.raises(RuleError):
        check_initial_status({"status": "cancelled"})
    with pytest.raises(InvalidStatusError):
        check_initial_status({"status": "waiting"})


def test_finished_reservation_cannot_be_updated():
    with pytest.raises(RuleError):
        check_update_allowed(SimpleNamespace(status="finished"), {})


def test_update_status_follows_state_machine():
    check_update_allowed(SimpleNamespace(status="booked"), {"status": "booked"})
    check_update_allowed(SimpleNamespace(status="booked"), {"status": "cancelled"})
    with pytest.raises(TransitionError):
        check_update_allowed(SimpleNamespace(status="cancelled"), {"status": "booked"})


def test_new_table_cannot_be_occupied():
    with pytest.raises(RuleError):
        check_new_table({"table_name": "T1", "capacity": 2, "reservation_id": "abc"})


def _table(capacity, reservation_id=None):
    return SimpleNamespace(capacity=capacity, reservation_id=reservation_id)


def _reservation(people, status="booked"):
    return SimpleNamespace(people=people, status=status)


@pytest.mark.parametrize("capacity,people", [(1, 2), (2, 4), (5, 6)])
def test_assignment_rejects_small_table(capacity, people):
    with pytest.raises(RuleError) as exc_info:
        check_assignment(_table(capacity), _reservation(people))
    
    assert "capacity" in exc_info.value.reason


@pytest.mark.parametrize("capacity,people", [(2, 2), (6, 4)])
def test_assignment_allows_big_enough_table(capacity, people):
    check_assignment(_table(capacity), _reservation(people))


def test_assignment_rejects_occupied_table():
    with pytest.raises(RuleError) as exc_info:
        check_assignment(_table(6, reservation_id="someone"), _reservation(2))
    
    assert "occupied" in exc_info.value.reason


@pytest.mark.parametrize("status", ["seated", "finished", "cancelled"])
def test_assignment_requires_booked_reservation(status):
    with pytest.raises(RuleError):
        check_assignment(_table(6), _reservation(2, status=status))


def test_policy_from_settings():
    from app.config import Settings
    
    settings = Settings(closed_weekday=0, closing_buffer_minutes=90, opening_time="11:00")
    policy = RestaurantPolicy.from_settings(settings)
    
    assert policy.closed_weekday == 0
    assert policy.opening_time == time(11, 0)
    assert policy.last_seating_time == time(21, 0)
