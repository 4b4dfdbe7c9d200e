"""Temporal, operational and occupancy rules.

Rules read the current state handed to them and raise ``RuleError`` on the
first violation. They never write.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, Callable, Mapping, Optional
from zoneinfo import ZoneInfo

from app.config import Settings
from app.services.errors import RuleError
from app.services.state_machine import ReservationStatus, check_transition, parse_status

WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

Clock = Callable[[], datetime]


@dataclass(frozen=True)
class RestaurantPolicy:
    """Operating rules for one restaurant"""
    closed_weekday: int = 1
    opening_time: time = time(10, 30)
    closing_time: time = time(22, 30)
    closing_buffer: timedelta = timedelta(minutes=60)
    timezone: str = "UTC"

    @classmethod
    def from_settings(cls, settings: Settings) -> "RestaurantPolicy":
        return cls(
            closed_weekday=settings.closed_weekday,
            opening_time=settings.opening_time,
            closing_time=settings.closing_time,
            closing_buffer=timedelta(minutes=settings.closing_buffer_minutes),
            timezone=settings.restaurant_timezone,
        )

    @property
    def last_seating_time(self) -> time:
        closing = datetime.combine(date.min, self.closing_time)
        return (closing - self.closing_buffer).time()

    def now(self) -> datetime:
        """Current wall-clock time at the restaurant, naive"""
        return datetime.now(ZoneInfo(self.timezone)).replace(tzinfo=None)


def _to_hour(moment: datetime) -> tuple:
    return (moment.year, moment.month, moment.day, moment.hour)


def check_future(reservation_date: date, reservation_time: time, now: datetime) -> None:
    """Reject bookings in the past.

    The comparison only looks at (year, month, day, hour): a booking earlier
    in the current hour is still accepted.
    """
    requested = datetime.combine(reservation_date, reservation_time)
    if _to_hour(requested) < _to_hour(now):
        raise RuleError("Reservations must be made in the future!")


def check_open_day(reservation_date: date, policy: RestaurantPolicy) -> None:
    if reservation_date.weekday() == policy.closed_weekday:
        raise RuleError(f"Sorry closed on {WEEKDAY_NAMES[policy.closed_weekday]}!")


def check_operating_hours(reservation_time: time, policy: RestaurantPolicy) -> None:
    if reservation_time < policy.opening_time or reservation_time > policy.last_seating_time:
        raise RuleError(
            "Sorry we are not open during this time. Reservations are taken "
            f"from {policy.opening_time:%H:%M} to {policy.last_seating_time:%H:%M}."
        )


def check_status_guard(status: Optional[str]) -> None:
    """Seated and finished are reached through seating and clearing only"""
    if status in (ReservationStatus.SEATED.value, ReservationStatus.FINISHED.value):
        raise RuleError("reservation has already been seated or is already finished")


def check_reservation_rules(
    fields: Mapping[str, Any],
    policy: RestaurantPolicy,
    now: datetime,
) -> None:
    """All booking rules for a create or full update, in order"""
    check_future(fields["reservation_date"], fields["reservation_time"], now)
    check_open_day(fields["reservation_date"], policy)
    check_operating_hours(fields["reservation_time"], policy)
    check_status_guard(fields.get("status"))


def check_update_allowed(current: Any, fields: Mapping[str, Any]) -> None:
    """A full update may not touch a finished reservation or skip the state machine"""
    if current.status == ReservationStatus.FINISHED.value:
        raise RuleError("a finished reservation cannot be updated")
    submitted = fields.get("status")
    if submitted is not None and submitted != current.status:
        check_transition(current.status, submitted)


def check_new_table(fields: Mapping[str, Any]) -> None:
    if fields.get("reservation_id") is not None:
        raise RuleError("a new table cannot be created occupied; seat a reservation instead")


def check_table_free(table: Any) -> None:
    if table.reservation_id is not None:
        raise RuleError("Table is occupied")


def check_seatable(reservation: Any) -> None:
    if reservation.status == ReservationStatus.SEATED.value:
        raise RuleError("Reservation is already seated.")
    if reservation.status != ReservationStatus.BOOKED.value:
        raise RuleError(f"Reservation is {reservation.status} and cannot be seated.")


def check_capacity(table: Any, reservation: Any) -> None:
    if table.capacity < reservation.people:
        raise RuleError("capacity of table is not large enough for reservation.")


def check_assignment(table: Any, reservation: Any) -> None:
    """Occupancy rules for seating a reservation at a table"""
    check_table_free(table)
    check_seatable(reservation)
    check_capacity(table, reservation)


def check_initial_status(fields: Mapping[str, Any]) -> None:
    """New reservations always start out booked"""
    status = fields.get("status")
    if status is None:
        return
    if parse_status(status) is not ReservationStatus.BOOKED:
        raise RuleError(f"a new reservation cannot start out {status}")
