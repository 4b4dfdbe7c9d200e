"""Reservation status state machine"""

import enum
from typing import Dict, FrozenSet, Union

from app.services.errors import InvalidStatusError, TerminalStateError, TransitionError


class ReservationStatus(str, enum.Enum):
    """Lifecycle states of a reservation"""
    BOOKED = "booked"
    SEATED = "seated"
    FINISHED = "finished"
    CANCELLED = "cancelled"


INITIAL_STATUS = ReservationStatus.BOOKED

TERMINAL_STATUSES: FrozenSet[ReservationStatus] = frozenset(
    {ReservationStatus.FINISHED, ReservationStatus.CANCELLED}
)

# Statuses left off the date listing
INACTIVE_STATUSES: FrozenSet[ReservationStatus] = TERMINAL_STATUSES

TRANSITIONS: Dict[ReservationStatus, FrozenSet[ReservationStatus]] = {
    ReservationStatus.BOOKED: frozenset({ReservationStatus.SEATED, ReservationStatus.CANCELLED}),
    ReservationStatus.SEATED: frozenset({ReservationStatus.FINISHED, ReservationStatus.CANCELLED}),
    ReservationStatus.FINISHED: frozenset(),
    ReservationStatus.CANCELLED: frozenset(),
}


def parse_status(value: Union[str, ReservationStatus]) -> ReservationStatus:
    """Coerce a submitted status value, raising InvalidStatusError if unknown"""
    if isinstance(value, ReservationStatus):
        return value
    try:
        return ReservationStatus(value)
    except ValueError:
        raise InvalidStatusError(f"Can not update unknown status: {value!r}")


def check_transition(
    current: Union[str, ReservationStatus],
    target: Union[str, ReservationStatus],
) -> ReservationStatus:
    """Validate a status change and return the parsed target.

    A finished reservation rejects every request, including ones with an
    unrecognized target, before the target is even looked at.
    """
    current = ReservationStatus(current)
    if current is ReservationStatus.FINISHED:
        raise TerminalStateError("a finished reservation cannot be updated")

    target = parse_status(target)
    if target is ReservationStatus.BOOKED:
        raise TransitionError("a reservation can only be booked when it is created")
    if current is ReservationStatus.CANCELLED:
        raise TerminalStateError("a cancelled reservation cannot be updated")
    if target not in TRANSITIONS[current]:
        raise TransitionError(
            f"cannot change reservation status from {current.value} to {target.value}"
        )
    return target
