"""Reservation operations: create, list, search, read, update, change status"""

import re
from datetime import date
from functools import partial
from typing import Any, Mapping, Optional, Sequence, Union
from uuid import UUID

import structlog

from app.services.errors import NotFoundError, RuleError, TransitionError, ValidationError
from app.services.pipeline import Pipeline
from app.services.rules import (
    Clock,
    RestaurantPolicy,
    check_initial_status,
    check_reservation_rules,
    check_update_allowed,
)
from app.services.state_machine import INITIAL_STATUS, check_transition
from app.services.store import Store
from app.services.validation import (
    check_body_id,
    parse_reservation_date,
    validate_reservation_fields,
)

logger = structlog.get_logger()


def _record_values(cleaned: Mapping[str, Any]) -> dict:
    return {name: value for name, value in cleaned.items() if name != "reservation_id"}


class ReservationService:
    """Reservation lifecycle outside of seating and clearing"""

    def __init__(self, store: Store, policy: RestaurantPolicy, clock: Optional[Clock] = None):
        self.store = store
        self.policy = policy
        self.clock = clock or policy.now

    def _rules(self):
        return partial(check_reservation_rules, policy=self.policy, now=self.clock())

    async def create(self, fields: Mapping[str, Any]):
        cleaned = Pipeline(
            "create_reservation",
            [validate_reservation_fields, self._rules(), check_initial_status],
        ).run(fields).unwrap()

        values = _record_values(cleaned)
        values["status"] = INITIAL_STATUS.value
        reservation = await self.store.insert_reservation(values)

        logger.info(
            "Reservation created",
            reservation_id=str(reservation.id),
            reservation_date=str(reservation.reservation_date),
            people=reservation.people,
        )
        return reservation

    async def list_by_date(self, reservation_date: Union[date, str]) -> Sequence[Any]:
        """Active reservations for one day, earliest first"""
        return await self.store.list_reservations_by_date(parse_reservation_date(reservation_date))

    async def search_by_phone(self, fragment: str) -> Sequence[Any]:
        digits = re.sub(r"\D", "", fragment or "")
        if not digits:
            raise ValidationError(f"mobile_number: {fragment!r} contains no digits")
        return await self.store.search_reservations_by_phone(digits)

    async def get(self, reservation_id: UUID, lock: bool = False):
        reservation = await self.store.get_reservation(reservation_id, lock=lock)
        if reservation is None:
            raise NotFoundError(f"Reservation {reservation_id} cannot be found.")
        return reservation

    async def update(self, reservation_id: UUID, fields: Mapping[str, Any]):
        """Full update; the status field may only move along the state machine"""
        current = await self.get(reservation_id)

        cleaned = Pipeline(
            "update_reservation",
            [
                validate_reservation_fields,
                partial(check_body_id, reservation_id=reservation_id),
                self._rules(),
                partial(check_update_allowed, current),
            ],
        ).run(fields).unwrap()

        updated = await self.store.update_reservation(
            reservation_id,
            _record_values(cleaned),
            expected={"status": current.status},
        )
        if updated is None:
            raise RuleError("reservation was changed by another request, reload and retry")

        logger.info("Reservation updated", reservation_id=str(reservation_id))
        return updated

    async def update_status(self, reservation_id: UUID, status: str):
        current = await self.get(reservation_id)
        target = check_transition(current.status, status)

        updated = await self.store.update_reservation(
            reservation_id,
            {"status": target.value},
            expected={"status": current.status},
        )
        if updated is None:
            raise TransitionError(
                f"reservation {reservation_id} changed status while updating, reload and retry"
            )

        logger.info(
            "Reservation status changed",
            reservation_id=str(reservation_id),
            from_status=current.status,
            to_status=target.value,
        )
        return updated
