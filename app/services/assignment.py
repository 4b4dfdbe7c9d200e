"""Seating and clearing: the two-record writes that couple a table to a reservation.

Seating sets ``table.reservation_id`` and moves the reservation to
``seated``; clearing undoes the link and moves it to ``finished``. With a
transactional store both writes share one transaction and any failure rolls
both back. Otherwise they run as a saga whose first step is undone when the
second fails.

Every write is guarded on the value it expects to replace, so a concurrent
writer makes the operation fail instead of being overwritten.
"""

from typing import Any, Awaitable, Tuple
from uuid import UUID

import structlog

from app.services.errors import (
    CoordinationError,
    DanglingReferenceError,
    NotFoundError,
    NotOccupiedError,
    ReservationSystemError,
    RuleError,
)
from app.services.rules import check_assignment
from app.services.saga import Saga
from app.services.state_machine import ReservationStatus, check_transition
from app.services.store import Store

logger = structlog.get_logger()

BOOKED = ReservationStatus.BOOKED.value
SEATED = ReservationStatus.SEATED.value
FINISHED = ReservationStatus.FINISHED.value


class SeatingCoordinator:
    def __init__(self, store: Store):
        self.store = store

    # Seating

    async def assign(self, table_id: UUID, reservation_id: UUID) -> Tuple[Any, Any]:
        """Seat a reservation at a table and return both updated records"""
        if self.store.supports_transactions:
            async with self.store.transaction():
                table, reservation = await self._load_for_seating(table_id, reservation_id, lock=True)
                result = await self._write(
                    "assign_table", self._seat(table, reservation), table_id, reservation_id
                )
        else:
            table, reservation = await self._load_for_seating(table_id, reservation_id)
            result = await self._write(
                "assign_table",
                self._seating_saga(table, reservation).execute(),
                table_id,
                reservation_id,
            )

        logger.info(
            "Reservation seated",
            table_id=str(table_id),
            reservation_id=str(reservation_id),
            people=reservation.people,
            capacity=table.capacity,
        )
        return tuple(result)

    async def _load_for_seating(self, table_id: UUID, reservation_id: UUID, lock: bool = False):
        table = await self.store.get_table(table_id, lock=lock)
        if table is None:
            raise NotFoundError(f"Table {table_id} cannot be found.")
        reservation = await self.store.get_reservation(reservation_id, lock=lock)
        if reservation is None:
            raise NotFoundError(f"Reservation {reservation_id} cannot be found.")

        try:
            check_assignment(table, reservation)
        except RuleError as e:
            logger.info(
                "Seating rejected",
                table_id=str(table_id),
                reservation_id=str(reservation_id),
                reason=e.reason,
            )
            raise
        check_transition(reservation.status, SEATED)
        return table, reservation

    async def _occupy(self, table, reservation):
        occupied = await self.store.update_table(
            table.id, {"reservation_id": reservation.id}, expected={"reservation_id": None}
        )
        if occupied is None:
            raise RuleError("Table is occupied")
        return occupied

    async def _release(self, table, reservation):
        released = await self.store.update_table(
            table.id, {"reservation_id": None}, expected={"reservation_id": reservation.id}
        )
        if released is None:
            raise CoordinationError(f"table {table.id} no longer holds reservation {reservation.id}")
        return released

    async def _mark_seated(self, reservation):
        seated = await self.store.update_reservation(
            reservation.id, {"status": SEATED}, expected={"status": BOOKED}
        )
        if seated is None:
            raise RuleError("Reservation is no longer booked and cannot be seated.")
        return seated

    async def _seat(self, table, reservation):
        occupied = await self._occupy(table, reservation)
        seated = await self._mark_seated(reservation)
        return occupied, seated

    def _seating_saga(self, table, reservation) -> Saga:
        saga = Saga("assign_table", table_id=str(table.id), reservation_id=str(reservation.id))
        saga.step(
            "occupy_table",
            lambda: self._occupy(table, reservation),
            compensation=lambda: self._release(table, reservation),
        )
        saga.step("mark_seated", lambda: self._mark_seated(reservation))
        return saga

    # Clearing

    async def clear(self, table_id: UUID) -> Tuple[Any, Any]:
        """Free a table and finish the reservation seated at it"""
        if self.store.supports_transactions:
            async with self.store.transaction():
                table, reservation = await self._load_for_clearing(table_id, lock=True)
                result = await self._write(
                    "clear_table", self._finish(table, reservation), table_id, reservation.id
                )
        else:
            table, reservation = await self._load_for_clearing(table_id)
            result = await self._write(
                "clear_table",
                self._clearing_saga(table, reservation).execute(),
                table_id,
                reservation.id,
            )

        logger.info(
            "Table cleared",
            table_id=str(table_id),
            reservation_id=str(reservation.id),
            reservation_status=result[1].status,
        )
        return tuple(result)

    async def _load_for_clearing(self, table_id: UUID, lock: bool = False):
        table = await self.store.get_table(table_id, lock=lock)
        if table is None:
            raise NotFoundError(f"Table {table_id} cannot be found.")
        if table.reservation_id is None:
            raise NotOccupiedError("Table is not occupied")

        reservation = await self.store.get_reservation(table.reservation_id, lock=lock)
        if reservation is None:
            logger.critical(
                "Table references a missing reservation",
                table_id=str(table_id),
                reservation_id=str(table.reservation_id),
                event_type="data_integrity",
            )
            raise DanglingReferenceError(
                f"Table {table_id} is occupied by reservation {table.reservation_id}, "
                "which does not exist"
            )
        return table, reservation

    async def _vacate(self, table, reservation):
        vacated = await self.store.update_table(
            table.id, {"reservation_id": None}, expected={"reservation_id": reservation.id}
        )
        if vacated is None:
            raise NotOccupiedError("Table is not occupied")
        return vacated

    async def _reoccupy(self, table, reservation):
        restored = await self.store.update_table(
            table.id, {"reservation_id": reservation.id}, expected={"reservation_id": None}
        )
        if restored is None:
            raise CoordinationError(f"table {table.id} was taken before it could be restored")
        return restored

    async def _mark_finished(self, reservation):
        # Cancelled while seated: the table is freed, the status stays
        if reservation.status != SEATED:
            logger.warning(
                "Clearing table for a reservation that is not seated",
                reservation_id=str(reservation.id),
                status=reservation.status,
            )
            return reservation

        check_transition(reservation.status, FINISHED)
        finished = await self.store.update_reservation(
            reservation.id, {"status": FINISHED}, expected={"status": SEATED}
        )
        if finished is None:
            raise RuleError("Reservation changed status while the table was being cleared.")
        return finished

    async def _finish(self, table, reservation):
        vacated = await self._vacate(table, reservation)
        finished = await self._mark_finished(reservation)
        return vacated, finished

    def _clearing_saga(self, table, reservation) -> Saga:
        saga = Saga("clear_table", table_id=str(table.id), reservation_id=str(reservation.id))
        saga.step(
            "vacate_table",
            lambda: self._vacate(table, reservation),
            compensation=lambda: self._reoccupy(table, reservation),
        )
        saga.step("mark_finished", lambda: self._mark_finished(reservation))
        return saga

    # Shared

    async def _write(self, operation: str, writes: Awaitable, table_id, reservation_id):
        """Await the writes; unexpected failures surface as CoordinationError"""
        try:
            return await writes
        except ReservationSystemError:
            raise
        except Exception as e:
            logger.critical(
                "Coordinated write failed",
                operation=operation,
                table_id=str(table_id),
                reservation_id=str(reservation_id),
                error=str(e),
                event_type="data_integrity",
            )
            raise CoordinationError(
                f"{operation} failed while writing table {table_id} and "
                f"reservation {reservation_id}; no change was kept"
            ) from e
