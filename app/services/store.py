"""Persistence collaborator for the reservation core.

``Store`` is the interface the core depends on. ``SqlAlchemyStore`` is the
production implementation over an ``AsyncSession``. Updates take an optional
``expected`` mapping of column values the row must still hold; when no row
matches, the update returns ``None`` instead of overwriting someone else's
write.
"""

from contextlib import asynccontextmanager
from datetime import date
from typing import Any, AsyncIterator, Mapping, Optional, Protocol, Sequence
from uuid import UUID

import structlog
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.reservation import Reservation
from app.models.table import RestaurantTable
from app.services.state_machine import INACTIVE_STATUSES

logger = structlog.get_logger()

# Punctuation ignored when matching phone numbers
PHONE_PUNCTUATION = ("(", ")", "-", " ")


class Store(Protocol):
    supports_transactions: bool

    def transaction(self) -> Any: ...

    async def get_reservation(self, reservation_id: UUID, lock: bool = False) -> Optional[Any]: ...

    async def list_reservations_by_date(self, reservation_date: date) -> Sequence[Any]: ...

    async def search_reservations_by_phone(self, digits: str) -> Sequence[Any]: ...

    async def insert_reservation(self, values: Mapping[str, Any]) -> Any: ...

    async def update_reservation(
        self,
        reservation_id: UUID,
        values: Mapping[str, Any],
        expected: Optional[Mapping[str, Any]] = None,
    ) -> Optional[Any]: ...

    async def get_table(self, table_id: UUID, lock: bool = False) -> Optional[Any]: ...

    async def list_tables(self) -> Sequence[Any]: ...

    async def insert_table(self, values: Mapping[str, Any]) -> Any: ...

    async def update_table(
        self,
        table_id: UUID,
        values: Mapping[str, Any],
        expected: Optional[Mapping[str, Any]] = None,
    ) -> Optional[Any]: ...


class SqlAlchemyStore:
    """Store backed by SQLAlchemy; rows are locked with SELECT ... FOR UPDATE where supported"""

    supports_transactions = True

    def __init__(self, db: AsyncSession):
        self.db = db
        self._depth = 0

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["SqlAlchemyStore"]:
        """Group every write inside the block into one commit"""
        self._depth += 1
        try:
            yield self
        except BaseException:
            self._depth -= 1
            if self._depth == 0:
                await self.db.rollback()
            raise
        self._depth -= 1
        if self._depth == 0:
            await self.db.commit()

    async def _written(self) -> None:
        if self._depth == 0:
            await self.db.commit()
        else:
            await self.db.flush()

    async def _get(self, model, row_id: UUID, lock: bool) -> Optional[Any]:
        query = (
            select(model)
            .where(model.id == row_id)
            .execution_options(populate_existing=True)
        )
        if lock:
            query = query.with_for_update()
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def _insert(self, model, values: Mapping[str, Any]) -> Any:
        row = model(**values)
        self.db.add(row)
        await self._written()
        await self.db.refresh(row)
        return row

    async def _update(
        self,
        model,
        row_id: UUID,
        values: Mapping[str, Any],
        expected: Optional[Mapping[str, Any]],
    ) -> Optional[Any]:
        stmt = update(model).where(model.id == row_id)
        for name, value in (expected or {}).items():
            column = getattr(model, name)
            stmt = stmt.where(column.is_(None) if value is None else column == value)
        stmt = stmt.values(**values).execution_options(synchronize_session=False)

        result = await self.db.execute(stmt)
        if result.rowcount == 0:
            logger.warning(
                "Guarded update matched no row",
                table=model.__tablename__,
                row_id=str(row_id),
                expected={k: str(v) for k, v in (expected or {}).items()},
            )
            return None
        await self._written()
        return await self._get(model, row_id, lock=False)

    # Reservations

    async def get_reservation(self, reservation_id: UUID, lock: bool = False) -> Optional[Reservation]:
        return await self._get(Reservation, reservation_id, lock)

    async def list_reservations_by_date(self, reservation_date: date) -> Sequence[Reservation]:
        result = await self.db.execute(
            select(Reservation)
            .where(
                Reservation.reservation_date == reservation_date,
                Reservation.status.not_in([s.value for s in INACTIVE_STATUSES]),
            )
            .order_by(Reservation.reservation_time)
        )
        return result.scalars().all()

    async def search_reservations_by_phone(self, digits: str) -> Sequence[Reservation]:
        stripped = Reservation.mobile_number
        for char in PHONE_PUNCTUATION:
            stripped = func.replace(stripped, char, "")
        result = await self.db.execute(
            select(Reservation)
            .where(stripped.like(f"%{digits}%"))
            .order_by(Reservation.reservation_date, Reservation.reservation_time)
        )
        return result.scalars().all()

    async def insert_reservation(self, values: Mapping[str, Any]) -> Reservation:
        return await self._insert(Reservation, values)

    async def update_reservation(
        self,
        reservation_id: UUID,
        values: Mapping[str, Any],
        expected: Optional[Mapping[str, Any]] = None,
    ) -> Optional[Reservation]:
        return await self._update(Reservation, reservation_id, values, expected)

    # Tables

    async def get_table(self, table_id: UUID, lock: bool = False) -> Optional[RestaurantTable]:
        return await self._get(RestaurantTable, table_id, lock)

    async def list_tables(self) -> Sequence[RestaurantTable]:
        result = await self.db.execute(
            select(RestaurantTable).order_by(RestaurantTable.table_name)
        )
        return result.scalars().all()

    async def insert_table(self, values: Mapping[str, Any]) -> RestaurantTable:
        return await self._insert(RestaurantTable, values)

    async def update_table(
        self,
        table_id: UUID,
        values: Mapping[str, Any],
        expected: Optional[Mapping[str, Any]] = None,
    ) -> Optional[RestaurantTable]:
        return await self._update(RestaurantTable, table_id, values, expected)
