"""Shared FastAPI dependencies"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.services.assignment import SeatingCoordinator
from app.services.reservations import ReservationService
from app.services.rules import Clock, RestaurantPolicy
from app.services.store import SqlAlchemyStore
from app.services.tables import TableService


def get_policy() -> RestaurantPolicy:
    return RestaurantPolicy.from_settings(settings)


def get_clock(policy: RestaurantPolicy = Depends(get_policy)) -> Clock:
    """Source of "now" for the future-only rule"""
    return policy.now


def get_store(db: AsyncSession = Depends(get_db)) -> SqlAlchemyStore:
    return SqlAlchemyStore(db)


def get_reservation_service(
    store: SqlAlchemyStore = Depends(get_store),
    policy: RestaurantPolicy = Depends(get_policy),
    clock: Clock = Depends(get_clock),
) -> ReservationService:
    return ReservationService(store, policy, clock)


def get_table_service(store: SqlAlchemyStore = Depends(get_store)) -> TableService:
    return TableService(store)


def get_seating_coordinator(store: SqlAlchemyStore = Depends(get_store)) -> SeatingCoordinator:
    return SeatingCoordinator(store)
