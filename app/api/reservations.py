"""Reservation API endpoints"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.api.deps import get_clock, get_reservation_service
from app.schemas.reservation import DataEnvelope, ReservationResponse
from app.services.reservations import ReservationService
from app.services.rules import Clock
from app.services.validation import require_data, validate_status_request

router = APIRouter()


@router.get("", response_model=List[ReservationResponse])
async def list_reservations(
    date: Optional[str] = None,
    mobile_number: Optional[str] = None,
    service: ReservationService = Depends(get_reservation_service),
    clock: Clock = Depends(get_clock),
):
    """List a day's active reservations, or search every reservation by phone"""
    if date:
        return await service.list_by_date(date)
    if mobile_number:
        return await service.search_by_phone(mobile_number)
    return await service.list_by_date(clock().date())


@router.post("", response_model=ReservationResponse, status_code=status.HTTP_201_CREATED)
async def create_reservation(
    body: DataEnvelope,
    service: ReservationService = Depends(get_reservation_service),
):
    """Create a new reservation"""
    return await service.create(require_data(body.data))


@router.get("/{reservation_id}", response_model=ReservationResponse)
async def get_reservation(
    reservation_id: UUID,
    service: ReservationService = Depends(get_reservation_service),
):
    """Get reservation details"""
    return await service.get(reservation_id)


@router.put("/{reservation_id}", response_model=ReservationResponse)
async def update_reservation(
    reservation_id: UUID,
    body: DataEnvelope,
    service: ReservationService = Depends(get_reservation_service),
):
    """Replace a reservation's details"""
    return await service.update(reservation_id, require_data(body.data))


@router.put("/{reservation_id}/status", response_model=ReservationResponse)
async def update_reservation_status(
    reservation_id: UUID,
    body: DataEnvelope,
    service: ReservationService = Depends(get_reservation_service),
):
    """Move a reservation to a new status"""
    new_status = validate_status_request(require_data(body.data))
    return await service.update_status(reservation_id, new_status)
