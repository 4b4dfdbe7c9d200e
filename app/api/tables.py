"""Table and seating API endpoints"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.api.deps import get_seating_coordinator, get_table_service
from app.schemas.reservation import DataEnvelope, ReservationResponse
from app.schemas.table import SeatingResponse, TableResponse
from app.services.assignment import SeatingCoordinator
from app.services.tables import TableService
from app.services.validation import require_data, validate_seat_request

router = APIRouter()


@router.get("", response_model=List[TableResponse])
async def list_tables(service: TableService = Depends(get_table_service)):
    """List all tables"""
    return await service.list()


@router.post("", response_model=TableResponse, status_code=status.HTTP_201_CREATED)
async def create_table(
    body: DataEnvelope,
    service: TableService = Depends(get_table_service),
):
    """Create a new table"""
    return await service.create(require_data(body.data))


@router.get("/{table_id}", response_model=TableResponse)
async def get_table(
    table_id: UUID,
    service: TableService = Depends(get_table_service),
):
    """Get table details"""
    return await service.get(table_id)


@router.put("/{table_id}/seat", response_model=SeatingResponse)
async def seat_reservation(
    table_id: UUID,
    body: DataEnvelope,
    coordinator: SeatingCoordinator = Depends(get_seating_coordinator),
):
    """Seat a reservation at this table"""
    reservation_id = validate_seat_request(require_data(body.data))
    table, reservation = await coordinator.assign(table_id, reservation_id)
    return SeatingResponse(
        table=TableResponse.model_validate(table),
        reservation=ReservationResponse.model_validate(reservation),
    )


@router.delete("/{table_id}/seat", response_model=SeatingResponse)
async def clear_table(
    table_id: UUID,
    coordinator: SeatingCoordinator = Depends(get_seating_coordinator),
):
    """Free this table and finish its reservation"""
    table, reservation = await coordinator.clear(table_id)
    return SeatingResponse(
        table=TableResponse.model_validate(table),
        reservation=ReservationResponse.model_validate(reservation),
    )
