"""Table schemas"""

from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel

from app.schemas.reservation import ReservationResponse


class TableResponse(BaseModel):
    """Table response"""
    id: UUID
    table_name: str
    capacity: int
    reservation_id: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SeatingResponse(BaseModel):
    """Table and reservation after seating or clearing"""
    table: TableResponse
    reservation: ReservationResponse
