"""Reservation schemas"""

from datetime import date, datetime, time
from typing import Any, Dict, Optional
from uuid import UUID
from pydantic import BaseModel


class DataEnvelope(BaseModel):
    """Request body wrapper: {"data": {...}}

    Field values are kept as submitted; the validation layer checks their shape.
    """
    data: Optional[Dict[str, Any]] = None


class ReservationResponse(BaseModel):
    """Reservation response"""
    id: UUID
    first_name: str
    last_name: str
    mobile_number: str
    reservation_date: date
    reservation_time: time
    people: int
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
