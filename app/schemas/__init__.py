"""Pydantic schemas for request/response validation"""

from app.schemas.reservation import (
    DataEnvelope,
    ReservationResponse,
)
from app.schemas.table import (
    TableResponse,
    SeatingResponse,
)

__all__ = [
    "DataEnvelope",
    "ReservationResponse",
    "TableResponse",
    "SeatingResponse",
]
