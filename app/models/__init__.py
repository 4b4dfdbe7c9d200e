"""Database models"""

from app.models.reservation import Reservation
from app.models.table import RestaurantTable

__all__ = [
    "Reservation",
    "RestaurantTable",
]
