"""Restaurant table model"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Uuid

from app.database import Base


class RestaurantTable(Base):
    """Physical seating units"""
    __tablename__ = "tables"
    
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    table_name = Column(String(100), nullable=False)
    capacity = Column(Integer, nullable=False)
    
    # Occupancy: id of the seated reservation, looked up through the store
    reservation_id = Column(Uuid(as_uuid=True), ForeignKey("reservations.id"), nullable=True)
    
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
