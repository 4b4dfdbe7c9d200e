"""Reservation model"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, Date, Time, DateTime, Uuid, Index

from app.database import Base


class Reservation(Base):
    """Party bookings"""
    __tablename__ = "reservations"
    
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    
    # Guest information
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    mobile_number = Column(String(30), nullable=False)
    
    # Booking details
    reservation_date = Column(Date, nullable=False)
    reservation_time = Column(Time, nullable=False)
    people = Column(Integer, nullable=False)
    
    # Status
    status = Column(String(20), nullable=False, default="booked")  # booked, seated, finished, cancelled
    
    # Metadata
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    __table_args__ = (
        Index("ix_reservations_date_time", "reservation_date", "reservation_time"),
    )
