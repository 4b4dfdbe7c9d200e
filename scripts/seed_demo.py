#!/usr/bin/env python3
"""
Seed script to create demo tables and reservations
"""

import asyncio
from datetime import time, timedelta


DEMO_TABLES = [
    {"table_name": "Bar #1", "capacity": 1},
    {"table_name": "Bar #2", "capacity": 1},
    {"table_name": "#1", "capacity": 6},
    {"table_name": "#2", "capacity": 6},
]

DEMO_RESERVATIONS = [
    {"first_name": "Rick", "last_name": "Sanchez", "mobile_number": "202-555-0164", "time": time(20, 0), "people": 6},
    {"first_name": "Frank", "last_name": "Palicky", "mobile_number": "202-555-0153", "time": time(13, 30), "people": 1},
    {"first_name": "Bird", "last_name": "Person", "mobile_number": "808-555-0141", "time": time(18, 0), "people": 1},
    {"first_name": "Tiger", "last_name": "Lion", "mobile_number": "808-555-0140", "time": time(19, 30), "people": 3},
]


async def seed_demo_data():
    """Seed demo data for development"""
    from sqlalchemy import select
    from app.config import settings
    from app.database import SessionLocal, engine, Base
    from app.models.table import RestaurantTable
    from app.services.reservations import ReservationService
    from app.services.rules import RestaurantPolicy
    from app.services.store import SqlAlchemyStore
    from app.services.tables import TableService
    
    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    
    policy = RestaurantPolicy.from_settings(settings)
    
    async with SessionLocal() as db:
        result = await db.execute(select(RestaurantTable).limit(1))
        if result.scalar_one_or_none():
            print("Demo data already exists. Skipping...")
            return
        
        store = SqlAlchemyStore(db)
        
        print("Creating demo tables...")
        table_service = TableService(store)
        for fields in DEMO_TABLES:
            table = await table_service.create(fields)
            print(f"  {table.table_name} (capacity {table.capacity}): {table.id}")
        
        # Book the next open day so the demo passes every booking rule
        booking_day = policy.now().date() + timedelta(days=1)
        while booking_day.weekday() == policy.closed_weekday:
            booking_day += timedelta(days=1)
        
        print(f"Creating demo reservations for {booking_day}...")
        reservation_service = ReservationService(store, policy)
        for demo in DEMO_RESERVATIONS:
            reservation = await reservation_service.create({
                "first_name": demo["first_name"],
                "last_name": demo["last_name"],
                "mobile_number": demo["mobile_number"],
                "reservation_date": booking_day.isoformat(),
                "reservation_time": demo["time"].strftime("%H:%M"),
                "people": demo["people"],
            })
            print(f"  {reservation.first_name} {reservation.last_name}, party of {reservation.people}: {reservation.id}")
    
    print("""
Demo data created successfully!

List tomorrow's bookings with GET /reservations?date=<date>
and seat one with PUT /tables/<table_id>/seat.
""")


if __name__ == "__main__":
    asyncio.run(seed_demo_data())
