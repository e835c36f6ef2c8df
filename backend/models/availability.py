"""Availability model definitions."""

from sqlalchemy import Boolean, Column, Date, Integer, String, Time

from backend.database import Base


class AvailableSlot(Base):
    """Represents a weekly recurring window of bookable time."""
    __tablename__ = "available_slots"

    id = Column(Integer, primary_key=True)
    day_of_week = Column(Integer, nullable=False, index=True)  # 0=Sunday
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)


class BlockedDate(Base):
    """Represents a calendar day closed to bookings."""
    __tablename__ = "blocked_dates"

    id = Column(Integer, primary_key=True)
    date = Column(Date, nullable=False, index=True)
    reason = Column(String(255))
