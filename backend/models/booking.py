"""Booking model definitions."""

from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, Index, Integer, String, Time, text

from backend.core import config
from backend.core.constants import (
    MAX_EMAIL_LENGTH,
    MAX_PHONE_LENGTH,
    MAX_TIMEZONE_LENGTH,
    BookingStatus,
    MeetingType,
)
from backend.database import ACTIVE_SLOT_INDEX_NAME, Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Booking(Base):
    """Represents a scheduled appointment."""
    __tablename__ = "bookings"
    __table_args__ = (
        Index(
            ACTIVE_SLOT_INDEX_NAME,
            "scheduled_date",
            "scheduled_time",
            unique=True,
            postgresql_where=text("status <> 'cancelled'"),
            sqlite_where=text("status <> 'cancelled'"),
        ),
        Index("idx_bookings_date_status", "scheduled_date", "status"),
    )

    id = Column(Integer, primary_key=True)
    category_id = Column(Integer, nullable=True)
    name = Column(String(100), nullable=False)
    email = Column(String(MAX_EMAIL_LENGTH), nullable=False, index=True)
    phone = Column(String(MAX_PHONE_LENGTH))
    company = Column(String(100))
    scheduled_date = Column(Date, nullable=False)
    scheduled_time = Column(Time, nullable=False)
    timezone = Column(String(MAX_TIMEZONE_LENGTH), nullable=False, default=config.DEFAULT_TIMEZONE)
    meeting_type = Column(String(16), nullable=False, default=MeetingType.VIDEO.value)
    message = Column(String(1000))
    status = Column(String(16), nullable=False, default=BookingStatus.PENDING.value)
    notes = Column(String(500))
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow)
