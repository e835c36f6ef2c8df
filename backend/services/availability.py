"""Turn weekly rules, blocked dates and existing bookings into open slots."""

import logging
from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session

from backend.core import config
from backend.core.constants import BookingStatus
from backend.models.availability import AvailableSlot, BlockedDate
from backend.models.booking import Booking
from backend.schemas.bookings import AvailabilityResponse
from backend.services.time_utils import (
    generate_time_slots,
    get_day_name,
    get_day_of_week,
    is_date_valid,
    normalize_time_slot,
    time_to_minutes,
)

logger = logging.getLogger(__name__)


def filter_booked_slots(
    candidates: list[str],
    booked_times: list[str],
    buffer_minutes: int = 0,
) -> list[str]:
    """Drop booked candidates and any within ``buffer_minutes`` of a booking.

    Order is preserved and exact duplicates (from overlapping rules) collapse
    to their first occurrence.
    """
    booked = set(booked_times)
    booked_minutes = [time_to_minutes(value) for value in booked]
    seen: set[str] = set()
    available: list[str] = []

    for candidate in candidates:
        if candidate in seen or candidate in booked:
            continue
        seen.add(candidate)

        minutes = time_to_minutes(candidate)
        if any(abs(minutes - other) < buffer_minutes for other in booked_minutes):
            continue
        available.append(candidate)

    return available


class AvailabilityResolver:
    def __init__(self, db: Session, interval_minutes: int = config.SLOT_INTERVAL_MINUTES) -> None:
        self.db = db
        self.interval_minutes = interval_minutes

    def _use_snapshot(self) -> None:
        # One consistent view across the rule, block and booking reads.
        if self.db.in_transaction():
            return
        if self.db.get_bind().dialect.name == 'postgresql':
            self.db.connection(execution_options={'isolation_level': 'REPEATABLE READ'})

    def is_date_blocked(self, target_date: date) -> bool:
        blocked_id = self.db.execute(
            select(BlockedDate.id).where(BlockedDate.date == target_date).limit(1)
        ).scalar_one_or_none()
        return blocked_id is not None

    def active_rules_for(self, target_date: date) -> list[AvailableSlot]:
        return list(
            self.db.execute(
                select(AvailableSlot)
                .where(
                    AvailableSlot.day_of_week == get_day_of_week(target_date),
                    AvailableSlot.is_active.is_(True),
                )
                .order_by(AvailableSlot.start_time.asc(), AvailableSlot.id.asc())
            ).scalars()
        )

    def booked_times_for(self, target_date: date) -> list[str]:
        rows = self.db.execute(
            select(Booking.scheduled_time).where(
                Booking.scheduled_date == target_date,
                Booking.status != BookingStatus.CANCELLED.value,
            )
        ).scalars()
        return [normalize_time_slot(value) for value in rows]

    def candidate_times(self, rules: list[AvailableSlot]) -> list[str]:
        candidates: list[str] = []
        for rule in rules:
            candidates.extend(
                normalize_time_slot(slot)
                for slot in generate_time_slots(
                    rule.start_time.strftime('%H:%M'),
                    rule.end_time.strftime('%H:%M'),
                    self.interval_minutes,
                )
            )
        return candidates

    def resolve(
        self,
        target_date: date,
        buffer_minutes: int = config.DEFAULT_BUFFER_MINUTES,
        today: date | None = None,
    ) -> AvailabilityResponse:
        day_name = get_day_name(target_date)

        if not is_date_valid(target_date, today=today):
            return AvailabilityResponse(available_times=[], blocked=True, day_name=day_name)

        self._use_snapshot()
        rules = self.active_rules_for(target_date)

        if self.is_date_blocked(target_date):
            return AvailabilityResponse(available_times=[], blocked=True, day_name=day_name)

        booked_times = self.booked_times_for(target_date)
        available_times = filter_booked_slots(
            self.candidate_times(rules),
            booked_times,
            buffer_minutes,
        )

        logger.debug(
            'Resolved %d open slots for %s (%d rules, %d bookings)',
            len(available_times),
            target_date.isoformat(),
            len(rules),
            len(booked_times),
        )
        return AvailabilityResponse(available_times=available_times, blocked=False, day_name=day_name)
