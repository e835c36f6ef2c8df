"""Booking orchestration: slot checks, writes, status changes and admin CRUD.

The availability pre-check only produces a friendly error. The partial unique
index on ``bookings(scheduled_date, scheduled_time)`` is what actually decides
a race between two writers; its violation surfaces here as a slot conflict.
"""

import logging
from datetime import date, datetime, timezone
from typing import Callable

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from backend.core.constants import (
    DEFAULT_CANCELLATION_NOTE,
    STATUS_TRANSITIONS,
    BookingStatus,
)
from backend.core.errors import BookingError, BookingErrorKind, not_found
from backend.database import ACTIVE_SLOT_INDEX_NAME
from backend.models.availability import AvailableSlot, BlockedDate
from backend.models.booking import Booking
from backend.schemas.bookings import CreateBookingRequest, UpdateBookingRequest
from backend.schemas.slots import CreateTimeSlotRequest, UpdateTimeSlotRequest
from backend.schemas.validation import validate_payload
from backend.services.time_utils import is_date_valid, normalize_time_slot, to_clock_time

logger = logging.getLogger(__name__)

SLOT_TAKEN_MESSAGE = 'This time slot is no longer available'
RESCHEDULE_TAKEN_MESSAGE = 'New time slot is not available'

# Columns that may not be cleared by sending an explicit null.
_REQUIRED_BOOKING_FIELDS = {
    'name',
    'email',
    'scheduled_date',
    'scheduled_time',
    'timezone',
    'meeting_type',
    'status',
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def is_active_slot_violation(exc: IntegrityError) -> bool:
    detail = str(getattr(exc, 'orig', exc))
    diag = getattr(getattr(exc, 'orig', None), 'diag', None)
    constraint_name = getattr(diag, 'constraint_name', None) or ''

    return (
        constraint_name == ACTIVE_SLOT_INDEX_NAME
        or ACTIVE_SLOT_INDEX_NAME in detail
        or 'bookings.scheduled_date, bookings.scheduled_time' in detail
    )


def check_status_transition(current: str, requested: BookingStatus) -> None:
    current_status = BookingStatus(current)
    if requested == current_status:
        return
    if requested not in STATUS_TRANSITIONS[current_status]:
        raise BookingError(
            BookingErrorKind.INVALID_TRANSITION,
            f'Cannot change booking status from {current_status.value} to {requested.value}',
        )


class BookingService:
    def __init__(self, db: Session, clock: Callable[[], date] = date.today) -> None:
        self.db = db
        self.clock = clock

    def _commit(self, failure_message: str, conflict_message: str = SLOT_TAKEN_MESSAGE) -> None:
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            if is_active_slot_violation(exc):
                logger.warning('Slot uniqueness constraint rejected write: %s', conflict_message)
                raise BookingError(BookingErrorKind.SLOT_CONFLICT, conflict_message) from exc
            logger.exception(failure_message)
            raise BookingError(BookingErrorKind.INTERNAL, failure_message) from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception(failure_message)
            raise BookingError(BookingErrorKind.INTERNAL, failure_message) from exc

    def _ensure_not_past(self, target_date: date, message: str) -> None:
        if not is_date_valid(target_date, today=self.clock()):
            raise BookingError(BookingErrorKind.PAST_DATE, message)

    # Bookings

    def is_slot_available(
        self,
        target_date: date,
        slot_time: str,
        exclude_booking_id: int | None = None,
    ) -> bool:
        self._ensure_not_past(target_date, 'Date cannot be in the past')

        blocked_id = self.db.execute(
            select(BlockedDate.id).where(BlockedDate.date == target_date).limit(1)
        ).scalar_one_or_none()
        if blocked_id is not None:
            return False

        query = select(Booking.id).where(
            Booking.scheduled_date == target_date,
            Booking.scheduled_time == to_clock_time(slot_time),
            Booking.status != BookingStatus.CANCELLED.value,
        )
        if exclude_booking_id is not None:
            query = query.where(Booking.id != exclude_booking_id)

        return self.db.execute(query.limit(1)).scalar_one_or_none() is None

    def create_booking(self, data: CreateBookingRequest) -> Booking:
        self._ensure_not_past(data.scheduled_date, 'Scheduled date cannot be in the past')

        if not self.is_slot_available(data.scheduled_date, data.scheduled_time):
            logger.warning(
                'Rejected booking for taken slot %s %s',
                data.scheduled_date.isoformat(),
                data.scheduled_time,
            )
            raise BookingError(BookingErrorKind.SLOT_CONFLICT, SLOT_TAKEN_MESSAGE)

        booking = Booking(
            category_id=data.category_id,
            name=data.name,
            email=data.email,
            phone=data.phone,
            company=data.company,
            scheduled_date=data.scheduled_date,
            scheduled_time=to_clock_time(data.scheduled_time),
            timezone=data.timezone,
            meeting_type=data.meeting_type.value,
            message=data.message,
            status=BookingStatus.PENDING.value,
        )
        self.db.add(booking)
        self._commit('Failed to create booking')
        self.db.refresh(booking)

        logger.info(
            'Created booking %s for %s %s',
            booking.id,
            booking.scheduled_date.isoformat(),
            normalize_time_slot(booking.scheduled_time),
        )
        return booking

    def get_booking_by_id(self, booking_id: int) -> Booking:
        booking = self.db.get(Booking, booking_id)
        if booking is None:
            raise not_found('Booking')
        return booking

    def get_all_bookings(
        self,
        status: BookingStatus | None = None,
        scheduled_date: date | None = None,
        email: str | None = None,
    ) -> list[Booking]:
        query = select(Booking).order_by(
            Booking.scheduled_date.asc(),
            Booking.scheduled_time.asc(),
            Booking.id.asc(),
        )

        if status is not None:
            query = query.where(Booking.status == status.value)
        if scheduled_date is not None:
            query = query.where(Booking.scheduled_date == scheduled_date)
        if email:
            query = query.where(func.lower(Booking.email).contains(email.strip().lower(), autoescape=True))

        return list(self.db.execute(query).scalars())

    def update_booking(self, booking_id: int, updates: UpdateBookingRequest) -> Booking:
        booking = self.get_booking_by_id(booking_id)
        changes = {
            field: value
            for field, value in updates.model_dump(exclude_unset=True).items()
            if value is not None or field not in _REQUIRED_BOOKING_FIELDS
        }

        if 'status' in changes:
            check_status_transition(booking.status, changes['status'])
            changes['status'] = changes['status'].value
        if 'meeting_type' in changes:
            changes['meeting_type'] = changes['meeting_type'].value

        rescheduling = 'scheduled_date' in changes or 'scheduled_time' in changes
        if rescheduling:
            new_date = changes.get('scheduled_date', booking.scheduled_date)
            new_time = changes.get('scheduled_time', normalize_time_slot(booking.scheduled_time))
            moved = (
                new_date != booking.scheduled_date
                or new_time != normalize_time_slot(booking.scheduled_time)
            )
            if moved and not self.is_slot_available(new_date, new_time, exclude_booking_id=booking.id):
                logger.warning(
                    'Rejected reschedule of booking %s to %s %s',
                    booking.id,
                    new_date.isoformat(),
                    new_time,
                )
                raise BookingError(BookingErrorKind.SLOT_CONFLICT, RESCHEDULE_TAKEN_MESSAGE)
            changes['scheduled_date'] = new_date
            changes['scheduled_time'] = to_clock_time(new_time)

        for field, value in changes.items():
            setattr(booking, field, value)
        booking.updated_at = _utcnow()

        self._commit('Failed to update booking', RESCHEDULE_TAKEN_MESSAGE if rescheduling else SLOT_TAKEN_MESSAGE)
        self.db.refresh(booking)

        if rescheduling:
            logger.info(
                'Rescheduled booking %s to %s %s',
                booking.id,
                booking.scheduled_date.isoformat(),
                normalize_time_slot(booking.scheduled_time),
            )
        if 'status' in changes:
            logger.info('Booking %s is now %s', booking.id, booking.status)
        return booking

    def cancel_booking(self, booking_id: int, reason: str | None = None) -> Booking:
        updates = validate_payload(
            UpdateBookingRequest,
            {
                'status': BookingStatus.CANCELLED.value,
                'notes': (reason or '').strip() or DEFAULT_CANCELLATION_NOTE,
            },
        )
        return self.update_booking(booking_id, updates)

    def delete_booking(self, booking_id: int) -> None:
        booking = self.get_booking_by_id(booking_id)
        self.db.delete(booking)
        self._commit('Failed to delete booking')
        logger.info('Deleted booking %s', booking_id)

    def get_booking_stats(self) -> dict[str, int]:
        rows = self.db.execute(
            select(Booking.status, func.count(Booking.id)).group_by(Booking.status)
        ).all()
        counts = {status: count for status, count in rows}

        stats = {status.value: counts.get(status.value, 0) for status in BookingStatus}
        stats['total'] = sum(counts.values())
        return stats

    # Weekly rules

    def list_time_slots(self) -> list[AvailableSlot]:
        return list(
            self.db.execute(
                select(AvailableSlot).order_by(
                    AvailableSlot.day_of_week.asc(),
                    AvailableSlot.start_time.asc(),
                )
            ).scalars()
        )

    def add_time_slot(self, data: CreateTimeSlotRequest) -> AvailableSlot:
        slot = AvailableSlot(
            day_of_week=data.day_of_week,
            start_time=to_clock_time(data.start_time),
            end_time=to_clock_time(data.end_time),
            is_active=data.is_active,
        )
        self.db.add(slot)
        self._commit('Failed to add time slot')
        self.db.refresh(slot)

        logger.info('Added time slot %s (day %s, %s-%s)', slot.id, slot.day_of_week, data.start_time, data.end_time)
        return slot

    def update_time_slot(self, slot_id: int, updates: UpdateTimeSlotRequest) -> AvailableSlot:
        slot = self.db.get(AvailableSlot, slot_id)
        if slot is None:
            raise not_found('Time slot')

        changes = {
            field: value
            for field, value in updates.model_dump(exclude_unset=True).items()
            if value is not None
        }
        for field in ('start_time', 'end_time'):
            if field in changes:
                changes[field] = to_clock_time(changes[field])

        start_time = changes.get('start_time', slot.start_time)
        end_time = changes.get('end_time', slot.end_time)
        if start_time >= end_time:
            raise BookingError(
                BookingErrorKind.VALIDATION_FAILED,
                'Validation failed',
                errors=[{'field': 'end_time', 'message': 'Start time must be before end time'}],
            )

        for field, value in changes.items():
            setattr(slot, field, value)

        self._commit('Failed to update time slot')
        self.db.refresh(slot)

        logger.info('Updated time slot %s: %s', slot.id, sorted(changes))
        return slot

    def deactivate_time_slot(self, slot_id: int) -> AvailableSlot:
        return self.update_time_slot(slot_id, UpdateTimeSlotRequest(is_active=False))

    # Blocked dates

    def list_blocked_dates(self) -> list[BlockedDate]:
        return list(self.db.execute(select(BlockedDate).order_by(BlockedDate.date.asc())).scalars())

    def block_date(self, target_date: date, reason: str | None = None) -> BlockedDate:
        blocked = BlockedDate(date=target_date, reason=reason or None)
        self.db.add(blocked)
        self._commit('Failed to block date')
        self.db.refresh(blocked)

        logger.info('Blocked %s (%s)', target_date.isoformat(), reason or 'no reason given')
        return blocked

    def unblock_date(self, blocked_date_id: int) -> None:
        blocked = self.db.get(BlockedDate, blocked_date_id)
        if blocked is None:
            raise not_found('Blocked date')

        blocked_on = blocked.date
        self.db.delete(blocked)
        self._commit('Failed to unblock date')
        logger.info('Unblocked %s', blocked_on.isoformat())
