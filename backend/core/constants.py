"""Shared booking vocabulary."""

from enum import Enum


class BookingStatus(str, Enum):
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'
    NO_SHOW = 'no_show'


class MeetingType(str, Enum):
    VIDEO = 'video'
    PHONE = 'phone'
    IN_PERSON = 'in_person'


# Terminal statuses map to an empty set. Re-asserting the current status is
# always accepted and is handled by the caller.
STATUS_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset(
        {BookingStatus.COMPLETED, BookingStatus.CANCELLED, BookingStatus.NO_SHOW}
    ),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.NO_SHOW: frozenset(),
}

DAY_NAMES = (
    'Sunday',
    'Monday',
    'Tuesday',
    'Wednesday',
    'Thursday',
    'Friday',
    'Saturday',
)

DEFAULT_CANCELLATION_NOTE = 'Cancelled by user'

MAX_NAME_LENGTH = 100
MIN_NAME_LENGTH = 2
MAX_COMPANY_LENGTH = 100
MAX_EMAIL_LENGTH = 255
MAX_PHONE_LENGTH = 32
MAX_TIMEZONE_LENGTH = 64
MAX_MESSAGE_LENGTH = 1000
MAX_NOTES_LENGTH = 500
MAX_BLOCK_REASON_LENGTH = 255
