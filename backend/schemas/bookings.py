import re
from datetime import date, datetime, time

from pydantic import BaseModel, Field, field_validator

from backend.core import config
from backend.core.constants import (
    MAX_COMPANY_LENGTH,
    MAX_EMAIL_LENGTH,
    MAX_MESSAGE_LENGTH,
    MAX_NAME_LENGTH,
    MAX_NOTES_LENGTH,
    MAX_PHONE_LENGTH,
    MAX_TIMEZONE_LENGTH,
    MIN_NAME_LENGTH,
    BookingStatus,
    MeetingType,
)
from backend.services.time_utils import DATE_PATTERN, normalize_time_slot

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
PHONE_PATTERN = re.compile(r'^[\d\s\-+()]*$')
BOOKING_TIME_PATTERN = re.compile(r'^\d{2}:\d{2}(:\d{2})?$')


def _parse_booking_date(value):
    if isinstance(value, str):
        if not DATE_PATTERN.match(value):
            raise ValueError('Invalid date format (YYYY-MM-DD)')
        try:
            return date.fromisoformat(value)
        except ValueError:
            raise ValueError('Invalid date format (YYYY-MM-DD)') from None
    return value


def _normalize_booking_time(value: str) -> str:
    if not BOOKING_TIME_PATTERN.match(value):
        raise ValueError('Invalid time format (HH:MM)')
    return normalize_time_slot(value)


def _optional_text(value: str | None, max_length: int, label: str) -> str | None:
    if value is None:
        return None
    normalized = value.strip()
    if not normalized:
        return None
    if len(normalized) > max_length:
        raise ValueError(f'{label} cannot exceed {max_length} characters')
    return normalized


def _validate_name(value: str) -> str:
    normalized = value.strip()
    if len(normalized) < MIN_NAME_LENGTH:
        raise ValueError(f'Name must be at least {MIN_NAME_LENGTH} characters')
    if len(normalized) > MAX_NAME_LENGTH:
        raise ValueError(f'Name cannot exceed {MAX_NAME_LENGTH} characters')
    return normalized


def _validate_email(value: str) -> str:
    normalized = value.strip().lower()
    if len(normalized) > MAX_EMAIL_LENGTH:
        raise ValueError(f'Email cannot exceed {MAX_EMAIL_LENGTH} characters')
    if not EMAIL_PATTERN.match(normalized):
        raise ValueError('Invalid email address')
    return normalized


def _validate_phone(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = value.strip()
    if not PHONE_PATTERN.match(normalized):
        raise ValueError('Invalid phone format')
    if len(normalized) > MAX_PHONE_LENGTH:
        raise ValueError(f'Phone number cannot exceed {MAX_PHONE_LENGTH} characters')
    return normalized or None


def _validate_timezone(value):
    """Blank means "not given"; the caller decides what that resolves to."""
    if value is None:
        return None
    if not isinstance(value, str):
        return value
    normalized = value.strip()
    if not normalized:
        return None
    if len(normalized) > MAX_TIMEZONE_LENGTH:
        raise ValueError(f'Timezone cannot exceed {MAX_TIMEZONE_LENGTH} characters')
    return normalized


class CreateBookingRequest(BaseModel):
    category_id: int | None = None
    name: str
    email: str
    phone: str | None = None
    company: str | None = None
    scheduled_date: date
    scheduled_time: str
    timezone: str = config.DEFAULT_TIMEZONE
    meeting_type: MeetingType = MeetingType.VIDEO
    message: str | None = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _validate_name(value)

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _validate_email(value)

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, value: str | None) -> str | None:
        return _validate_phone(value)

    @field_validator('company')
    @classmethod
    def validate_company(cls, value: str | None) -> str | None:
        return _optional_text(value, MAX_COMPANY_LENGTH, 'Company name')

    @field_validator('scheduled_date', mode='before')
    @classmethod
    def validate_scheduled_date(cls, value):
        return _parse_booking_date(value)

    @field_validator('scheduled_time')
    @classmethod
    def validate_scheduled_time(cls, value: str) -> str:
        return _normalize_booking_time(value)

    @field_validator('timezone', mode='before')
    @classmethod
    def validate_timezone(cls, value):
        normalized = _validate_timezone(value)
        return config.DEFAULT_TIMEZONE if normalized is None else normalized

    @field_validator('meeting_type', mode='before')
    @classmethod
    def default_meeting_type(cls, value):
        return MeetingType.VIDEO if value is None else value

    @field_validator('message')
    @classmethod
    def validate_message(cls, value: str | None) -> str | None:
        return _optional_text(value, MAX_MESSAGE_LENGTH, 'Message')


class UpdateBookingRequest(BaseModel):
    """Partial update; only the fields actually sent are applied."""

    category_id: int | None = None
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    company: str | None = None
    scheduled_date: date | None = None
    scheduled_time: str | None = None
    timezone: str | None = None
    meeting_type: MeetingType | None = None
    message: str | None = None
    status: BookingStatus | None = None
    notes: str | None = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, value: str | None) -> str | None:
        return None if value is None else _validate_name(value)

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str | None) -> str | None:
        return None if value is None else _validate_email(value)

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, value: str | None) -> str | None:
        return _validate_phone(value)

    @field_validator('company')
    @classmethod
    def validate_company(cls, value: str | None) -> str | None:
        return _optional_text(value, MAX_COMPANY_LENGTH, 'Company name')

    @field_validator('scheduled_date', mode='before')
    @classmethod
    def validate_scheduled_date(cls, value):
        return _parse_booking_date(value)

    @field_validator('scheduled_time')
    @classmethod
    def validate_scheduled_time(cls, value: str | None) -> str | None:
        return None if value is None else _normalize_booking_time(value)

    @field_validator('timezone', mode='before')
    @classmethod
    def validate_timezone(cls, value):
        return _validate_timezone(value)

    @field_validator('message')
    @classmethod
    def validate_message(cls, value: str | None) -> str | None:
        return _optional_text(value, MAX_MESSAGE_LENGTH, 'Message')

    @field_validator('notes')
    @classmethod
    def validate_notes(cls, value: str | None) -> str | None:
        return _optional_text(value, MAX_NOTES_LENGTH, 'Notes')


class BookingResponse(BaseModel):
    id: int
    category_id: int | None = None
    name: str
    email: str
    phone: str | None = None
    company: str | None = None
    scheduled_date: date
    scheduled_time: time
    timezone: str
    meeting_type: str
    message: str | None = None
    status: str
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class AvailabilityResponse(BaseModel):
    available_times: list[str] = Field(default_factory=list)
    blocked: bool
    day_name: str


class BookingStatsResponse(BaseModel):
    total: int
    pending: int
    confirmed: int
    completed: int
    cancelled: int
    no_show: int
