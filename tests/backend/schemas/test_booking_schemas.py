from datetime import date

import pytest

from backend.core.constants import MeetingType
from backend.core.errors import BookingError, BookingErrorKind
from backend.schemas.bookings import CreateBookingRequest, UpdateBookingRequest
from backend.schemas.slots import CreateBlockedDateRequest, CreateTimeSlotRequest, UpdateTimeSlotRequest
from backend.schemas.validation import parse_record_id, validate_payload

VALID_BOOKING = {
    'name': '  Ada Lovelace ',
    'email': ' ADA@Example.COM ',
    'scheduled_date': '2026-01-05',
    'scheduled_time': '09:30',
}


def _field_errors(schema, payload) -> dict[str, str]:
    with pytest.raises(BookingError) as exception_info:
        validate_payload(schema, payload)

    assert exception_info.value.kind == BookingErrorKind.VALIDATION_FAILED
    return {error['field']: error['message'] for error in exception_info.value.errors}


def test_create_booking_request_normalizes_fields() -> None:
    request = CreateBookingRequest(**VALID_BOOKING)

    assert request.name == 'Ada Lovelace'
    assert request.email == 'ada@example.com'
    assert request.scheduled_date == date(2026, 1, 5)
    assert request.scheduled_time == '09:30:00'
    assert request.timezone == 'America/New_York'
    assert request.meeting_type == MeetingType.VIDEO
    assert request.phone is None


def test_create_booking_request_accepts_seconds_precision() -> None:
    request = CreateBookingRequest(**{**VALID_BOOKING, 'scheduled_time': '14:00:00', 'meeting_type': 'in_person'})

    assert request.scheduled_time == '14:00:00'
    assert request.meeting_type == MeetingType.IN_PERSON


def test_create_booking_request_reports_every_bad_field() -> None:
    errors = _field_errors(
        CreateBookingRequest,
        {
            'name': 'A',
            'email': 'not-an-email',
            'phone': 'call me',
            'company': 'x' * 101,
            'scheduled_date': '05/01/2026',
            'scheduled_time': '9am',
            'meeting_type': 'carrier_pigeon',
            'message': 'x' * 1001,
        },
    )

    assert errors['name'] == 'Name must be at least 2 characters'
    assert errors['email'] == 'Invalid email address'
    assert errors['phone'] == 'Invalid phone format'
    assert errors['company'] == 'Company name cannot exceed 100 characters'
    assert errors['scheduled_date'] == 'Invalid date format (YYYY-MM-DD)'
    assert errors['scheduled_time'] == 'Invalid time format (HH:MM)'
    assert 'meeting_type' in errors
    assert errors['message'] == 'Message cannot exceed 1000 characters'


def test_create_booking_request_rejects_out_of_range_time() -> None:
    errors = _field_errors(CreateBookingRequest, {**VALID_BOOKING, 'scheduled_time': '25:00'})

    assert errors == {'scheduled_time': 'Invalid time format'}


def test_create_booking_request_requires_contact_fields() -> None:
    errors = _field_errors(CreateBookingRequest, {'scheduled_date': '2026-01-05', 'scheduled_time': '09:00'})

    assert set(errors) == {'name', 'email'}


def test_create_booking_request_accepts_permissive_phone() -> None:
    request = CreateBookingRequest(**{**VALID_BOOKING, 'phone': '+1 (555) 010-9999'})

    assert request.phone == '+1 (555) 010-9999'


def test_update_booking_request_tracks_only_sent_fields() -> None:
    request = UpdateBookingRequest(status='confirmed', notes='  Called ahead  ')

    assert request.model_dump(exclude_unset=True) == {'status': 'confirmed', 'notes': 'Called ahead'}


def test_update_booking_request_limits_notes_and_status() -> None:
    errors = _field_errors(UpdateBookingRequest, {'status': 'archived', 'notes': 'x' * 501})

    assert 'status' in errors
    assert errors['notes'] == 'Notes cannot exceed 500 characters'


def test_time_slot_request_validates_window() -> None:
    assert CreateTimeSlotRequest(day_of_week=1, start_time='09:00', end_time='17:00').is_active is True

    errors = _field_errors(CreateTimeSlotRequest, {'day_of_week': 7, 'start_time': '9:00', 'end_time': '17:00'})
    assert set(errors) == {'day_of_week', 'start_time'}

    errors = _field_errors(CreateTimeSlotRequest, {'day_of_week': 1, 'start_time': '17:00', 'end_time': '09:00'})
    assert errors == {'': 'Start time must be before end time'}


def test_time_slot_rule_rejects_seconds() -> None:
    errors = _field_errors(CreateTimeSlotRequest, {'day_of_week': 1, 'start_time': '09:00:00', 'end_time': '17:00'})

    assert errors == {'start_time': 'Invalid time format (HH:MM)'}


def test_update_time_slot_request_is_partial() -> None:
    request = UpdateTimeSlotRequest(is_active=False)

    assert request.model_dump(exclude_unset=True) == {'is_active': False}


def test_blocked_date_request() -> None:
    request = CreateBlockedDateRequest(date='2026-12-25', reason=' Holiday ')

    assert request.date == date(2026, 12, 25)
    assert request.reason == 'Holiday'

    errors = _field_errors(CreateBlockedDateRequest, {'date': '2026-12-25', 'reason': 'x' * 256})
    assert errors == {'reason': 'Reason cannot exceed 255 characters'}


@pytest.mark.parametrize(('value', 'expected'), [(7, 7), ('12', 12)])
def test_parse_record_id(value, expected: int) -> None:
    assert parse_record_id(value, 'Booking ID') == expected


@pytest.mark.parametrize('value', [None, '', 'abc', True])
def test_parse_record_id_rejects_missing_or_malformed(value) -> None:
    with pytest.raises(BookingError) as exception_info:
        parse_record_id(value, 'Booking ID')

    assert exception_info.value.kind == BookingErrorKind.BAD_REQUEST


def test_create_booking_request_caps_lengths_at_column_widths() -> None:
    errors = _field_errors(
        CreateBookingRequest,
        {
            **VALID_BOOKING,
            'email': 'a' * 250 + '@example.com',
            'phone': '1' * 60,
            'timezone': 'X' * 100,
        },
    )

    assert errors == {
        'email': 'Email cannot exceed 255 characters',
        'phone': 'Phone number cannot exceed 32 characters',
        'timezone': 'Timezone cannot exceed 64 characters',
    }


def test_create_booking_request_accepts_values_at_column_widths() -> None:
    request = CreateBookingRequest(**{**VALID_BOOKING, 'phone': '1' * 32, 'timezone': 'X' * 64})

    assert len(request.phone) == 32
    assert len(request.timezone) == 64


def test_update_booking_request_caps_lengths_at_column_widths() -> None:
    errors = _field_errors(
        UpdateBookingRequest,
        {'email': 'a' * 250 + '@example.com', 'phone': '1' * 33, 'timezone': 'X' * 65},
    )

    assert set(errors) == {'email', 'phone', 'timezone'}


@pytest.mark.parametrize('value', ['', '   '])
def test_update_booking_request_treats_blank_timezone_as_unset(value: str) -> None:
    request = UpdateBookingRequest(timezone=value)

    assert request.timezone is None


def test_update_booking_request_trims_timezone() -> None:
    assert UpdateBookingRequest(timezone=' Europe/Paris ').timezone == 'Europe/Paris'


@pytest.mark.parametrize('value', ['10:00:99', '10:00:30', '10:00:00:00'])
def test_booking_time_rejects_non_zero_or_extra_seconds(value: str) -> None:
    errors = _field_errors(CreateBookingRequest, {**VALID_BOOKING, 'scheduled_time': value})

    assert set(errors) == {'scheduled_time'}
