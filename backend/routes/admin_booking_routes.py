from typing import Any

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from backend.auth.dependencies import require_admin_session
from backend.core.constants import BookingStatus
from backend.core.errors import BookingError, BookingErrorKind
from backend.core.responses import success_response
from backend.database import get_admin_db
from backend.schemas.bookings import BookingResponse, BookingStatsResponse, UpdateBookingRequest
from backend.schemas.validation import parse_record_id, validate_payload
from backend.services.booking_service import BookingService
from backend.services.time_utils import parse_date

router = APIRouter(tags=['admin-bookings'], dependencies=[Depends(require_admin_session)])


def _serialize(booking) -> BookingResponse:
    return BookingResponse.model_validate(booking)


@router.get('')
def list_bookings(
    status: BookingStatus | None = Query(default=None),
    date: str | None = Query(default=None),
    email: str | None = Query(default=None),
    db: Session = Depends(get_admin_db),
):
    scheduled_date = None
    if date:
        try:
            scheduled_date = parse_date(date)
        except ValueError:
            raise BookingError(BookingErrorKind.BAD_REQUEST, 'Invalid date format. Use YYYY-MM-DD') from None

    bookings = BookingService(db).get_all_bookings(
        status=status,
        scheduled_date=scheduled_date,
        email=email or None,
    )
    return success_response([_serialize(booking) for booking in bookings], 'Bookings retrieved successfully')


@router.get('/stats')
def booking_stats(db: Session = Depends(get_admin_db)):
    stats = BookingService(db).get_booking_stats()
    return success_response(BookingStatsResponse(**stats), 'Booking statistics retrieved successfully')


@router.get('/{booking_id}')
def get_booking(booking_id: int, db: Session = Depends(get_admin_db)):
    booking = BookingService(db).get_booking_by_id(booking_id)
    return success_response(_serialize(booking), 'Booking retrieved successfully')


@router.put('')
def update_booking(payload: dict[str, Any] = Body(...), db: Session = Depends(get_admin_db)):
    updates = dict(payload)
    booking_id = parse_record_id(updates.pop('id', None), 'Booking ID')
    validated = validate_payload(UpdateBookingRequest, updates)

    booking = BookingService(db).update_booking(booking_id, validated)
    return success_response(_serialize(booking), 'Booking updated successfully')


@router.delete('')
def cancel_booking(
    id: str | None = Query(default=None),
    reason: str | None = Query(default=None),
    db: Session = Depends(get_admin_db),
):
    booking_id = parse_record_id(id, 'Booking ID')
    booking = BookingService(db).cancel_booking(booking_id, reason or None)
    return success_response(_serialize(booking), 'Booking cancelled successfully')


@router.delete('/{booking_id}')
def delete_booking(booking_id: int, db: Session = Depends(get_admin_db)):
    BookingService(db).delete_booking(booking_id)
    return success_response({'id': booking_id}, 'Booking deleted successfully')
