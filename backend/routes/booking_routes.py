from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from backend.core import config
from backend.core.errors import BookingError, BookingErrorKind
from backend.core.responses import success_response
from backend.database import get_public_db
from backend.schemas.bookings import BookingResponse, CreateBookingRequest
from backend.services.availability import AvailabilityResolver
from backend.services.booking_service import BookingService
from backend.services.time_utils import parse_date

router = APIRouter(tags=['bookings'])


@router.get('')
def get_available_times(
    date: str | None = Query(default=None),
    buffer: int | None = Query(default=None),
    db: Session = Depends(get_public_db),
):
    if not date:
        raise BookingError(BookingErrorKind.BAD_REQUEST, 'Date parameter is required')

    try:
        target_date = parse_date(date)
    except ValueError:
        raise BookingError(BookingErrorKind.BAD_REQUEST, 'Invalid date format. Use YYYY-MM-DD') from None

    buffer_minutes = config.DEFAULT_BUFFER_MINUTES if buffer is None else buffer
    if buffer_minutes < 0:
        raise BookingError(BookingErrorKind.BAD_REQUEST, 'Buffer must be zero or a positive number of minutes')

    result = AvailabilityResolver(db).resolve(target_date, buffer_minutes)
    return success_response(result, 'Available slots retrieved successfully')


@router.post('', status_code=status.HTTP_201_CREATED)
def create_booking(data: CreateBookingRequest, db: Session = Depends(get_public_db)):
    booking = BookingService(db).create_booking(data)
    return success_response(
        BookingResponse.model_validate(booking),
        'Booking created successfully',
        status.HTTP_201_CREATED,
    )
