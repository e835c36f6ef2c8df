from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session

from backend.auth.dependencies import require_admin_session
from backend.core.errors import BookingError, BookingErrorKind
from backend.core.responses import success_response
from backend.database import get_admin_db
from backend.schemas.slots import (
    AvailableSlotResponse,
    BlockedDateResponse,
    CreateBlockedDateRequest,
    CreateTimeSlotRequest,
    SlotConfigurationResponse,
    UpdateTimeSlotRequest,
)
from backend.schemas.validation import parse_record_id, validate_payload
from backend.services.booking_service import BookingService

router = APIRouter(tags=['admin-slots'])

SLOT_TYPE = 'slot'
BLOCKED_DATE_TYPE = 'blocked_date'
INVALID_TYPE_MESSAGE = 'Invalid type. Must be "slot" or "blocked_date"'

admin_only = [Depends(require_admin_session)]


@router.get('')
def list_slot_configuration(db: Session = Depends(get_admin_db)):
    service = BookingService(db)
    configuration = SlotConfigurationResponse(
        slots=[AvailableSlotResponse.model_validate(slot) for slot in service.list_time_slots()],
        blockedDates=[BlockedDateResponse.model_validate(blocked) for blocked in service.list_blocked_dates()],
    )
    return success_response(configuration, 'Slots and blocked dates retrieved successfully')


@router.post('', dependencies=admin_only, status_code=status.HTTP_201_CREATED)
def create_slot_or_blocked_date(payload: dict[str, Any] = Body(...), db: Session = Depends(get_admin_db)):
    data = dict(payload)
    record_type = data.pop('type', None)
    service = BookingService(db)

    if record_type == SLOT_TYPE:
        slot = service.add_time_slot(validate_payload(CreateTimeSlotRequest, data))
        return success_response(
            AvailableSlotResponse.model_validate(slot),
            'Time slot created successfully',
            status.HTTP_201_CREATED,
        )

    if record_type == BLOCKED_DATE_TYPE:
        request = validate_payload(CreateBlockedDateRequest, data)
        blocked = service.block_date(request.date, request.reason)
        return success_response(
            BlockedDateResponse.model_validate(blocked),
            'Date blocked successfully',
            status.HTTP_201_CREATED,
        )

    raise BookingError(BookingErrorKind.BAD_REQUEST, INVALID_TYPE_MESSAGE)


@router.put('', dependencies=admin_only)
def update_slot(payload: dict[str, Any] = Body(...), db: Session = Depends(get_admin_db)):
    updates = dict(payload)
    slot_id = parse_record_id(updates.pop('id', None), 'Slot ID')
    updates.pop('type', None)

    slot = BookingService(db).update_time_slot(slot_id, validate_payload(UpdateTimeSlotRequest, updates))
    return success_response(AvailableSlotResponse.model_validate(slot), 'Time slot updated successfully')


@router.delete('', dependencies=admin_only)
def delete_slot_or_blocked_date(
    id: str | None = Query(default=None),
    type: str = Query(default=SLOT_TYPE),
    db: Session = Depends(get_admin_db),
):
    record_id = parse_record_id(id, 'ID parameter')
    service = BookingService(db)

    if type == BLOCKED_DATE_TYPE:
        service.unblock_date(record_id)
        return success_response({'id': record_id}, 'Date unblocked successfully')

    if type == SLOT_TYPE:
        # Rules are deactivated rather than removed so history stays intact.
        slot = service.deactivate_time_slot(record_id)
        return success_response(AvailableSlotResponse.model_validate(slot), 'Time slot deleted successfully')

    raise BookingError(BookingErrorKind.BAD_REQUEST, INVALID_TYPE_MESSAGE)
