"""Typed failures raised by the booking core and mapped to HTTP statuses."""

from enum import Enum

from fastapi import status


class BookingErrorKind(str, Enum):
    VALIDATION_FAILED = 'validation_failed'
    BAD_REQUEST = 'bad_request'
    PAST_DATE = 'past_date'
    SLOT_CONFLICT = 'slot_conflict'
    NOT_FOUND = 'not_found'
    INVALID_TRANSITION = 'invalid_transition'
    UNAUTHORIZED = 'unauthorized'
    INVALID_CREDENTIALS = 'invalid_credentials'
    INTERNAL = 'internal'


STATUS_CODES: dict[BookingErrorKind, int] = {
    BookingErrorKind.VALIDATION_FAILED: 422,
    BookingErrorKind.BAD_REQUEST: status.HTTP_400_BAD_REQUEST,
    BookingErrorKind.PAST_DATE: status.HTTP_400_BAD_REQUEST,
    BookingErrorKind.INVALID_TRANSITION: status.HTTP_400_BAD_REQUEST,
    BookingErrorKind.SLOT_CONFLICT: status.HTTP_409_CONFLICT,
    BookingErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    BookingErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    BookingErrorKind.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    BookingErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class BookingError(Exception):
    def __init__(
        self,
        kind: BookingErrorKind,
        message: str,
        errors: list[dict[str, str]] | None = None,
        resource: str | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.errors = errors
        self.resource = resource

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]


def not_found(resource: str) -> BookingError:
    return BookingError(BookingErrorKind.NOT_FOUND, f'{resource} not found', resource=resource)
