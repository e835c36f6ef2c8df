"""Turn pydantic failures into per-field ``{field, message}`` lists."""

from typing import Any, Iterable, TypeVar

from pydantic import BaseModel, ValidationError

from backend.core.errors import BookingError, BookingErrorKind

ModelT = TypeVar('ModelT', bound=BaseModel)

_LOCATION_PREFIXES = {'body', 'query', 'path', 'cookie', 'header'}
_VALUE_ERROR_PREFIX = 'Value error, '


def format_field_errors(raw_errors: Iterable[dict[str, Any]]) -> list[dict[str, str]]:
    field_errors: list[dict[str, str]] = []
    for error in raw_errors:
        location = [str(part) for part in error.get('loc', ())]
        if location and location[0] in _LOCATION_PREFIXES:
            location = location[1:]

        message = str(error.get('msg', 'Invalid value'))
        if message.startswith(_VALUE_ERROR_PREFIX):
            message = message[len(_VALUE_ERROR_PREFIX):]

        field_errors.append({'field': '.'.join(location), 'message': message})

    return field_errors


def validate_payload(schema: type[ModelT], data: Any) -> ModelT:
    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        raise BookingError(
            BookingErrorKind.VALIDATION_FAILED,
            'Validation failed',
            errors=format_field_errors(exc.errors()),
        ) from exc


def parse_record_id(value: Any, label: str) -> int:
    """Coerce an ``id`` from a JSON body or query string, or fail with 400."""
    if value is None or value == '':
        raise BookingError(BookingErrorKind.BAD_REQUEST, f'{label} is required')
    if isinstance(value, bool):
        raise BookingError(BookingErrorKind.BAD_REQUEST, f'{label} must be an integer')
    try:
        return int(value)
    except (TypeError, ValueError):
        raise BookingError(BookingErrorKind.BAD_REQUEST, f'{label} must be an integer') from None
