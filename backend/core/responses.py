"""Uniform JSON envelope for every API response."""

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from backend.core import config

logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def success_response(
    data: Any,
    message: str | None = None,
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            'success': True,
            'data': jsonable_encoder(data),
            'message': message or 'Request successful',
            'timestamp': _timestamp(),
        },
    )


def error_response(
    error: str | Exception,
    status_code: int = status.HTTP_400_BAD_REQUEST,
    message: str | None = None,
) -> JSONResponse:
    error_message = str(error)
    return JSONResponse(
        status_code=status_code,
        content={
            'success': False,
            'error': error_message,
            'message': message or 'An error occurred',
            'timestamp': _timestamp(),
        },
    )


def validation_error_response(errors: list[dict[str, str]]) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={
            'success': False,
            'error': 'Validation failed',
            'message': 'One or more fields are invalid',
            'errors': errors,
            'timestamp': _timestamp(),
        },
    )


def unauthorized_response() -> JSONResponse:
    return error_response(
        'Unauthorized',
        status.HTTP_401_UNAUTHORIZED,
        'You do not have permission to access this resource',
    )


def not_found_response(resource: str = 'Resource') -> JSONResponse:
    return error_response(
        f'{resource} not found',
        status.HTTP_404_NOT_FOUND,
        f'The requested {resource.lower()} could not be found',
    )


def conflict_response(message: str) -> JSONResponse:
    return error_response('Conflict', status.HTTP_409_CONFLICT, message)


def server_error_response(error: Exception | str = 'Internal server error') -> JSONResponse:
    detail = str(error)
    return error_response(
        'Internal server error',
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail if config.is_development() else 'An internal error occurred',
    )
