import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.core import config
from backend.core.errors import BookingError, BookingErrorKind
from backend.core.responses import (
    conflict_response,
    error_response,
    not_found_response,
    server_error_response,
    unauthorized_response,
    validation_error_response,
)
from backend.database import Base, admin_engine, ensure_booking_schema
from backend.models import availability, booking, user  # noqa: F401
from backend.routes import admin_booking_routes, admin_slot_routes, auth_routes, booking_routes
from backend.schemas.validation import format_field_errors

logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s %(levelname)s [%(name)s] %(message)s',
)

logger = logging.getLogger(__name__)

app = FastAPI(title='Services Booking API')

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)


@app.on_event('startup')
def initialize_database() -> None:
    config.validate_runtime_config()
    try:
        Base.metadata.create_all(bind=admin_engine)
        ensure_booking_schema()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and ADMIN_DATABASE_URL.')


@app.exception_handler(BookingError)
async def handle_booking_error(request: Request, exc: BookingError):
    if exc.kind == BookingErrorKind.VALIDATION_FAILED and exc.errors:
        return validation_error_response(exc.errors)
    if exc.kind == BookingErrorKind.UNAUTHORIZED:
        return unauthorized_response()
    if exc.kind == BookingErrorKind.INVALID_CREDENTIALS:
        return error_response(exc.message, exc.status_code, 'Authentication failed')
    if exc.kind == BookingErrorKind.SLOT_CONFLICT:
        return conflict_response(exc.message)
    if exc.kind == BookingErrorKind.NOT_FOUND:
        return not_found_response(exc.resource or 'Resource')
    if exc.kind == BookingErrorKind.INTERNAL:
        return server_error_response(exc.message)
    return error_response(exc.message, exc.status_code)


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(request: Request, exc: RequestValidationError):
    return validation_error_response(format_field_errors(exc.errors()))


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    return error_response(str(exc.detail), exc.status_code)


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception('Unhandled error on %s %s', request.method, request.url.path)
    return server_error_response(exc)


@app.get('/')
def root():
    return {'status': 'Booking API Running'}


app.include_router(booking_routes.router, prefix='/bookings')
app.include_router(auth_routes.router, prefix='/admin/auth')
app.include_router(admin_booking_routes.router, prefix='/admin/bookings')
app.include_router(admin_slot_routes.router, prefix='/admin/slots')
