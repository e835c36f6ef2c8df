import asyncio
import json

import pytest

from backend.core import config
from backend.core.errors import BookingError, BookingErrorKind
from backend.main import handle_booking_error


def _handle(exc: BookingError) -> tuple[int, dict]:
    response = asyncio.run(handle_booking_error(None, exc))
    return response.status_code, json.loads(response.body)


def test_root_reports_service_running(client) -> None:
    response = client.get('/')

    assert response.status_code == 200
    assert response.json() == {'status': 'Booking API Running'}


def test_unknown_route_uses_error_envelope(client) -> None:
    response = client.get('/nowhere')

    assert response.status_code == 404
    body = response.json()
    assert body['success'] is False
    assert body['error'] == 'Not Found'


def test_unauthorized_kind_maps_to_unauthorized_envelope_whatever_the_message() -> None:
    status_code, body = _handle(BookingError(BookingErrorKind.UNAUTHORIZED, 'Session expired'))

    assert status_code == 401
    assert body['error'] == 'Unauthorized'


def test_invalid_credentials_kind_keeps_its_message() -> None:
    status_code, body = _handle(BookingError(BookingErrorKind.INVALID_CREDENTIALS, 'Invalid credentials'))

    assert status_code == 401
    assert body['error'] == 'Invalid credentials'
    assert body['message'] == 'Authentication failed'


def test_production_requires_real_jwt_secret(monkeypatch) -> None:
    monkeypatch.setattr(config, 'APP_ENV', 'production')
    monkeypatch.setattr(config, 'JWT_SECRET_KEY', 'change-me')

    with pytest.raises(RuntimeError, match='JWT_SECRET_KEY'):
        config.validate_runtime_config()
