import pytest

from backend.auth.passwords import hash_password
from backend.core import config
from backend.models.user import AdminUser


@pytest.fixture
def admin_user(db) -> AdminUser:
    admin = AdminUser(email='ops@example.com', name='Ops Lead', hashed_password=hash_password('s3cret-pass'))
    db.add(admin)
    db.commit()
    db.refresh(admin)
    return admin


def test_login_requires_email_and_password(client) -> None:
    response = client.post('/admin/auth', json={'email': 'ops@example.com'})

    assert response.status_code == 400
    assert response.json()['error'] == 'Email and password are required'


def test_login_rejects_bad_credentials(client, admin_user) -> None:
    response = client.post('/admin/auth', json={'email': 'ops@example.com', 'password': 'wrong'})

    assert response.status_code == 401
    body = response.json()
    assert body['error'] == 'Invalid credentials'
    assert body['message'] == 'Authentication failed'
    assert config.ADMIN_SESSION_COOKIE not in response.cookies


def test_login_rejects_unknown_admin(client) -> None:
    response = client.post('/admin/auth', json={'email': 'ghost@example.com', 'password': 'whatever'})

    assert response.status_code == 401


def test_login_sets_session_cookie_and_unlocks_admin_routes(client, admin_user) -> None:
    assert client.get('/admin/bookings').status_code == 401

    response = client.post('/admin/auth', json={'email': ' OPS@example.com ', 'password': 's3cret-pass'})

    assert response.status_code == 200
    assert response.json()['data']['admin'] == {'id': admin_user.id, 'email': 'ops@example.com', 'name': 'Ops Lead'}
    set_cookie = response.headers['set-cookie']
    assert set_cookie.startswith(f'{config.ADMIN_SESSION_COOKIE}=')
    assert 'HttpOnly' in set_cookie

    assert client.get('/admin/bookings').status_code == 200


def test_session_status_reports_logged_in_admin(client, admin_user) -> None:
    client.post('/admin/auth', json={'email': 'ops@example.com', 'password': 's3cret-pass'})

    response = client.get('/admin/auth')

    assert response.status_code == 200
    data = response.json()['data']
    assert data['authenticated'] is True
    assert data['admin']['email'] == 'ops@example.com'


def test_session_status_without_cookie_is_unauthorized(client) -> None:
    response = client.get('/admin/auth')

    assert response.status_code == 401
    assert response.json()['error'] == 'Unauthorized'


def test_logout_clears_session(client, admin_user) -> None:
    client.post('/admin/auth', json={'email': 'ops@example.com', 'password': 's3cret-pass'})

    response = client.delete('/admin/auth')

    assert response.status_code == 200
    assert client.get('/admin/auth').status_code == 401
    assert client.get('/admin/bookings').status_code == 401
