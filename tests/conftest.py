import os
from datetime import date, timedelta

os.environ.setdefault('DATABASE_URL', 'sqlite://')
os.environ.setdefault('APP_ENV', 'development')
os.environ.setdefault('JWT_SECRET_KEY', 'test-secret')

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from backend.auth import jwt_handler  # noqa: E402
from backend.core import config  # noqa: E402
from backend.database import Base, get_admin_db, get_public_db  # noqa: E402
from backend.main import app  # noqa: E402
from backend.models.availability import AvailableSlot  # noqa: E402
from backend.services.time_utils import get_day_of_week, to_clock_time  # noqa: E402


@pytest.fixture
def session_factory():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def next_monday() -> date:
    today = date.today()
    offset = (1 - get_day_of_week(today)) % 7 or 7
    return today + timedelta(days=offset)


@pytest.fixture
def monday_rule(db) -> AvailableSlot:
    rule = AvailableSlot(
        day_of_week=1,
        start_time=to_clock_time('09:00'),
        end_time=to_clock_time('12:00'),
        is_active=True,
    )
    db.add(rule)
    db.commit()
    db.refresh(rule)
    return rule


@pytest.fixture
def client(session_factory):
    def override_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_public_db] = override_db
    app.dependency_overrides[get_admin_db] = override_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def admin_client(client):
    token = jwt_handler.create_session_token(subject='admin@example.com', admin_id=1, name='Admin')
    client.cookies.set(config.ADMIN_SESSION_COOKIE, token)
    return client
