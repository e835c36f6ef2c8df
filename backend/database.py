from threading import Lock

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from backend.core import config


def _build_engine(url: str) -> Engine:
    connect_args = {}
    if url.startswith('sqlite'):
        connect_args['check_same_thread'] = False
    return create_engine(url, echo=config.DATABASE_ECHO, connect_args=connect_args)


# Restricted credential: public availability reads and booking creation.
engine = _build_engine(config.DATABASE_URL)

# Elevated credential: admin listing, rescheduling, rule and block management.
if config.ADMIN_DATABASE_URL == config.DATABASE_URL:
    admin_engine = engine
else:
    admin_engine = _build_engine(config.ADMIN_DATABASE_URL)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

AdminSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=admin_engine,
)

Base = declarative_base()

ACTIVE_SLOT_INDEX_NAME = 'uq_bookings_active_slot'

_schema_lock = Lock()
_booking_schema_checked = False


def ensure_booking_schema(bind: Engine | None = None) -> None:
    """Bring a pre-existing ``bookings`` table up to date.

    Adds columns introduced after the first deployment and the partial unique
    index that keeps at most one non-cancelled booking per (date, time).
    """
    global _booking_schema_checked

    if _booking_schema_checked:
        return

    target = bind or admin_engine

    with _schema_lock:
        if _booking_schema_checked:
            return

        inspector = inspect(target)

        if 'bookings' not in inspector.get_table_names():
            _booking_schema_checked = True
            return

        existing_columns = {column['name'] for column in inspector.get_columns('bookings')}
        migration_steps = [
            ('category_id', 'ALTER TABLE bookings ADD COLUMN category_id INTEGER'),
            ('timezone', "ALTER TABLE bookings ADD COLUMN timezone VARCHAR(64) DEFAULT 'America/New_York'"),
            ('meeting_type', "ALTER TABLE bookings ADD COLUMN meeting_type VARCHAR(16) DEFAULT 'video'"),
            ('notes', 'ALTER TABLE bookings ADD COLUMN notes VARCHAR(500)'),
            ('updated_at', 'ALTER TABLE bookings ADD COLUMN updated_at TIMESTAMP'),
        ]

        with target.begin() as connection:
            for column_name, statement in migration_steps:
                if column_name not in existing_columns:
                    connection.execute(text(statement))
            connection.execute(
                text(
                    f'CREATE UNIQUE INDEX IF NOT EXISTS {ACTIVE_SLOT_INDEX_NAME} '
                    "ON bookings(scheduled_date, scheduled_time) WHERE status <> 'cancelled'"
                )
            )
            connection.execute(
                text('CREATE INDEX IF NOT EXISTS idx_bookings_date_status ON bookings(scheduled_date, status)')
            )

        _booking_schema_checked = True


def get_public_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_admin_db():
    db = AdminSessionLocal()
    try:
        yield db
    finally:
        db.close()
