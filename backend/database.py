import logging
from contextlib import contextmanager
from threading import Lock

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from backend.core import config
from backend.core.errors import DatabaseUnavailableError, PSUFlowError

logger = logging.getLogger(__name__)

DATABASE_URL = config.DATABASE_URL

connect_args = {'check_same_thread': False} if DATABASE_URL.startswith('sqlite') else {}
engine = create_engine(DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_appointment_schema_checked = False
_blocked_slot_schema_checked = False


def ensure_appointment_schema() -> None:
    global _appointment_schema_checked

    if _appointment_schema_checked:
        return

    with _schema_lock:
        if _appointment_schema_checked:
            return

        inspector = inspect(engine)

        if 'appointments' not in inspector.get_table_names():
            _appointment_schema_checked = True
            return

        existing_columns = {column['name'] for column in inspector.get_columns('appointments')}
        migration_steps = [
            ('category', 'ALTER TABLE appointments ADD COLUMN category VARCHAR'),
            ('reason', 'ALTER TABLE appointments ADD COLUMN reason TEXT'),
            ('notes', 'ALTER TABLE appointments ADD COLUMN notes TEXT'),
            ('transcript_path', 'ALTER TABLE appointments ADD COLUMN transcript_path VARCHAR'),
            ('payment_proof_path', 'ALTER TABLE appointments ADD COLUMN payment_proof_path VARCHAR'),
            ('decided_by_id', 'ALTER TABLE appointments ADD COLUMN decided_by_id INTEGER'),
            ('decided_at', 'ALTER TABLE appointments ADD COLUMN decided_at TIMESTAMP'),
        ]

        with engine.begin() as connection:
            for column_name, statement in migration_steps:
                if column_name not in existing_columns:
                    connection.execute(text(statement))
            connection.execute(
                text('CREATE INDEX IF NOT EXISTS idx_appointments_faculty_slot ON appointments(faculty_id, date, time)')
            )
            connection.execute(
                text('CREATE INDEX IF NOT EXISTS idx_appointments_student_date ON appointments(student_id, date)')
            )

        _appointment_schema_checked = True


def ensure_blocked_slot_schema() -> None:
    global _blocked_slot_schema_checked

    if _blocked_slot_schema_checked:
        return

    with _schema_lock:
        if _blocked_slot_schema_checked:
            return

        inspector = inspect(engine)

        if 'blocked_slots' not in inspector.get_table_names():
            _blocked_slot_schema_checked = True
            return

        existing_columns = {column['name'] for column in inspector.get_columns('blocked_slots')}

        with engine.begin() as connection:
            if 'reason' not in existing_columns:
                connection.execute(text('ALTER TABLE blocked_slots ADD COLUMN reason VARCHAR'))
            connection.execute(
                text(
                    'CREATE UNIQUE INDEX IF NOT EXISTS uq_blocked_slots_faculty_slot '
                    'ON blocked_slots(faculty_id, date, time)'
                )
            )

        _blocked_slot_schema_checked = True


def ensure_database_ready() -> None:
    try:
        ensure_appointment_schema()
        ensure_blocked_slot_schema()
    except SQLAlchemyError as exc:
        logger.exception('Schema check failed. Check DATABASE_URL and database credentials.')
        raise DatabaseUnavailableError() from exc


def get_db():
    ensure_database_ready()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def database_errors(db: Session):
    """Roll back on failure and surface SQLAlchemy errors as ``DatabaseUnavailableError``.

    Domain errors are re-raised unchanged after the rollback so row locks taken
    inside the block are released.
    """
    try:
        yield
    except PSUFlowError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Database operation failed')
        raise DatabaseUnavailableError() from exc
