import os
from datetime import date

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.dialects import postgresql
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault('DATABASE_URL', 'sqlite://')

from backend.database import Base  # noqa: E402
from backend.models import announcement, blocked_slot, notification  # noqa: E402,F401
from backend.models.appointment import Appointment  # noqa: E402
from backend.models.user import User  # noqa: E402

SLOT_DATE = date(2024, 5, 1)


@pytest.fixture
def db_session():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def make_user(db_session):
    def _make_user(user_id: int, role: str = 'student', name: str | None = None, **fields) -> User:
        user = User(
            id=user_id,
            username=fields.pop('username', f'{role}{user_id}'),
            name=name,
            hashed_password=fields.pop('hashed_password', 'not-a-real-hash'),
            role=role,
            **fields,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make_user


@pytest.fixture
def make_appointment(db_session):
    def _make_appointment(
        student_id: int,
        faculty_id: int = 7,
        slot_date: date = SLOT_DATE,
        time: str = '12:15 PM',
        status: str = 'WAITING',
        **fields,
    ) -> Appointment:
        appointment = Appointment(
            student_id=student_id,
            faculty_id=faculty_id,
            date=slot_date,
            time=time,
            status=status,
            **fields,
        )
        db_session.add(appointment)
        db_session.commit()
        db_session.refresh(appointment)
        return appointment

    return _make_appointment


@pytest.fixture
def campus(make_user):
    """Faculty 7 and 8, students 1-4, staff 20."""
    make_user(7, 'faculty', name='Dr. Reem', username='Dr.Reem')
    make_user(8, 'faculty', name='Dr. Suad', username='Dr.Suad')
    make_user(1, 'student', name='Sarah Alduhaim', username='sarah_alduhaim')
    make_user(2, 'student', name='Raghad Alamirah', username='raghad_alamirah')
    make_user(3, 'student', name='Dana Ahmad', username='dana_ahmad')
    make_user(4, 'student', name='Haifa', username='haifa')
    make_user(20, 'staff', name='Ms. Mona', username='MsMona', staff_category='Registration')


@pytest.fixture
def executed_sql(db_session):
    """SELECTs run through ``db_session``, rendered as PostgreSQL.

    SQLite drops ``FOR UPDATE`` when compiling, so row locks are checked
    against the PostgreSQL rendering of each statement.
    """
    statements = []

    def capture(orm_execute_state):
        if orm_execute_state.is_select:
            statements.append(str(orm_execute_state.statement.compile(dialect=postgresql.dialect())))

    event.listen(db_session, 'do_orm_execute', capture)
    yield statements
    event.remove(db_session, 'do_orm_execute', capture)
