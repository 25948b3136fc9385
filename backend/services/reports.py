"""Read-only projections for students, faculty and staff dashboards."""

from datetime import date

from sqlalchemy import asc, desc, func, or_
from sqlalchemy.orm import Session, aliased, joinedload

from backend.core import config
from backend.database import database_errors
from backend.models.announcement import Announcement
from backend.models.appointment import Appointment
from backend.models.user import User
from backend.services.lifecycle import AppointmentStatus, parse_status
from backend.services.slots import parse_slot_date, slot_position

WAITING = AppointmentStatus.WAITING.value


def _with_people(query):
    return query.options(joinedload(Appointment.student), joinedload(Appointment.faculty))


def _ordering(sort_by: str | None, order: str | None) -> list:
    direction = desc if (order or 'ASC').strip().upper() == 'DESC' else asc
    key = (sort_by or '').strip().lower()

    if key == 'time':
        return [direction(slot_position(Appointment.time))]
    if key == 'category':
        return [direction(Appointment.category)]
    if key == 'createdat':
        return [direction(Appointment.created_at)]
    return [direction(Appointment.date), direction(slot_position(Appointment.time))]


def list_pending(db: Session, faculty_id: int, category: str | None = None) -> list[Appointment]:
    with database_errors(db):
        query = _with_people(db.query(Appointment)).filter(
            Appointment.faculty_id == faculty_id,
            Appointment.status == WAITING,
        )
        if category:
            query = query.filter(Appointment.category == category)

        return query.order_by(Appointment.date.asc(), slot_position(Appointment.time).asc()).all()


def list_student_appointments(db: Session, student_id: int) -> list[Appointment]:
    with database_errors(db):
        return _with_people(db.query(Appointment)).filter(
            Appointment.student_id == student_id,
        ).order_by(Appointment.date.asc(), slot_position(Appointment.time).asc()).all()


def list_faculty_upcoming(
    db: Session,
    faculty_id: int,
    category: str | None = None,
    only_academic: bool = False,
) -> list[Appointment]:
    with database_errors(db):
        query = _with_people(db.query(Appointment)).filter(Appointment.faculty_id == faculty_id)

        if category and category != 'all':
            query = query.filter(Appointment.category == category)
        elif only_academic:
            query = query.filter(Appointment.category.in_(config.ACADEMIC_CATEGORIES))

        return query.order_by(Appointment.date.asc(), slot_position(Appointment.time).asc()).all()


def list_faculty_categories(db: Session, faculty_id: int) -> list[str]:
    with database_errors(db):
        rows = db.query(Appointment.category).filter(
            Appointment.faculty_id == faculty_id,
        ).distinct().all()

    categories = {(category or '').strip() for (category,) in rows}
    return sorted(category for category in categories if category)


def search_student_history(db: Session, query_text: str | None) -> list[Appointment]:
    """Appointments of students matching ``query_text``.

    A numeric query is a student id; anything else matches the student's name
    or username, case-insensitively.
    """
    needle = (query_text or '').strip()
    if not needle:
        return []

    student = aliased(User)
    if needle.isdigit():
        student_filter = student.id == int(needle)
    else:
        pattern = f'%{needle}%'
        student_filter = or_(student.name.ilike(pattern), student.username.ilike(pattern))

    with database_errors(db):
        return _with_people(db.query(Appointment)).join(
            student, Appointment.student_id == student.id,
        ).filter(student_filter).order_by(
            Appointment.date.desc(), slot_position(Appointment.time).desc(),
        ).all()


def list_staff_upcoming(
    db: Session,
    date_from: date | str | None = None,
    date_to: date | str | None = None,
    category: str | None = None,
    status: str | None = None,
    q: str | None = None,
    sort_by: str | None = None,
    order: str | None = 'ASC',
    limit: int | None = None,
    offset: int | None = None,
    today: date | None = None,
) -> list[Appointment]:
    query = _with_people(db.query(Appointment))

    if date_from or date_to:
        if date_from:
            query = query.filter(Appointment.date >= parse_slot_date(date_from))
        if date_to:
            query = query.filter(Appointment.date <= parse_slot_date(date_to))
    else:
        query = query.filter(Appointment.date >= (today or date.today()))

    if category and category != 'all':
        query = query.filter(Appointment.category == category)
    if status and status != 'all':
        query = query.filter(Appointment.status == parse_status(status).value)

    if q and q.strip():
        student = aliased(User)
        faculty = aliased(User)
        pattern = f'%{q.strip()}%'
        query = query.join(student, Appointment.student_id == student.id).join(
            faculty, Appointment.faculty_id == faculty.id,
        ).filter(
            or_(
                Appointment.category.ilike(pattern),
                student.name.ilike(pattern),
                student.username.ilike(pattern),
                faculty.name.ilike(pattern),
                faculty.username.ilike(pattern),
            )
        )

    query = query.order_by(*_ordering(sort_by, order))
    if limit:
        query = query.limit(limit)
    if offset:
        query = query.offset(offset)

    with database_errors(db):
        return query.all()


def staff_overview(
    db: Session,
    sort_by: str | None = None,
    order: str | None = 'ASC',
    today: date | None = None,
) -> list[Appointment]:
    with database_errors(db):
        return _with_people(db.query(Appointment)).filter(
            Appointment.date >= (today or date.today()),
        ).order_by(*_ordering(sort_by, order)).all()


def staff_inbox(db: Session, limit: int | None = None) -> list[Appointment]:
    with database_errors(db):
        return _with_people(db.query(Appointment)).order_by(
            Appointment.created_at.desc(), Appointment.id.desc(),
        ).limit(limit or config.STAFF_INBOX_LIMIT).all()


def queue_summary(db: Session, category: str | None = None, faculty_id: int | None = None) -> dict:
    with database_errors(db):
        query = db.query(func.count(Appointment.id)).filter(Appointment.status == WAITING)
        if category:
            query = query.filter(Appointment.category == category)
        if faculty_id:
            query = query.filter(Appointment.faculty_id == faculty_id)
        waiting = query.scalar() or 0

    return {
        'queue': [{'position': position} for position in range(1, waiting + 1)],
        'eta_minutes': waiting * config.SLOT_LENGTH_MINUTES,
    }


def queue_status(db: Session, student_id: int) -> dict:
    with database_errors(db):
        first_waiting = db.query(Appointment).filter(
            Appointment.student_id == student_id,
            Appointment.status == WAITING,
        ).order_by(Appointment.id.asc()).first()

        if first_waiting is None:
            return {'department': None, 'waiting': 0}

        department = first_waiting.category
        waiting_query = db.query(func.count(Appointment.id)).filter(Appointment.status == WAITING)
        if department:
            waiting_query = waiting_query.filter(Appointment.category == department)
        else:
            waiting_query = waiting_query.filter(Appointment.category.is_(None))

        return {'department': department or '—', 'waiting': waiting_query.scalar() or 0}


def latest_announcement(db: Session) -> Announcement | None:
    with database_errors(db):
        return db.query(Announcement).filter(
            Announcement.active.is_(True),
        ).order_by(Announcement.created_at.desc(), Announcement.id.desc()).first()
