from sqlalchemy.orm import Session

from backend.core import config
from backend.core.clock import utcnow
from backend.core.errors import AuthorizationError, ValidationError
from backend.database import database_errors
from backend.models.appointment import Appointment
from backend.services.booking import get_appointment


def _validate_text(text: str | None) -> str:
    normalized = (text or '').strip()
    if not normalized:
        raise ValidationError('Note text is required.')
    if len(normalized) > config.MAX_NOTE_LENGTH:
        raise ValidationError(f'Notes must be {config.MAX_NOTE_LENGTH} characters or fewer.')
    return normalized


def _owned_appointment(db: Session, appointment_id: int, faculty_id: int | None) -> Appointment:
    appointment = get_appointment(db, appointment_id, lock=True)
    if faculty_id is None or appointment.faculty_id != faculty_id:
        raise AuthorizationError('Not authorized for this appointment')
    return appointment


def get_note(db: Session, appointment_id: int) -> str:
    with database_errors(db):
        return get_appointment(db, appointment_id).notes or ''


def set_note(db: Session, appointment_id: int, faculty_id: int | None, text: str | None) -> str:
    """Replace the note thread with ``text``. An empty text clears it."""
    normalized = (text or '').strip()
    if len(normalized) > config.MAX_NOTE_LENGTH:
        raise ValidationError(f'Notes must be {config.MAX_NOTE_LENGTH} characters or fewer.')

    with database_errors(db):
        appointment = _owned_appointment(db, appointment_id, faculty_id)
        appointment.notes = normalized
        db.commit()
        return appointment.notes


def append_comment(db: Session, appointment_id: int, faculty_id: int | None, text: str | None) -> str:
    normalized = _validate_text(text)

    with database_errors(db):
        appointment = _owned_appointment(db, appointment_id, faculty_id)
        stamp = utcnow().strftime('%Y-%m-%d %H:%M:%S')
        line = f'[{stamp}] Faculty#{faculty_id}: {normalized}'
        appointment.notes = f'{appointment.notes}\n{line}' if appointment.notes else line
        db.commit()
        return appointment.notes
