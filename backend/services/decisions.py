"""Approve/reject workflow for WAITING appointments."""

import logging

from sqlalchemy.orm import Session

from backend.core.clock import utcnow
from backend.core.errors import ValidationError
from backend.database import database_errors
from backend.models.appointment import Appointment
from backend.services.booking import get_appointment
from backend.services.lifecycle import parse_decision, transition
from backend.services.notifications import notify

logger = logging.getLogger(__name__)


def decision_message(appointment: Appointment) -> tuple[str, str]:
    status = appointment.status.lower()
    title = f'Appointment {status}'
    body = (
        f'Your {appointment.category or "appointment"} on {appointment.date.isoformat()} '
        f'at {appointment.time} was {status}.'
    )
    return title, body


def decide_appointment(db: Session, appointment_id: int, action: str, faculty_id: int | None) -> Appointment:
    """Approve or reject an appointment on behalf of its provider.

    The appointment row is locked for the whole read-check-write so two
    concurrent decisions cannot both observe WAITING. Only the provider named
    on the appointment may decide, and only once. The student notification is
    sent after the decision is committed and its failure is only logged.
    """
    decision = parse_decision(action)
    if not faculty_id:
        raise ValidationError('facultyId is required.')

    with database_errors(db):
        appointment = get_appointment(db, appointment_id, lock=True)
        new_status = transition(appointment.status, decision, faculty_id, {appointment.faculty_id})

        appointment.status = new_status.value
        appointment.decided_by_id = faculty_id
        appointment.decided_at = utcnow()
        db.commit()
        db.refresh(appointment)

    logger.info('Appointment %s %s by provider %s', appointment.id, new_status.value.lower(), faculty_id)

    _notify_student(db, appointment)
    return appointment


def _notify_student(db: Session, appointment: Appointment) -> None:
    try:
        title, body = decision_message(appointment)
    except (AttributeError, TypeError, ValueError) as exc:
        logger.warning('Decision notice for appointment %s not built: %s', appointment.id, exc)
        return
    notify(db, appointment.student_id, title, body)
