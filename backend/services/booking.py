"""Booking, cancellation and rescheduling of appointments.

Capacity checks and the write that depends on them run in one transaction
that holds a row lock on the provider, so two bookers cannot both see the
last free seat of a slot.
"""

import logging
from datetime import date

from sqlalchemy.orm import Session

from backend.core.errors import NotFoundError, ValidationError
from backend.database import database_errors
from backend.models.appointment import Appointment
from backend.models.user import PROVIDER_ROLES, User
from backend.services.lifecycle import Action, AppointmentStatus, transition
from backend.services.slots import ensure_slot_open, normalize_time_label, parse_slot_date

logger = logging.getLogger(__name__)


def _clean_text(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = value.strip()
    return normalized or None


def lock_provider(db: Session, provider_id: int) -> User:
    provider = db.query(User).filter(User.id == provider_id).with_for_update().first()
    if provider is None:
        raise NotFoundError('Provider not found')
    if provider.role not in PROVIDER_ROLES:
        raise ValidationError('personId must reference a faculty or staff member.')
    return provider


def get_appointment(db: Session, appointment_id: int, lock: bool = False) -> Appointment:
    query = db.query(Appointment).filter(Appointment.id == appointment_id)
    if lock:
        query = query.with_for_update().populate_existing()

    appointment = query.first()
    if appointment is None:
        raise NotFoundError('Appointment not found')
    return appointment


def book_appointment(
    db: Session,
    student_id: int | None,
    provider_id: int | None,
    slot_date: date | str | None,
    time_label: str | None,
    category: str | None = None,
    reason: str | None = None,
    transcript_path: str | None = None,
    payment_proof_path: str | None = None,
) -> Appointment:
    if not student_id or not provider_id or not slot_date or not time_label:
        raise ValidationError('studentId, personId, date and time are required.')

    slot_date = parse_slot_date(slot_date)
    time_label = normalize_time_label(time_label)

    with database_errors(db):
        lock_provider(db, provider_id)
        ensure_slot_open(db, provider_id, slot_date, time_label)

        appointment = Appointment(
            student_id=student_id,
            faculty_id=provider_id,
            date=slot_date,
            time=time_label,
            category=_clean_text(category),
            reason=_clean_text(reason) or '',
            transcript_path=transcript_path,
            payment_proof_path=payment_proof_path,
            status=AppointmentStatus.WAITING.value,
        )
        db.add(appointment)
        db.commit()
        db.refresh(appointment)

    logger.info(
        'Booked appointment %s for student %s with provider %s on %s at %s',
        appointment.id, student_id, provider_id, slot_date, time_label,
    )
    return appointment


def cancel_appointment(db: Session, appointment_id: int, actor_id: int | None = None) -> Appointment:
    with database_errors(db):
        appointment = get_appointment(db, appointment_id, lock=True)
        allowed = None if actor_id is None else {appointment.student_id, appointment.faculty_id}
        appointment.status = transition(appointment.status, Action.CANCEL, actor_id, allowed).value
        db.commit()
        db.refresh(appointment)

    logger.info('Canceled appointment %s', appointment_id)
    return appointment


def reschedule_appointment(
    db: Session,
    appointment_id: int,
    slot_date: date | str | None,
    time_label: str | None,
    actor_id: int | None = None,
) -> Appointment:
    slot_date = parse_slot_date(slot_date)
    time_label = normalize_time_label(time_label)

    with database_errors(db):
        provider_id = get_appointment(db, appointment_id).faculty_id
        # Provider before appointment, the same order booking takes its lock in.
        lock_provider(db, provider_id)
        appointment = get_appointment(db, appointment_id, lock=True)

        allowed = None if actor_id is None else {appointment.student_id, appointment.faculty_id}
        new_status = transition(appointment.status, Action.RESCHEDULE, actor_id, allowed)
        ensure_slot_open(db, provider_id, slot_date, time_label, exclude_id=appointment.id)

        appointment.date = slot_date
        appointment.time = time_label
        appointment.status = new_status.value
        db.commit()
        db.refresh(appointment)

    logger.info('Rescheduled appointment %s to %s at %s', appointment_id, slot_date, time_label)
    return appointment
