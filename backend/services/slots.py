"""Slot catalog, capacity rule and availability calculation."""

from datetime import date, datetime

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from backend.core import config
from backend.core.errors import SlotBlockedError, SlotFullError, ValidationError
from backend.models.appointment import Appointment
from backend.models.blocked_slot import BlockedSlot
from backend.services.lifecycle import RELEASED_STATUSES

RELEASED_STATUS_VALUES = [status.value for status in RELEASED_STATUSES]


def slot_catalog() -> list[str]:
    return list(config.SLOT_CATALOG)


def slot_position(column):
    """Sort key for a time-label column in catalog order; unknown labels sort last."""
    return case(
        {label: position for position, label in enumerate(config.SLOT_CATALOG)},
        value=column,
        else_=len(config.SLOT_CATALOG),
    )


def normalize_time_label(value: str | None) -> str:
    label = (value or '').strip()
    if not label:
        raise ValidationError('time is required.')

    for catalog_label in config.SLOT_CATALOG:
        if catalog_label.lower() == label.lower():
            return catalog_label

    raise ValidationError(f'Unknown time slot: {label}')


def parse_slot_date(value: date | str | None) -> date:
    if value is None or value == '':
        raise ValidationError('date is required.')
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    try:
        return date.fromisoformat(str(value).strip())
    except ValueError as exc:
        raise ValidationError('date must be formatted as YYYY-MM-DD.') from exc


def count_slot_bookings(
    db: Session,
    provider_id: int,
    slot_date: date,
    time_label: str,
    exclude_id: int | None = None,
) -> int:
    query = db.query(func.count(Appointment.id)).filter(
        Appointment.faculty_id == provider_id,
        Appointment.date == slot_date,
        Appointment.time == time_label,
        Appointment.status.not_in(RELEASED_STATUS_VALUES),
    )
    if exclude_id is not None:
        query = query.filter(Appointment.id != exclude_id)

    return query.scalar() or 0


def is_slot_blocked(db: Session, provider_id: int, slot_date: date, time_label: str) -> bool:
    blocked = db.query(BlockedSlot.id).filter(
        BlockedSlot.faculty_id == provider_id,
        BlockedSlot.date == slot_date,
        BlockedSlot.time == time_label,
    ).first()
    return blocked is not None


def ensure_slot_open(
    db: Session,
    provider_id: int,
    slot_date: date,
    time_label: str,
    exclude_id: int | None = None,
) -> None:
    """Raise unless the slot is unblocked and below capacity."""
    if is_slot_blocked(db, provider_id, slot_date, time_label):
        raise SlotBlockedError('Slot is blocked by faculty.')

    if count_slot_bookings(db, provider_id, slot_date, time_label, exclude_id=exclude_id) >= config.MAX_PER_SLOT:
        raise SlotFullError('Slot is full')


def get_availability(db: Session, provider_id: int, slot_date: date) -> list[dict]:
    blocked_times = {
        blocked_time
        for (blocked_time,) in db.query(BlockedSlot.time).filter(
            BlockedSlot.faculty_id == provider_id,
            BlockedSlot.date == slot_date,
        ).all()
    }

    counts = dict(
        db.query(Appointment.time, func.count(Appointment.id)).filter(
            Appointment.faculty_id == provider_id,
            Appointment.date == slot_date,
            Appointment.status.not_in(RELEASED_STATUS_VALUES),
        ).group_by(Appointment.time).all()
    )

    return [
        {
            'time': time_label,
            'available': time_label not in blocked_times and counts.get(time_label, 0) < config.MAX_PER_SLOT,
        }
        for time_label in config.SLOT_CATALOG
    ]
