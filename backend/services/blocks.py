import logging
from datetime import date

from sqlalchemy.orm import Session

from backend.core.errors import ValidationError
from backend.database import database_errors
from backend.models.blocked_slot import BlockedSlot
from backend.services.booking import lock_provider
from backend.services.slots import normalize_time_label, parse_slot_date, slot_position

logger = logging.getLogger(__name__)


def block_slot(
    db: Session,
    faculty_id: int | None,
    slot_date: date | str | None,
    time_label: str | None,
    reason: str | None = None,
) -> tuple[BlockedSlot, bool]:
    """Block a slot for ``faculty_id``; returns the row and whether it was created."""
    if not faculty_id:
        raise ValidationError('facultyId, date, time are required.')

    slot_date = parse_slot_date(slot_date)
    time_label = normalize_time_label(time_label)

    with database_errors(db):
        # Serialises with bookings for the same provider.
        lock_provider(db, faculty_id)
        existing = db.query(BlockedSlot).filter(
            BlockedSlot.faculty_id == faculty_id,
            BlockedSlot.date == slot_date,
            BlockedSlot.time == time_label,
        ).first()
        if existing is not None:
            db.rollback()
            return existing, False

        blocked = BlockedSlot(
            faculty_id=faculty_id,
            date=slot_date,
            time=time_label,
            reason=(reason or '').strip() or None,
        )
        db.add(blocked)
        db.commit()
        db.refresh(blocked)

    logger.info('Provider %s blocked %s at %s', faculty_id, slot_date, time_label)
    return blocked, True


def unblock_slot(db: Session, faculty_id: int | None, slot_date: date | str | None, time_label: str | None) -> bool:
    if not faculty_id:
        raise ValidationError('facultyId, date, time are required.')

    slot_date = parse_slot_date(slot_date)
    time_label = normalize_time_label(time_label)

    with database_errors(db):
        deleted = db.query(BlockedSlot).filter(
            BlockedSlot.faculty_id == faculty_id,
            BlockedSlot.date == slot_date,
            BlockedSlot.time == time_label,
        ).delete(synchronize_session=False)
        db.commit()

    if deleted:
        logger.info('Provider %s unblocked %s at %s', faculty_id, slot_date, time_label)
    return bool(deleted)


def list_blocked_slots(db: Session, faculty_id: int, slot_date: date | str | None = None) -> list[BlockedSlot]:
    with database_errors(db):
        query = db.query(BlockedSlot).filter(BlockedSlot.faculty_id == faculty_id)
        if slot_date:
            query = query.filter(BlockedSlot.date == parse_slot_date(slot_date))

        return query.order_by(BlockedSlot.date.asc(), slot_position(BlockedSlot.time).asc()).all()
