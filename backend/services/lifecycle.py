"""Appointment status lifecycle.

Every state change (decide, cancel, reschedule) goes through ``transition`` so
the guards live in one place.
"""

from enum import Enum
from typing import Iterable

from backend.core.errors import AuthorizationError, ConflictError, ValidationError


class AppointmentStatus(str, Enum):
    WAITING = 'WAITING'
    APPROVED = 'APPROVED'
    REJECTED = 'REJECTED'
    CONFIRMED = 'CONFIRMED'
    IN_PROGRESS = 'IN_PROGRESS'
    COMPLETED = 'COMPLETED'
    CANCELED = 'CANCELED'
    RESCHEDULED = 'RESCHEDULED'
    BLOCKED = 'BLOCKED'


class Action(str, Enum):
    APPROVE = 'APPROVE'
    REJECT = 'REJECT'
    CANCEL = 'CANCEL'
    RESCHEDULE = 'RESCHEDULE'


DECISION_OUTCOMES = {
    Action.APPROVE: AppointmentStatus.APPROVED,
    Action.REJECT: AppointmentStatus.REJECTED,
}

TERMINAL_STATUSES = frozenset({
    AppointmentStatus.CANCELED,
    AppointmentStatus.REJECTED,
    AppointmentStatus.COMPLETED,
})

RESCHEDULABLE_STATUSES = frozenset({
    AppointmentStatus.WAITING,
    AppointmentStatus.APPROVED,
    AppointmentStatus.CONFIRMED,
    AppointmentStatus.RESCHEDULED,
})

# Rows in these states free their slot.
RELEASED_STATUSES = frozenset({
    AppointmentStatus.CANCELED,
    AppointmentStatus.REJECTED,
})


def parse_status(value: str | AppointmentStatus | None) -> AppointmentStatus:
    if value is None:
        return AppointmentStatus.WAITING
    if isinstance(value, AppointmentStatus):
        return value

    try:
        return AppointmentStatus(str(value).strip().upper())
    except ValueError as exc:
        raise ValidationError(f'Unknown appointment status: {value}') from exc


def parse_decision(value: str | None) -> Action:
    """Accept APPROVE/REJECT as well as the APPROVED/REJECTED spelling."""
    normalized = str(value or '').strip().upper()
    aliases = {'APPROVED': 'APPROVE', 'REJECTED': 'REJECT'}
    normalized = aliases.get(normalized, normalized)

    if normalized not in (Action.APPROVE.value, Action.REJECT.value):
        raise ValidationError('action must be APPROVE or REJECT')

    return Action(normalized)


def transition(
    current: str | AppointmentStatus | None,
    action: Action,
    actor_id: int | None = None,
    allowed_actor_ids: Iterable[int] | None = None,
) -> AppointmentStatus:
    """Return the status ``action`` moves ``current`` to, or raise.

    When ``allowed_actor_ids`` is given the actor must be one of them. The
    actor check runs before the status guard.
    """
    if allowed_actor_ids is not None and actor_id not in set(allowed_actor_ids):
        raise AuthorizationError('Not authorized for this appointment.')

    status = parse_status(current)

    if action in DECISION_OUTCOMES:
        if status != AppointmentStatus.WAITING:
            raise ConflictError(f'Already {status.value.lower()}')
        return DECISION_OUTCOMES[action]

    if action == Action.CANCEL:
        if status in TERMINAL_STATUSES:
            raise ConflictError(f'Appointment is already {status.value.lower()}.')
        return AppointmentStatus.CANCELED

    if action == Action.RESCHEDULE:
        if status not in RESCHEDULABLE_STATUSES:
            raise ConflictError(f'Cannot reschedule a {status.value.lower()} appointment.')
        return AppointmentStatus.RESCHEDULED

    raise ValidationError(f'Unsupported action: {action}')
