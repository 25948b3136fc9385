import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.core.errors import NotFoundError
from backend.database import database_errors
from backend.models.notification import Notification

logger = logging.getLogger(__name__)


def notify(db: Session, to_user_id: int, title: str, body: str) -> Notification | None:
    """Create a notification for ``to_user_id``.

    Delivery is best effort: failures are logged and never raised, so callers
    must have committed their own work before calling this.
    """
    try:
        notification = Notification(to_user_id=to_user_id, title=title, body=body, read=False)
        db.add(notification)
        db.commit()
        db.refresh(notification)
        return notification
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning('Notification for user %s failed: %s', to_user_id, exc)
        return None


def list_notifications(db: Session, user_id: int) -> list[Notification]:
    with database_errors(db):
        return db.query(Notification).filter(
            Notification.to_user_id == user_id,
        ).order_by(Notification.id.desc()).all()


def mark_read(db: Session, notification_id: int, read: bool = True) -> Notification:
    with database_errors(db):
        notification = db.query(Notification).filter(Notification.id == notification_id).first()
        if notification is None:
            raise NotFoundError('Notification not found')

        notification.read = read
        db.commit()
        db.refresh(notification)
        return notification
