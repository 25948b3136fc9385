from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from backend.database import get_db
from backend.schemas import MarkReadRequest, NotificationResponse
from backend.services import notifications

router = APIRouter(tags=['notifications'])


@router.get('/user/{user_id}', response_model=list[NotificationResponse])
def list_user_notifications(user_id: int, db: Session = Depends(get_db)):
    return notifications.list_notifications(db, user_id)


@router.put('/{notification_id}/read', response_model=NotificationResponse)
def mark_notification_read(
    notification_id: int,
    data: MarkReadRequest | None = Body(default=None),
    db: Session = Depends(get_db),
):
    return notifications.mark_read(db, notification_id, read=data.read if data else True)
