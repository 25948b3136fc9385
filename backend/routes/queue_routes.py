from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from backend.database import get_db
from backend.schemas import AnnouncementResponse, QueueStatusResponse, QueueSummaryResponse
from backend.services import reports

router = APIRouter(tags=['queue'])


@router.get('/queues/summary', response_model=QueueSummaryResponse)
def queue_summary(
    category: str | None = Query(default=None),
    faculty_id: int | None = Query(default=None, alias='facultyId'),
    db: Session = Depends(get_db),
):
    return reports.queue_summary(db, category=category, faculty_id=faculty_id)


@router.get('/queue/status/{student_id}', response_model=QueueStatusResponse)
def queue_status(student_id: int, db: Session = Depends(get_db)):
    return reports.queue_status(db, student_id)


@router.get('/announcements/latest', response_model=AnnouncementResponse)
def latest_announcement(db: Session = Depends(get_db)):
    announcement = reports.latest_announcement(db)
    if announcement is None:
        return AnnouncementResponse(message='No announcements')
    return announcement
