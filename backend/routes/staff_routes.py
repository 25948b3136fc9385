from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from backend.database import get_db
from backend.schemas import AppointmentResponse, StudentHistoryResponse
from backend.services import reports

router = APIRouter(tags=['staff'])


@router.get('/student-history', response_model=StudentHistoryResponse)
def student_history(q: str = Query(default=''), db: Session = Depends(get_db)):
    query_text = q.strip()
    appointments = reports.search_student_history(db, query_text)
    return StudentHistoryResponse(
        items=[AppointmentResponse.from_appointment(a) for a in appointments],
        query=query_text,
    )


@router.get('/appointments/upcoming', response_model=list[AppointmentResponse])
def staff_upcoming(
    date_from: str | None = Query(default=None, alias='from'),
    date_to: str | None = Query(default=None, alias='to'),
    category: str | None = Query(default=None),
    status: str | None = Query(default=None),
    q: str | None = Query(default=None),
    sort_by: str | None = Query(default=None, alias='sortBy'),
    order: str = Query(default='ASC'),
    limit: int | None = Query(default=None, ge=1, le=500),
    offset: int | None = Query(default=None, ge=0),
    db: Session = Depends(get_db),
):
    appointments = reports.list_staff_upcoming(
        db,
        date_from=date_from,
        date_to=date_to,
        category=category,
        status=status,
        q=q,
        sort_by=sort_by,
        order=order,
        limit=limit,
        offset=offset,
    )
    return [AppointmentResponse.from_appointment(a) for a in appointments]


@router.get('/overview', response_model=list[AppointmentResponse])
def staff_overview(
    sort_by: str | None = Query(default=None, alias='sortBy'),
    order: str = Query(default='ASC'),
    db: Session = Depends(get_db),
):
    return [AppointmentResponse.from_appointment(a) for a in reports.staff_overview(db, sort_by, order)]


@router.get('/inbox/{staff_id}', response_model=list[AppointmentResponse])
def staff_inbox(staff_id: int, db: Session = Depends(get_db)):
    del staff_id
    return [AppointmentResponse.from_appointment(a) for a in reports.staff_inbox(db)]
