from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session

from backend.database import database_errors, get_db
from backend.schemas import (
    AppointmentResponse,
    AvailabilitySlotResponse,
    BookAppointmentRequest,
    CancelRequest,
    DecisionRequest,
    DecisionResponse,
    MessageResponse,
    NoteRequest,
    NoteResponse,
    RescheduleRequest,
)
from backend.services import booking, decisions, notes, reports
from backend.services.slots import get_availability, parse_slot_date

router = APIRouter(tags=['appointments'])


@router.get('/available/{provider_id}/{slot_date}', response_model=list[AvailabilitySlotResponse])
def list_available_slots(provider_id: int, slot_date: str, db: Session = Depends(get_db)):
    parsed_date = parse_slot_date(slot_date)

    with database_errors(db):
        return get_availability(db, provider_id, parsed_date)


@router.post('/book', response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
def book_appointment(data: BookAppointmentRequest, db: Session = Depends(get_db)):
    appointment = booking.book_appointment(
        db,
        student_id=data.student_id,
        provider_id=data.provider_id,
        slot_date=data.date,
        time_label=data.time,
        category=data.category,
        reason=data.reason,
    )
    return AppointmentResponse.from_appointment(appointment)


@router.put('/{appointment_id}/decision', response_model=DecisionResponse)
def decide_appointment(appointment_id: int, data: DecisionRequest, db: Session = Depends(get_db)):
    return decisions.decide_appointment(db, appointment_id, data.action, data.faculty_id)


@router.post('/cancel/{appointment_id}', response_model=MessageResponse)
def cancel_appointment(
    appointment_id: int,
    data: CancelRequest | None = Body(default=None),
    db: Session = Depends(get_db),
):
    booking.cancel_appointment(db, appointment_id, actor_id=data.actor_id if data else None)
    return MessageResponse(message='Appointment canceled.')


@router.post('/reschedule/{appointment_id}', response_model=AppointmentResponse)
def reschedule_appointment(appointment_id: int, data: RescheduleRequest, db: Session = Depends(get_db)):
    appointment = booking.reschedule_appointment(
        db,
        appointment_id,
        slot_date=data.date,
        time_label=data.time,
        actor_id=data.actor_id,
    )
    return AppointmentResponse.from_appointment(appointment)


@router.get('/pending/{faculty_id}', response_model=list[AppointmentResponse])
def list_pending_appointments(
    faculty_id: int,
    category: str | None = Query(default=None),
    db: Session = Depends(get_db),
):
    return [AppointmentResponse.from_appointment(a) for a in reports.list_pending(db, faculty_id, category)]


@router.get('/my/{student_id}', response_model=list[AppointmentResponse])
def list_my_appointments(student_id: int, db: Session = Depends(get_db)):
    return [AppointmentResponse.from_appointment(a) for a in reports.list_student_appointments(db, student_id)]


@router.get('/upcoming/{faculty_id}', response_model=list[AppointmentResponse])
def list_faculty_upcoming(
    faculty_id: int,
    category: str | None = Query(default=None),
    only_academic: bool = Query(default=False, alias='onlyAcademic'),
    db: Session = Depends(get_db),
):
    appointments = reports.list_faculty_upcoming(db, faculty_id, category=category, only_academic=only_academic)
    return [AppointmentResponse.from_appointment(a) for a in appointments]


@router.get('/categories/{faculty_id}', response_model=list[str])
def list_faculty_categories(faculty_id: int, db: Session = Depends(get_db)):
    return reports.list_faculty_categories(db, faculty_id)


@router.get('/{appointment_id}/note', response_model=NoteResponse)
def get_appointment_note(appointment_id: int, db: Session = Depends(get_db)):
    return NoteResponse(note=notes.get_note(db, appointment_id))


@router.put('/{appointment_id}/note', response_model=NoteResponse)
def set_appointment_note(appointment_id: int, data: NoteRequest, db: Session = Depends(get_db)):
    note = notes.set_note(db, appointment_id, data.faculty_id, data.text)
    return NoteResponse(note=note, message='Notes updated')


@router.post('/comment/{appointment_id}', response_model=NoteResponse)
def add_appointment_comment(appointment_id: int, data: NoteRequest, db: Session = Depends(get_db)):
    note = notes.append_comment(db, appointment_id, data.faculty_id, data.text)
    return NoteResponse(note=note, message='Comment added')


@router.get('/{appointment_id}', response_model=AppointmentResponse)
def get_appointment(appointment_id: int, db: Session = Depends(get_db)):
    with database_errors(db):
        return AppointmentResponse.from_appointment(booking.get_appointment(db, appointment_id))
