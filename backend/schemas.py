"""Request and response models for the HTTP API.

Request bodies accept both the camelCase names used by the web client
(``studentId``, ``personId``, ``facultyId``) and snake_case.
"""

from datetime import date as date_type, datetime

from pydantic import AliasChoices, BaseModel, Field

from backend.models.appointment import Appointment


def _alias(*names: str):
    return AliasChoices(*names)


class AvailabilitySlotResponse(BaseModel):
    time: str
    available: bool


class BookAppointmentRequest(BaseModel):
    student_id: int | None = Field(default=None, validation_alias=_alias('student_id', 'studentId'))
    provider_id: int | None = Field(
        default=None,
        validation_alias=_alias('provider_id', 'personId', 'facultyId', 'faculty_id'),
    )
    date: date_type | None = None
    time: str | None = None
    category: str | None = None
    reason: str | None = None


class DecisionRequest(BaseModel):
    action: str | None = None
    faculty_id: int | None = Field(default=None, validation_alias=_alias('faculty_id', 'facultyId'))


class DecisionResponse(BaseModel):
    id: int
    status: str
    decided_by_id: int | None = None
    decided_at: datetime | None = None

    class Config:
        from_attributes = True


class CancelRequest(BaseModel):
    actor_id: int | None = Field(default=None, validation_alias=_alias('actor_id', 'actorId'))


class RescheduleRequest(BaseModel):
    date: date_type | None = None
    time: str | None = None
    actor_id: int | None = Field(default=None, validation_alias=_alias('actor_id', 'actorId'))


class MessageResponse(BaseModel):
    message: str


class AppointmentResponse(BaseModel):
    id: int
    student_id: int
    faculty_id: int
    date: date_type
    time: str
    category: str | None = None
    reason: str = ''
    status: str
    notes: str = ''
    decided_by_id: int | None = None
    decided_at: datetime | None = None
    created_at: datetime | None = None
    student_name: str | None = None
    faculty_name: str | None = None
    transcript_url: str | None = None
    payment_proof_url: str | None = None

    @classmethod
    def from_appointment(cls, appointment: Appointment) -> 'AppointmentResponse':
        return cls(
            id=appointment.id,
            student_id=appointment.student_id,
            faculty_id=appointment.faculty_id,
            date=appointment.date,
            time=appointment.time,
            category=appointment.category,
            reason=appointment.reason or '',
            status=appointment.status or 'WAITING',
            notes=appointment.notes or '',
            decided_by_id=appointment.decided_by_id,
            decided_at=appointment.decided_at,
            created_at=appointment.created_at,
            student_name=appointment.student.display_name if appointment.student else None,
            faculty_name=appointment.faculty.display_name if appointment.faculty else None,
            transcript_url=f'/attachments/{appointment.id}/transcript' if appointment.transcript_path else None,
            payment_proof_url=(
                f'/attachments/{appointment.id}/payment_proof' if appointment.payment_proof_path else None
            ),
        )


class StudentHistoryResponse(BaseModel):
    items: list[AppointmentResponse]
    query: str


class NoteRequest(BaseModel):
    faculty_id: int | None = Field(default=None, validation_alias=_alias('faculty_id', 'facultyId'))
    text: str | None = None


class NoteResponse(BaseModel):
    note: str
    message: str | None = None


class BlockRequest(BaseModel):
    faculty_id: int | None = Field(default=None, validation_alias=_alias('faculty_id', 'facultyId'))
    date: date_type | None = None
    time: str | None = None
    reason: str | None = None


class BlockedSlotResponse(BaseModel):
    id: int
    faculty_id: int
    date: date_type
    time: str
    reason: str | None = None

    class Config:
        from_attributes = True


class BlockResultResponse(BaseModel):
    message: str
    block: BlockedSlotResponse


class NotificationResponse(BaseModel):
    id: int
    to_user_id: int
    title: str
    body: str
    read: bool
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class MarkReadRequest(BaseModel):
    read: bool = True


class QueuePosition(BaseModel):
    position: int


class QueueSummaryResponse(BaseModel):
    queue: list[QueuePosition]
    eta_minutes: int


class QueueStatusResponse(BaseModel):
    department: str | None = None
    waiting: int


class AnnouncementResponse(BaseModel):
    id: int | None = None
    message: str
    active: bool | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class AttachmentResponse(BaseModel):
    appointment_id: int
    field: str
    url: str
