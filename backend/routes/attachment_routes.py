from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from backend.database import get_db
from backend.schemas import AttachmentResponse
from backend.services.storage import LocalFileStorage, attach_file, attachment_path

router = APIRouter(tags=['attachments'])


def get_storage() -> LocalFileStorage:
    return LocalFileStorage()


@router.post('/{appointment_id}/{field}', response_model=AttachmentResponse, status_code=status.HTTP_201_CREATED)
def upload_attachment(
    appointment_id: int,
    field: str,
    student_id: int = Form(..., alias='studentId'),
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    storage: LocalFileStorage = Depends(get_storage),
):
    attach_file(
        db,
        storage,
        appointment_id,
        student_id,
        field,
        filename=file.filename,
        content_type=file.content_type,
        stream=file.file,
    )
    return AttachmentResponse(
        appointment_id=appointment_id,
        field=field,
        url=f'/attachments/{appointment_id}/{field}',
    )


@router.get('/{appointment_id}/{field}')
def download_attachment(
    appointment_id: int,
    field: str,
    db: Session = Depends(get_db),
    storage: LocalFileStorage = Depends(get_storage),
):
    return FileResponse(attachment_path(db, storage, appointment_id, field))
