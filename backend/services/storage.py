"""Local disk storage for appointment attachments (transcripts, payment proofs)."""

import logging
import os
import secrets
import time
from pathlib import Path
from typing import BinaryIO

from sqlalchemy.orm import Session

from backend.core import config
from backend.core.errors import AuthorizationError, NotFoundError, ValidationError
from backend.database import database_errors
from backend.services.booking import get_appointment

logger = logging.getLogger(__name__)

ATTACHMENT_FIELDS = {
    'transcript': 'transcript_path',
    'payment_proof': 'payment_proof_path',
    'paymentProof': 'payment_proof_path',
}

CHUNK_SIZE = 64 * 1024


class LocalFileStorage:
    def __init__(self, root: str | os.PathLike | None = None, max_bytes: int | None = None):
        self.root = Path(root or config.UPLOAD_DIR).resolve()
        self.max_bytes = max_bytes or config.MAX_UPLOAD_BYTES

    def store(self, field: str, filename: str | None, content_type: str | None, stream: BinaryIO) -> str:
        if content_type not in config.ALLOWED_UPLOAD_TYPES:
            raise ValidationError('Only PDF and PNG files are allowed for attachments.')

        extension = Path(filename or '').suffix.lower() or config.ALLOWED_UPLOAD_TYPES[content_type]
        self.root.mkdir(parents=True, exist_ok=True)
        target = self.root / f'{field}-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{extension}'

        written = 0
        try:
            with target.open('wb') as handle:
                while chunk := stream.read(CHUNK_SIZE):
                    written += len(chunk)
                    if written > self.max_bytes:
                        raise ValidationError(
                            f'Attachments must be {self.max_bytes // (1024 * 1024)} MB or smaller.'
                        )
                    handle.write(chunk)
        except ValidationError:
            target.unlink(missing_ok=True)
            raise

        logger.info('Stored %s attachment at %s (%d bytes)', field, target, written)
        return str(target)

    def retrieve(self, path: str | None) -> Path:
        if not path:
            raise NotFoundError('File not found')

        resolved = Path(path).resolve()
        if not resolved.is_relative_to(self.root) or not resolved.is_file():
            raise NotFoundError('File not found')
        return resolved


def _column_for(field: str) -> str:
    column = ATTACHMENT_FIELDS.get(field)
    if column is None:
        raise ValidationError('Invalid field')
    return column


def attach_file(
    db: Session,
    storage: LocalFileStorage,
    appointment_id: int,
    student_id: int | None,
    field: str,
    filename: str | None,
    content_type: str | None,
    stream: BinaryIO,
) -> str:
    column = _column_for(field)

    with database_errors(db):
        appointment = get_appointment(db, appointment_id)
        if student_id is None or appointment.student_id != student_id:
            raise AuthorizationError('Only the student who booked this appointment can attach files.')

        path = storage.store(field, filename, content_type, stream)
        setattr(appointment, column, path)
        db.commit()
        return path


def attachment_path(db: Session, storage: LocalFileStorage, appointment_id: int, field: str) -> Path:
    column = _column_for(field)

    with database_errors(db):
        appointment = get_appointment(db, appointment_id)
        return storage.retrieve(getattr(appointment, column))
