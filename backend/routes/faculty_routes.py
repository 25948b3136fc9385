from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from backend.database import get_db
from backend.schemas import BlockRequest, BlockResultResponse, BlockedSlotResponse, MessageResponse
from backend.services import blocks

router = APIRouter(tags=['faculty'])


@router.post('/blocks', response_model=BlockResultResponse)
def create_blocked_slot(data: BlockRequest, db: Session = Depends(get_db)):
    blocked, created = blocks.block_slot(db, data.faculty_id, data.date, data.time, data.reason)
    return BlockResultResponse(
        message='Time blocked.' if created else 'Already blocked.',
        block=BlockedSlotResponse.model_validate(blocked),
    )


# Older clients post to the singular path.
router.add_api_route(
    '/block',
    create_blocked_slot,
    methods=['POST'],
    response_model=BlockResultResponse,
    include_in_schema=False,
)


@router.get('/blocks', response_model=list[BlockedSlotResponse])
def list_blocked_slots(
    faculty_id: int = Query(..., alias='facultyId'),
    slot_date: str | None = Query(default=None, alias='date'),
    db: Session = Depends(get_db),
):
    return blocks.list_blocked_slots(db, faculty_id, slot_date)


@router.delete('/blocks', response_model=MessageResponse)
def remove_blocked_slot(data: BlockRequest = Body(...), db: Session = Depends(get_db)):
    removed = blocks.unblock_slot(db, data.faculty_id, data.date, data.time)
    return MessageResponse(message='Unblocked.' if removed else 'Nothing to unblock.')
