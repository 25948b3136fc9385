from datetime import date

import pytest

from backend.core import config
from backend.core.errors import NotFoundError, ValidationError
from backend.services.blocks import block_slot, list_blocked_slots, unblock_slot


def test_block_slot_is_idempotent(db_session, campus) -> None:
    blocked, created = block_slot(db_session, 7, '2024-05-01', '12:15 PM', reason='Department meeting')
    again, created_again = block_slot(db_session, 7, '2024-05-01', '12:15 pm')

    assert created is True
    assert created_again is False
    assert again.id == blocked.id
    assert again.reason == 'Department meeting'


def test_list_blocked_slots_orders_and_filters(db_session, campus) -> None:
    block_slot(db_session, 7, '2024-05-02', '12:00 PM')
    block_slot(db_session, 7, '2024-05-01', '12:45 PM')
    block_slot(db_session, 7, '2024-05-01', '12:15 PM')
    block_slot(db_session, 8, '2024-05-01', '12:15 PM')

    all_blocks = list_blocked_slots(db_session, 7)
    may_first = list_blocked_slots(db_session, 7, '2024-05-01')

    assert [(b.date, b.time) for b in all_blocks] == [
        (date(2024, 5, 1), '12:15 PM'),
        (date(2024, 5, 1), '12:45 PM'),
        (date(2024, 5, 2), '12:00 PM'),
    ]
    assert len(may_first) == 2


def test_unblock_slot(db_session, campus) -> None:
    block_slot(db_session, 7, '2024-05-01', '12:15 PM')

    assert unblock_slot(db_session, 7, '2024-05-01', '12:15 PM') is True
    assert unblock_slot(db_session, 7, '2024-05-01', '12:15 PM') is False
    assert list_blocked_slots(db_session, 7) == []


def test_block_slot_validation(db_session, campus) -> None:
    with pytest.raises(ValidationError):
        block_slot(db_session, None, '2024-05-01', '12:15 PM')

    with pytest.raises(ValidationError):
        block_slot(db_session, 7, '2024-05-01', '8:00 AM')

    with pytest.raises(NotFoundError):
        block_slot(db_session, 99, '2024-05-01', '12:15 PM')


def test_blocks_listed_in_catalog_order(db_session, campus, monkeypatch) -> None:
    monkeypatch.setattr(config, 'SLOT_CATALOG', ['9:00 AM', '10:00 AM', '1:00 PM'])
    for time in ('1:00 PM', '9:00 AM', '10:00 AM'):
        block_slot(db_session, 7, date(2024, 5, 1), time)

    assert [b.time for b in list_blocked_slots(db_session, 7)] == ['9:00 AM', '10:00 AM', '1:00 PM']
