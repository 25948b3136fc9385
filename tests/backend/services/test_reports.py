from datetime import date

import pytest

from backend.core import config
from backend.core.errors import ValidationError
from backend.models.announcement import Announcement
from backend.services import reports

TODAY = date(2024, 5, 1)


@pytest.fixture
def schedule(db_session, campus, make_appointment):
    return {
        'past': make_appointment(student_id=1, slot_date=date(2024, 4, 20), category='advising', status='APPROVED'),
        'advising': make_appointment(student_id=1, time='12:00 PM', category='advising'),
        'thesis': make_appointment(student_id=2, time='12:30 PM', category='thesis'),
        'registration': make_appointment(
            student_id=3, faculty_id=8, slot_date=date(2024, 5, 2), category='Registration',
        ),
        'payment': make_appointment(
            student_id=4, slot_date=date(2024, 5, 3), category='financial', status='REJECTED',
        ),
    }


def test_pending_lists_waiting_for_faculty(db_session, schedule) -> None:
    pending = reports.list_pending(db_session, 7)
    advising_only = reports.list_pending(db_session, 7, category='advising')

    assert [a.id for a in pending] == [schedule['advising'].id, schedule['thesis'].id]
    assert [a.id for a in advising_only] == [schedule['advising'].id]
    assert pending[0].student.name == 'Sarah Alduhaim'


def test_student_appointments_in_date_order(db_session, schedule) -> None:
    mine = reports.list_student_appointments(db_session, 1)

    assert [a.id for a in mine] == [schedule['past'].id, schedule['advising'].id]


def test_faculty_upcoming_filters(db_session, schedule) -> None:
    academic = reports.list_faculty_upcoming(db_session, 7, only_academic=True)
    financial = reports.list_faculty_upcoming(db_session, 7, category='financial')
    everything = reports.list_faculty_upcoming(db_session, 7, category='all')

    assert {a.category for a in academic} == {'advising', 'thesis'}
    assert [a.id for a in financial] == [schedule['payment'].id]
    assert len(everything) == 4


def test_faculty_categories_are_distinct_and_sorted(db_session, schedule, make_appointment) -> None:
    make_appointment(student_id=2, time='12:45 PM', category='  ')

    assert reports.list_faculty_categories(db_session, 7) == ['advising', 'financial', 'thesis']


def test_student_history_by_id_and_name(db_session, schedule) -> None:
    by_id = reports.search_student_history(db_session, '1')
    by_name = reports.search_student_history(db_session, 'raghad')

    assert [a.id for a in by_id] == [schedule['advising'].id, schedule['past'].id]
    assert [a.id for a in by_name] == [schedule['thesis'].id]
    assert reports.search_student_history(db_session, '   ') == []


def test_staff_upcoming_defaults_to_today_forward(db_session, schedule) -> None:
    upcoming = reports.list_staff_upcoming(db_session, today=TODAY)

    assert schedule['past'].id not in {a.id for a in upcoming}
    assert [a.id for a in upcoming][:2] == [schedule['advising'].id, schedule['thesis'].id]


def test_staff_upcoming_filters_search_and_paging(db_session, schedule) -> None:
    ranged = reports.list_staff_upcoming(db_session, date_from='2024-04-01', date_to='2024-04-30')
    rejected = reports.list_staff_upcoming(db_session, status='rejected', today=TODAY)
    by_faculty = reports.list_staff_upcoming(db_session, q='suad', today=TODAY)
    newest_first = reports.list_staff_upcoming(db_session, order='DESC', limit=1, today=TODAY)
    second_page = reports.list_staff_upcoming(db_session, limit=1, offset=1, today=TODAY)

    assert [a.id for a in ranged] == [schedule['past'].id]
    assert [a.id for a in rejected] == [schedule['payment'].id]
    assert [a.id for a in by_faculty] == [schedule['registration'].id]
    assert [a.id for a in newest_first] == [schedule['payment'].id]
    assert [a.id for a in second_page] == [schedule['thesis'].id]


def test_staff_upcoming_rejects_bad_status(db_session, schedule) -> None:
    with pytest.raises(ValidationError):
        reports.list_staff_upcoming(db_session, status='ARCHIVED', today=TODAY)


def test_staff_overview_sorting(db_session, schedule) -> None:
    by_category = reports.staff_overview(db_session, sort_by='category', today=TODAY)

    assert [a.category for a in by_category] == ['Registration', 'advising', 'financial', 'thesis']


def test_staff_inbox_returns_newest_first(db_session, schedule) -> None:
    inbox = reports.staff_inbox(db_session, limit=2)

    assert [a.id for a in inbox] == [schedule['payment'].id, schedule['registration'].id]


def test_queue_summary_and_status(db_session, schedule) -> None:
    summary = reports.queue_summary(db_session)
    advising = reports.queue_summary(db_session, category='advising')

    assert summary == {'queue': [{'position': 1}, {'position': 2}, {'position': 3}], 'eta_minutes': 45}
    assert advising['eta_minutes'] == 15

    assert reports.queue_status(db_session, 2) == {'department': 'thesis', 'waiting': 1}
    assert reports.queue_status(db_session, 4) == {'department': None, 'waiting': 0}


def test_latest_announcement(db_session) -> None:
    assert reports.latest_announcement(db_session) is None

    db_session.add(Announcement(message='Registration opens Sunday'))
    db_session.add(Announcement(message='Old notice', active=False))
    db_session.commit()

    assert reports.latest_announcement(db_session).message == 'Registration opens Sunday'


@pytest.fixture
def day_catalog(monkeypatch):
    monkeypatch.setattr(config, 'SLOT_CATALOG', ['9:00 AM', '10:00 AM', '11:30 AM', '1:00 PM'])


def test_slot_labels_sort_in_catalog_order(db_session, campus, make_appointment, day_catalog) -> None:
    for student_id, time in ((1, '1:00 PM'), (2, '10:00 AM'), (3, '9:00 AM'), (4, '11:30 AM')):
        make_appointment(student_id=student_id, time=time)

    pending = reports.list_pending(db_session, 7)
    latest_first = reports.list_staff_upcoming(db_session, sort_by='time', order='DESC', today=TODAY)

    assert [a.time for a in pending] == ['9:00 AM', '10:00 AM', '11:30 AM', '1:00 PM']
    assert [a.time for a in latest_first] == ['1:00 PM', '11:30 AM', '10:00 AM', '9:00 AM']
