from datetime import date

import pytest

from backend.main import app
from backend.models.announcement import Announcement
from backend.models.notification import Notification
from backend.routes.attachment_routes import get_storage
from backend.services.storage import LocalFileStorage


def test_block_create_list_and_remove(client, campus) -> None:
    created = client.post(
        '/faculty/blocks',
        json={'facultyId': 7, 'date': '2024-05-01', 'time': '12:15 PM', 'reason': 'Meeting'},
    )
    duplicate = client.post('/faculty/block', json={'facultyId': 7, 'date': '2024-05-01', 'time': '12:15 PM'})
    listed = client.get('/faculty/blocks', params={'facultyId': 7, 'date': '2024-05-01'})
    removed = client.request('DELETE', '/faculty/blocks', json={'facultyId': 7, 'date': '2024-05-01', 'time': '12:15 PM'})
    removed_again = client.request(
        'DELETE', '/faculty/blocks', json={'facultyId': 7, 'date': '2024-05-01', 'time': '12:15 PM'},
    )

    assert created.json()['message'] == 'Time blocked.'
    assert created.json()['block']['reason'] == 'Meeting'
    assert duplicate.json()['message'] == 'Already blocked.'
    assert [block['time'] for block in listed.json()] == ['12:15 PM']
    assert removed.json() == {'message': 'Unblocked.'}
    assert removed_again.json() == {'message': 'Nothing to unblock.'}


def test_block_then_book_is_refused(client, campus) -> None:
    client.post('/faculty/blocks', json={'facultyId': 7, 'date': '2024-05-01', 'time': '12:15 PM'})

    response = client.post(
        '/appointments/book',
        json={'studentId': 1, 'personId': 7, 'date': '2024-05-01', 'time': '12:15 PM'},
    )

    assert response.status_code == 400
    assert response.json()['detail'] == 'Slot is blocked by faculty.'


def test_notifications_list_and_mark_read(client, db_session, campus) -> None:
    db_session.add_all([
        Notification(to_user_id=1, title='Appointment approved', body='First'),
        Notification(to_user_id=1, title='Appointment rejected', body='Second'),
        Notification(to_user_id=2, title='Appointment approved', body='Other'),
    ])
    db_session.commit()

    listed = client.get('/notifications/user/1')
    newest_id = listed.json()[0]['id']
    marked = client.put(f'/notifications/{newest_id}/read')
    unmarked = client.put(f'/notifications/{newest_id}/read', json={'read': False})
    missing = client.put('/notifications/999/read')

    assert [item['body'] for item in listed.json()] == ['Second', 'First']
    assert marked.json()['read'] is True
    assert unmarked.json()['read'] is False
    assert missing.status_code == 404


def test_staff_views(client, campus, make_appointment) -> None:
    today = date.today()
    make_appointment(student_id=1, slot_date=today, category='advising')
    make_appointment(student_id=2, faculty_id=8, slot_date=today, time='12:30 PM', category='Registration')

    history = client.get('/staff/student-history', params={'q': 'sarah'})
    empty_history = client.get('/staff/student-history')
    upcoming = client.get('/staff/appointments/upcoming', params={'q': 'suad'})
    overview = client.get('/staff/overview', params={'sortBy': 'time', 'order': 'DESC'})
    inbox = client.get('/staff/inbox/20')

    assert history.json()['query'] == 'sarah'
    assert [item['student_name'] for item in history.json()['items']] == ['Sarah Alduhaim']
    assert empty_history.json() == {'items': [], 'query': ''}
    assert [item['faculty_name'] for item in upcoming.json()] == ['Dr. Suad']
    assert [item['time'] for item in overview.json()] == ['12:30 PM', '12:15 PM']
    assert len(inbox.json()) == 2


def test_queue_and_announcement(client, db_session, campus, make_appointment) -> None:
    make_appointment(student_id=1, category='advising')
    make_appointment(student_id=2, time='12:30 PM', category='advising')

    summary = client.get('/queues/summary', params={'category': 'advising'})
    status = client.get('/queue/status/2')
    no_announcement = client.get('/announcements/latest')

    db_session.add(Announcement(message='Advising week starts Monday'))
    db_session.commit()
    announcement = client.get('/announcements/latest')

    assert summary.json() == {'queue': [{'position': 1}, {'position': 2}], 'eta_minutes': 30}
    assert status.json() == {'department': 'advising', 'waiting': 2}
    assert no_announcement.json()['message'] == 'No announcements'
    assert announcement.json()['message'] == 'Advising week starts Monday'


@pytest.fixture
def upload_storage(tmp_path):
    storage = LocalFileStorage(root=tmp_path / 'uploads')
    app.dependency_overrides[get_storage] = lambda: storage
    return storage


def test_attachment_upload_and_download(client, campus, make_appointment, upload_storage) -> None:
    appointment = make_appointment(student_id=1)

    uploaded = client.post(
        f'/attachments/{appointment.id}/transcript',
        data={'studentId': '1'},
        files={'file': ('transcript.pdf', b'%PDF-1.4 transcript', 'application/pdf')},
    )
    rejected = client.post(
        f'/attachments/{appointment.id}/transcript',
        data={'studentId': '1'},
        files={'file': ('transcript.txt', b'plain', 'text/plain')},
    )
    downloaded = client.get(f'/attachments/{appointment.id}/transcript')
    missing = client.get(f'/attachments/{appointment.id}/payment_proof')
    detail = client.get(f'/appointments/{appointment.id}')

    assert uploaded.status_code == 201
    assert uploaded.json()['url'] == f'/attachments/{appointment.id}/transcript'
    assert rejected.status_code == 400
    assert downloaded.content == b'%PDF-1.4 transcript'
    assert missing.status_code == 404
    assert detail.json()['transcript_url'] == f'/attachments/{appointment.id}/transcript'
