from backend.auth.passwords import verify_password
from backend.create_user import build_parser, upsert_user


def test_upsert_creates_then_skips_existing_user(db_session) -> None:
    user, outcome = upsert_user(db_session, 'Dr.Reem', 'faculty', 'reem@222', name='Dr. Reem')
    again, second_outcome = upsert_user(db_session, 'Dr.Reem', 'faculty', 'other-secret')

    assert outcome == 'created'
    assert second_outcome == 'skipped'
    assert again.id == user.id
    assert verify_password('reem@222', again.hashed_password)


def test_upsert_reset_updates_role_and_password(db_session) -> None:
    upsert_user(db_session, 'MsMona', 'staff', 'first-secret', staff_category='Registration')

    user, outcome = upsert_user(db_session, 'MsMona', 'faculty', 'second-secret', reset=True)

    assert outcome == 'updated'
    assert user.role == 'faculty'
    assert user.name == 'MsMona'
    assert user.staff_category is None
    assert verify_password('second-secret', user.hashed_password)


def test_parser_requires_known_role() -> None:
    args = build_parser().parse_args(['MsMona', '--role', 'staff', '--staff-category', 'Registration'])

    assert args.role == 'staff'
    assert args.staff_category == 'Registration'
    assert args.reset is False
