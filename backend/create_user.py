"""Create or update a PSUFlow user account.

Usage:
    python -m backend.create_user USERNAME --role faculty --name "Dr. Reem" --password secret
    python -m backend.create_user MsMona --role staff --staff-category Registration --password secret --reset
"""
import argparse
import getpass
import sys

from sqlalchemy.exc import SQLAlchemyError

from backend.auth.passwords import hash_password
from backend.database import Base, SessionLocal, engine
from backend.models import announcement, appointment, blocked_slot, notification  # noqa: F401
from backend.models.user import USER_ROLES, User


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create or update a PSUFlow user.")
    parser.add_argument("username")
    parser.add_argument("--role", required=True, choices=sorted(USER_ROLES))
    parser.add_argument("--name", default=None)
    parser.add_argument("--password", default=None, help="prompted for when omitted")
    parser.add_argument("--staff-category", default=None)
    parser.add_argument(
        "--reset",
        action="store_true",
        help="update name, role, category and password of an existing user",
    )
    return parser


def upsert_user(db, username: str, role: str, password: str, name: str | None = None,
                staff_category: str | None = None, reset: bool = False) -> tuple[User, str]:
    user = db.query(User).filter(User.username == username).first()

    if user is not None and not reset:
        return user, "skipped"

    if user is None:
        user = User(username=username)
        db.add(user)
        outcome = "created"
    else:
        outcome = "updated"

    user.name = name or user.name or username
    user.role = role
    user.staff_category = staff_category if role == "staff" else None
    user.hashed_password = hash_password(password)
    db.commit()
    db.refresh(user)
    return user, outcome


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    password = args.password or getpass.getpass(f"Password for {args.username}: ")
    if not password:
        print("A password is required.", file=sys.stderr)
        sys.exit(2)

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        user, outcome = upsert_user(
            db,
            args.username,
            args.role,
            password,
            name=args.name,
            staff_category=args.staff_category,
            reset=args.reset,
        )
    except SQLAlchemyError as exc:
        db.rollback()
        print(f"Error saving user: {exc}", file=sys.stderr)
        sys.exit(1)
    finally:
        db.close()

    print(f"{outcome.capitalize()} {user.role}: {user.username} (id={user.id})")


if __name__ == "__main__":
    main()
