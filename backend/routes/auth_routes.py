import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from backend.auth import jwt_handler
from backend.auth.dependencies import get_current_user
from backend.auth.passwords import hash_password, verify_password
from backend.core.errors import NotFoundError, ValidationError
from backend.database import database_errors, get_db
from backend.models.user import User

router = APIRouter(tags=['auth'])

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class LoginRequest(BaseModel):
    username: str | None = None
    password: str | None = None


class LoginResponse(BaseModel):
    id: int
    name: str
    role: str
    staff_category: str | None = None
    access_token: str
    token_type: str = 'bearer'


class ChangePasswordRequest(BaseModel):
    user_id: int | None = None
    old_password: str | None = None
    new_password: str | None = None


class CurrentUserResponse(BaseModel):
    id: int
    username: str
    name: str
    role: str
    staff_category: str | None = None


@router.post('/login', response_model=LoginResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    username = (data.username or '').strip()
    if not username or not data.password:
        raise ValidationError('Username and password are required.')

    with database_errors(db):
        user = db.query(User).filter(User.username == username).first()

    if user is None or not verify_password(data.password, user.hashed_password):
        logger.info('Failed login for %s', username)
        raise ValidationError('Invalid username or password.')

    return LoginResponse(
        id=user.id,
        name=user.display_name,
        role=user.role,
        staff_category=user.staff_category,
        access_token=jwt_handler.create_access_token(user.id, user.role),
    )


@router.post('/change-password')
def change_password(data: ChangePasswordRequest, db: Session = Depends(get_db)):
    if not data.user_id or not data.old_password or not data.new_password:
        raise ValidationError('Missing fields.')
    if len(data.new_password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f'New password must be at least {MIN_PASSWORD_LENGTH} characters.')

    with database_errors(db):
        user = db.query(User).filter(User.id == data.user_id).first()
        if user is None:
            raise NotFoundError('User not found.')
        if not verify_password(data.old_password, user.hashed_password):
            raise ValidationError('Old password is incorrect.')

        user.hashed_password = hash_password(data.new_password)
        db.commit()

    return {'message': 'Password updated.'}


@router.get('/me', response_model=CurrentUserResponse)
def me(current_user: User = Depends(get_current_user)):
    return CurrentUserResponse(
        id=current_user.id,
        username=current_user.username,
        name=current_user.display_name,
        role=current_user.role,
        staff_category=current_user.staff_category,
    )
