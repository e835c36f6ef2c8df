import logging

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel
from sqlalchemy.orm import Session

from backend.auth import jwt_handler
from backend.auth.dependencies import read_admin_session
from backend.auth.passwords import verify_password
from backend.core import config
from backend.core.errors import BookingError, BookingErrorKind
from backend.core.responses import success_response, unauthorized_response
from backend.database import get_admin_db
from backend.models.user import AdminUser

router = APIRouter(tags=['admin-auth'])

logger = logging.getLogger(__name__)


class AdminLoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


@router.post('')
def login(data: AdminLoginRequest, db: Session = Depends(get_admin_db)):
    email = (data.email or '').strip().lower()
    if not email or not data.password:
        raise BookingError(BookingErrorKind.BAD_REQUEST, 'Email and password are required')

    admin = db.query(AdminUser).filter(AdminUser.email == email).first()
    if admin is None or not verify_password(data.password, admin.hashed_password):
        logger.warning('Failed admin login for %s', email)
        raise BookingError(BookingErrorKind.INVALID_CREDENTIALS, 'Invalid credentials')

    token = jwt_handler.create_session_token(subject=admin.email, admin_id=admin.id, name=admin.name)
    response = success_response(
        {'admin': {'id': admin.id, 'email': admin.email, 'name': admin.name}},
        'Logged in successfully',
    )
    response.set_cookie(
        key=config.ADMIN_SESSION_COOKIE,
        value=token,
        max_age=config.ADMIN_SESSION_HOURS * 60 * 60,
        httponly=True,
        secure=not config.is_development(),
        samesite='lax',
        path='/',
    )
    logger.info('Admin %s logged in', admin.email)
    return response


@router.get('')
def session_status(request: Request):
    payload = read_admin_session(request)
    if payload is None:
        response = unauthorized_response()
        if config.ADMIN_SESSION_COOKIE in request.cookies:
            response.delete_cookie(config.ADMIN_SESSION_COOKIE, path='/')
        return response

    return success_response(
        {
            'authenticated': True,
            'admin': {
                'id': payload.get('admin_id'),
                'email': payload['sub'],
                'name': payload.get('name'),
            },
        },
        'Session is active',
    )


@router.delete('')
def logout():
    response = success_response(None, 'Logged out successfully')
    response.delete_cookie(config.ADMIN_SESSION_COOKIE, path='/')
    return response
