from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlmodel import Session

from .. import config
from ..auth import get_current_user_id
from ..config import AuthSettings, SESSION_COOKIE_NAME, require_auth_settings
from ..database import get_session
from ..models import User
from ..schemas import Credentials, UserRead
from ..services import users as svc


router = APIRouter(prefix="/users", tags=["users"])


def _session_response(user: User, token: str, message: str, settings: AuthSettings) -> JSONResponse:
    response = JSONResponse(
        {
            "status": "success",
            "message": message,
            "data": {"user": UserRead.from_user(user).to_wire(), "jwt": token},
        }
    )
    # The cookie is informational for browser clients; routes only read the header.
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        max_age=settings.expires_in,
        path="/",
        secure=config.is_production(),
        httponly=True,
        samesite="lax",
    )
    return response


@router.post("/signup")
def user_signup(payload: Credentials, session: Session = Depends(get_session)):
    settings = require_auth_settings()
    user, token = svc.signup(session, payload.username, payload.password, settings)
    return _session_response(user, token, "User sign up success", settings)


@router.post("/signin")
def user_signin(payload: Credentials, session: Session = Depends(get_session)):
    settings = require_auth_settings()
    user, token = svc.signin(session, payload.username, payload.password, settings)
    return _session_response(user, token, "User sign in success", settings)


@router.get("/curr")
def current_user(
    user_id: int = Depends(get_current_user_id),
    session: Session = Depends(get_session),
):
    user = svc.get_user(session, user_id)
    return {
        "status": "success",
        "message": "User fetched successfully",
        "data": {"user": UserRead.from_user(user).to_wire()},
    }
