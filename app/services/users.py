"""User service helpers."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ..auth import authenticate_user, create_access_token, hash_password
from ..config import AuthSettings
from ..errors import Conflict, Unauthorized, ValidationFailure
from ..models import User
from ..validation import validate_credentials

logger = logging.getLogger(__name__)


def signup(
    session: Session, username: Optional[str], password: Optional[str], settings: AuthSettings
) -> Tuple[User, str]:
    """Create a user and return it with a freshly signed token."""

    violations = validate_credentials(username, password)
    if violations:
        raise ValidationFailure.from_violations(violations)
    username = (username or "").strip()

    existing = session.exec(select(User.id).where(User.username == username)).first()
    if existing is not None:
        raise Conflict(["username"])

    user = User(username=username, hashed_password=hash_password(password or ""))
    session.add(user)
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise Conflict(["username"]) from exc
    session.refresh(user)

    token = create_access_token(user.id, settings)
    logger.info("User %s signed up", user.id)
    return user, token


def signin(
    session: Session, username: Optional[str], password: Optional[str], settings: AuthSettings
) -> Tuple[User, str]:
    if not username or not password:
        raise ValidationFailure("Username or password missing")
    user = authenticate_user(session, username.strip(), password)
    if user is None:
        raise Unauthorized("Wrong username or password")
    token = create_access_token(user.id, settings)
    logger.info("User %s signed in", user.id)
    return user, token


def get_user(session: Session, user_id: int) -> User:
    user = session.get(User, user_id)
    if user is None:
        raise Unauthorized("user does not exist")
    return user
