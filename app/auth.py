"""Password hashing, token signing and bearer-token verification.

``AuthVerifier`` is the gate every owner-scoped route passes through: it
takes the raw ``Authorization`` header, verifies the signed token and
resolves its subject to a stored :class:`~app.models.User`.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from fastapi import Depends, Header
from jose import ExpiredSignatureError, JWTError, jwt
from sqlmodel import Session, select

from .config import AuthSettings, get_auth_settings
from .database import get_session
from .errors import InternalConfig, Unauthorized
from .models import User

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "
BCRYPT_ROUNDS = 10


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False


def create_access_token(user_id: int, settings: AuthSettings) -> str:
    """Sign a token whose subject is ``user_id``."""
    if not settings.secret:
        raise InternalConfig("secret not configured")
    expire = datetime.now(timezone.utc) + timedelta(seconds=settings.expires_in)
    claims = {"sub": str(user_id), "exp": expire}
    return jwt.encode(claims, settings.secret, algorithm=settings.algorithm)


def authenticate_user(session: Session, username: str, password: str) -> Optional[User]:
    user = session.exec(select(User).where(User.username == username)).first()
    if not user or not verify_password(password, user.hashed_password):
        return None
    return user


class AuthVerifier:
    """Resolve an ``Authorization`` header to a user id.

    Steps, in order: header shape, non-empty token, configured secret,
    signature and expiry, and finally the user lookup. Each failure raises
    :class:`Unauthorized` except a missing secret, which is a deployment
    problem and raises :class:`InternalConfig`.
    """

    def __init__(self, settings: AuthSettings):
        self.settings = settings

    def extract_token(self, authorization: Optional[str]) -> str:
        if not authorization or not authorization.startswith(BEARER_PREFIX):
            raise Unauthorized("missing or invalid token")
        token = authorization[len(BEARER_PREFIX):].strip()
        if not token:
            raise Unauthorized("token not provided")
        return token

    def decode(self, token: str) -> str:
        """Return the token subject."""
        if not self.settings.secret:
            raise InternalConfig("secret not configured")
        try:
            payload = jwt.decode(
                token, self.settings.secret, algorithms=[self.settings.algorithm]
            )
        except ExpiredSignatureError as exc:
            raise Unauthorized("token expired") from exc
        except JWTError as exc:
            raise Unauthorized("invalid token") from exc
        subject = payload.get("sub")
        if subject is None:
            raise Unauthorized("invalid token")
        return str(subject)

    def verify(self, authorization: Optional[str], session: Session) -> int:
        try:
            token = self.extract_token(authorization)
            subject = self.decode(token)
            try:
                user_id = int(subject)
            except ValueError as exc:
                raise Unauthorized("invalid token") from exc
            user = session.get(User, user_id)
            if user is None:
                raise Unauthorized("user does not exist")
        except Unauthorized as exc:
            logger.warning("Authentication rejected: %s", exc.message)
            raise
        return user.id


def get_auth_verifier() -> AuthVerifier:
    return AuthVerifier(get_auth_settings())


def get_current_user_id(
    authorization: Optional[str] = Header(default=None),
    session: Session = Depends(get_session),
    verifier: AuthVerifier = Depends(get_auth_verifier),
) -> int:
    return verifier.verify(authorization, session)
