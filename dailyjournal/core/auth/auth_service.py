"""Authentication service layer."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from flask_jwt_extended import create_access_token

from dailyjournal.core.auth.models import TokenBlocklist
from dailyjournal.core.auth.password import hash_password, verify_password
from dailyjournal.core.auth.schemas import LoginRequest, RegisterRequest
from dailyjournal.core.errors import AuthError, ConflictError
from dailyjournal.core.users.models import User
from dailyjournal.core.users.services import find_by_email, find_by_username
from dailyjournal.extensions import db

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "邮箱或密码不正确"


def register_user(payload: RegisterRequest) -> dict:
    """Create a user and issue a session credential."""
    if find_by_username(payload.username):
        raise ConflictError("用户名已被使用")
    if find_by_email(payload.email):
        raise ConflictError("邮箱已被注册")

    user = User(
        username=payload.username,
        email=payload.email,
        password_hash=hash_password(payload.password),
    )
    db.session.add(user)
    db.session.commit()
    logger.info("Registered user %s", user.id)
    return {"user": user, "access_token": issue_session_token(user)}


def authenticate_user(email: str, password: str) -> Optional[User]:
    """Return the user if credentials are valid."""
    user = find_by_email(email)
    if not user:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def login_user(payload: LoginRequest) -> dict:
    user = authenticate_user(payload.email, payload.password)
    if not user:
        raise AuthError(INVALID_CREDENTIALS)
    return {"user": user, "access_token": issue_session_token(user)}


def issue_session_token(user: User) -> str:
    return create_access_token(identity=str(user.id))


def revoke_token(jti: str, user_id: Optional[int] = None, expires: Optional[int] = None) -> None:
    """Block a credential so that later requests carrying it are rejected."""
    if not jti or is_token_revoked(jti):
        return
    db.session.add(
        TokenBlocklist(
            jti=jti,
            user_id=user_id,
            expires_at=datetime.fromtimestamp(expires, tz=timezone.utc).replace(tzinfo=None) if expires else None,
        )
    )
    db.session.commit()


def is_token_revoked(jti: str) -> bool:
    return db.session.query(TokenBlocklist.id).filter_by(jti=jti).first() is not None
