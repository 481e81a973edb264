"""Reusable decorators for controllers."""

from __future__ import annotations

from functools import wraps
from typing import Callable, TypeVar

from flask import g
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException, NoAuthorizationError
from jwt.exceptions import PyJWTError

from dailyjournal.core.errors import AuthError
from dailyjournal.core.users.services import get_user

F = TypeVar("F", bound=Callable)


def auth_required(fn: F) -> F:
    """Resolve the session credential (header or cookie) to a live user.

    The user row is re-read on every request, so a deleted account is
    rejected even while its token is still unexpired.
    """

    @wraps(fn)
    def wrapper(*args, **kwargs):  # type: ignore[misc]
        try:
            verify_jwt_in_request()
        except NoAuthorizationError:
            raise AuthError("未授权，请先登录")
        except (JWTExtendedException, PyJWTError):
            raise AuthError("无效的会话，请重新登录")
        try:
            user_id = int(get_jwt_identity())
        except (TypeError, ValueError):
            raise AuthError("无效的会话，请重新登录")
        user = get_user(user_id)
        if user is None:
            raise AuthError("用户不存在，请重新登录")
        g.current_user = user
        return fn(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def current_user_id() -> int:
    return g.current_user.id
