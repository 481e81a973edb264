"""Typed failures raised by services and rendered by the app error handlers."""

from __future__ import annotations

from typing import Optional


class AppError(Exception):
    """Base exception for failures that map onto an HTTP status."""

    status_code = 500
    default_message = "服务器内部错误"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Missing or malformed input."""

    status_code = 400
    default_message = "请求参数无效"


class AuthError(AppError):
    """Missing, invalid or expired session credential."""

    status_code = 401
    default_message = "未授权，请先登录"


class AuthorizationError(AppError):
    """Valid session, but the resource belongs to another user."""

    status_code = 403
    default_message = "未授权访问"


class NotFoundError(AppError):
    status_code = 404
    default_message = "资源不存在"


class ConflictError(AppError):
    status_code = 409
    default_message = "资源已存在"


class ExternalServiceError(AppError):
    """The AI provider was unreachable or answered with something unusable.

    The client only ever sees ``public_message``; ``message`` keeps the
    original cause for the server log.
    """

    status_code = 500
    default_message = "AI服务调用失败"
    public_message = "AI分析失败，请检查API密钥或稍后重试"
