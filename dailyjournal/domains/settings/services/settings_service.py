"""Settings service: preferences plus the encrypted DeepSeek API key."""

from __future__ import annotations

import logging
from typing import Optional

from flask import current_app

from dailyjournal.core.errors import NotFoundError, ValidationError
from dailyjournal.core.utils.encryption import InvalidToken, decrypt, encrypt, mask_secret
from dailyjournal.domains.settings.models import (
    REMINDER_INTERVAL_DEFAULT,
    REMINDER_INTERVAL_MAX,
    REMINDER_INTERVAL_MIN,
    THEMES,
    UserSettings,
)
from dailyjournal.extensions import db

logger = logging.getLogger(__name__)


def get_settings(user_id: int) -> UserSettings:
    """Return the user's settings row, creating defaults on first access."""
    settings = UserSettings.query.filter_by(user_id=user_id).first()
    if settings:
        return settings
    settings = UserSettings(
        user_id=user_id,
        reminder_interval=current_app.config.get(
            "DEFAULT_REMINDER_INTERVAL_MINUTES", REMINDER_INTERVAL_DEFAULT
        ),
        theme="system",
        email_notifications=False,
    )
    db.session.add(settings)
    db.session.commit()
    return settings


def update_settings(
    user_id: int,
    *,
    reminder_interval: Optional[int] = None,
    theme: Optional[str] = None,
    email_notifications: Optional[bool] = None,
) -> UserSettings:
    settings = get_settings(user_id)
    if reminder_interval is not None:
        if not REMINDER_INTERVAL_MIN <= reminder_interval <= REMINDER_INTERVAL_MAX:
            raise ValidationError(
                f"提醒间隔必须在{REMINDER_INTERVAL_MIN}到{REMINDER_INTERVAL_MAX}分钟之间"
            )
        settings.reminder_interval = reminder_interval
    if theme is not None:
        if theme not in THEMES:
            raise ValidationError("主题设置无效")
        settings.theme = theme
    if email_notifications is not None:
        settings.email_notifications = bool(email_notifications)
    db.session.commit()
    return settings


def get_reminder_interval(user_id: int) -> int:
    return get_settings(user_id).reminder_interval


def set_api_key(user_id: int, api_key: str) -> None:
    api_key = (api_key or "").strip()
    if not api_key:
        raise ValidationError("API密钥不能为空")
    settings = get_settings(user_id)
    settings.deepseek_api_key_encrypted = encrypt(api_key)
    db.session.commit()
    logger.info("Updated API key for user %s", user_id)


def delete_api_key(user_id: int) -> None:
    settings = UserSettings.query.filter_by(user_id=user_id).first()
    if not settings:
        raise NotFoundError("未找到设置")
    settings.deepseek_api_key_encrypted = None
    db.session.commit()


def get_api_key(user_id: int) -> Optional[str]:
    """Decrypted key for outbound calls. Never return this to a client."""
    settings = UserSettings.query.filter_by(user_id=user_id).first()
    if not settings or not settings.deepseek_api_key_encrypted:
        return None
    try:
        return decrypt(settings.deepseek_api_key_encrypted)
    except InvalidToken:
        logger.warning("Stored API key for user %s cannot be decrypted", user_id)
        return None


def has_api_key(user_id: int) -> bool:
    """True only when a stored key can still be decrypted."""
    return get_api_key(user_id) is not None


def get_api_key_view(user_id: int) -> dict:
    api_key = get_api_key(user_id)
    return {
        "has_api_key": bool(api_key),
        "api_key": {"masked": mask_secret(api_key)} if api_key else None,
    }
