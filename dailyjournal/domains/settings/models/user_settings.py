"""Per-user preferences and the encrypted AI provider key."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from dailyjournal.extensions import db

REMINDER_INTERVAL_MIN = 5
REMINDER_INTERVAL_MAX = 120
REMINDER_INTERVAL_DEFAULT = 20
THEMES = ("light", "dark", "system")


class UserSettings(db.Model):
    __tablename__ = "user_settings"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        db.ForeignKey("user.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    reminder_interval: Mapped[int] = mapped_column(default=REMINDER_INTERVAL_DEFAULT, nullable=False)
    theme: Mapped[str] = mapped_column(db.String(16), default="system", nullable=False)
    email_notifications: Mapped[bool] = mapped_column(default=False, nullable=False)
    # Fernet token; never serialized directly.
    deepseek_api_key_encrypted: Mapped[str | None] = mapped_column(db.Text)

    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)
