"""Settings request/response schemas."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

from dailyjournal.domains.settings.models import REMINDER_INTERVAL_MAX, REMINDER_INTERVAL_MIN

Theme = Literal["light", "dark", "system"]


class SettingsUpdate(BaseModel):
    reminder_interval: Optional[int] = Field(
        default=None, ge=REMINDER_INTERVAL_MIN, le=REMINDER_INTERVAL_MAX
    )
    theme: Optional[Theme] = None
    email_notifications: Optional[bool] = None


class ApiKeyUpdate(BaseModel):
    api_key: str = ""


class SettingsResponse(BaseModel):
    reminder_interval: int
    theme: str
    email_notifications: bool
    has_api_key: bool
