from dailyjournal.domains.settings.models.user_settings import (
    REMINDER_INTERVAL_DEFAULT,
    REMINDER_INTERVAL_MAX,
    REMINDER_INTERVAL_MIN,
    THEMES,
    UserSettings,
)

__all__ = [
    "UserSettings",
    "REMINDER_INTERVAL_MIN",
    "REMINDER_INTERVAL_MAX",
    "REMINDER_INTERVAL_DEFAULT",
    "THEMES",
]
