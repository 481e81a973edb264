"""Date helpers for the app's calendar-day boundary.

Timestamps are stored as naive UTC. "Today" and week ranges are computed in
the configured ``APP_TIMEZONE`` and converted back to naive UTC for queries.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from flask import current_app, has_app_context


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def app_timezone() -> ZoneInfo:
    name = "UTC"
    if has_app_context():
        name = current_app.config.get("APP_TIMEZONE") or "UTC"
    return ZoneInfo(name)


def to_local(value: datetime) -> datetime:
    """Convert a naive UTC timestamp into the app timezone."""
    return value.replace(tzinfo=timezone.utc).astimezone(app_timezone())


def local_today(now: Optional[datetime] = None) -> date:
    return to_local(now or utcnow()).date()


def local_day_start_utc(day: date) -> datetime:
    """Naive UTC instant at which the local calendar ``day`` begins."""
    start = datetime.combine(day, time.min, tzinfo=app_timezone())
    return start.astimezone(timezone.utc).replace(tzinfo=None)


def trailing_week(now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """[start of the local day seven days ago, now] as naive UTC."""
    now = now or utcnow()
    start_day = local_today(now) - timedelta(days=7)
    return local_day_start_utc(start_day), now
