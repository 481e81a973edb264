"""Journal services: one entry per day, ownership-checked CRUD, weekly counts."""

from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime
from typing import List, Optional, Tuple

from dailyjournal.core.errors import AuthorizationError, NotFoundError, ValidationError
from dailyjournal.core.utils.dates import local_today, to_local, trailing_week, utcnow
from dailyjournal.domains.journal.models import JournalEntry
from dailyjournal.domains.tasks.models import Task
from dailyjournal.extensions import db

logger = logging.getLogger(__name__)

ANALYSIS_FIELDS = ("theme", "evaluation", "thought_process", "sentiment", "depth", "emotion_label")


def create_or_update_today(
    user_id: int, content: str, *, now: Optional[datetime] = None
) -> Tuple[JournalEntry, bool]:
    """Overwrite today's entry or insert a new one.

    Returns ``(entry, created)``. Overwriting marks any previous analysis stale.
    """
    now = now or utcnow()
    today = local_today(now)
    entry = JournalEntry.query.filter_by(user_id=user_id, entry_date=today).first()
    if entry:
        entry.content = content
        entry.is_analyzed = False
        entry.updated_at = now
        db.session.commit()
        return entry, False

    entry = JournalEntry(
        user_id=user_id,
        content=content,
        entry_date=today,
        created_at=now,
        updated_at=now,
    )
    db.session.add(entry)
    db.session.commit()
    logger.info("Created journal entry %s for user %s", entry.id, user_id)
    return entry, True


def get_today(user_id: int, *, now: Optional[datetime] = None) -> JournalEntry:
    entry = JournalEntry.query.filter_by(user_id=user_id, entry_date=local_today(now)).first()
    if not entry:
        raise NotFoundError("今日尚未创建日记")
    return entry


def list_entries(user_id: int) -> List[JournalEntry]:
    return (
        JournalEntry.query.filter_by(user_id=user_id)
        .order_by(JournalEntry.entry_date.desc(), JournalEntry.created_at.desc())
        .all()
    )


def get_entry(user_id: int, entry_id: int) -> JournalEntry:
    entry = db.session.get(JournalEntry, entry_id)
    if entry is None:
        raise NotFoundError("未找到日记")
    if entry.user_id != user_id:
        raise AuthorizationError("未授权访问")
    return entry


def update_entry(user_id: int, entry_id: int, content: str) -> JournalEntry:
    entry = get_entry(user_id, entry_id)
    entry.content = content
    entry.is_analyzed = False
    db.session.commit()
    return entry


def delete_entry(user_id: int, entry_id: int) -> None:
    entry = get_entry(user_id, entry_id)
    db.session.delete(entry)
    db.session.commit()
    logger.info("Deleted journal entry %s for user %s", entry_id, user_id)


def update_analysis(user_id: int, entry_id: int, **fields) -> JournalEntry:
    """Merge supplied analysis fields over the stored ones and mark analyzed.

    Fields passed as ``None`` or empty keep their previous value; a call
    that supplies none of them is rejected.
    """
    entry = get_entry(user_id, entry_id)
    applied = {}
    for key in ANALYSIS_FIELDS:
        value = fields.get(key)
        if isinstance(value, str):
            value = value.strip()
        if value:
            applied[key] = value
    if not applied:
        raise ValidationError("没有提供分析内容")
    for key, value in applied.items():
        setattr(entry, key, value)
    entry.is_analyzed = True
    entry.analyzed_at = utcnow()
    db.session.commit()
    return entry


def weekly_report(user_id: int, *, now: Optional[datetime] = None) -> dict:
    start, end = trailing_week(now)
    start_day = to_local(start).date()
    entries = (
        JournalEntry.query.filter(
            JournalEntry.user_id == user_id,
            JournalEntry.entry_date >= start_day,
            JournalEntry.entry_date <= local_today(end),
        )
        .order_by(JournalEntry.entry_date.asc())
        .all()
    )
    completed_count = Task.query.filter(
        Task.user_id == user_id,
        Task.completed.is_(True),
        Task.completed_at >= start,
        Task.completed_at <= end,
    ).count()

    themes = [e.theme for e in entries if e.theme]
    sentiments = Counter(e.sentiment for e in entries if e.sentiment)
    return {
        "journal_count": len(entries),
        "completed_task_count": completed_count,
        "themes": themes,
        "sentiments": dict(sentiments),
        "start_date": start.isoformat(),
        "end_date": end.isoformat(),
    }
