"""Statistics, the stored weekly summary and full data export."""

from __future__ import annotations

import logging
from collections import Counter, OrderedDict
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError

from dailyjournal.core.errors import NotFoundError
from dailyjournal.core.users.schemas import serialize_user
from dailyjournal.core.users.services import get_user
from dailyjournal.core.utils.dates import local_today, to_local, utcnow
from dailyjournal.domains.journal.mappers import map_entry
from dailyjournal.domains.journal.models import JournalEntry
from dailyjournal.domains.stats.models import WeeklySummary
from dailyjournal.domains.tasks.mappers import map_task
from dailyjournal.domains.tasks.models import Task
from dailyjournal.extensions import db

logger = logging.getLogger(__name__)

TOP_THEMES = 10
SUMMARY_THEMES = 5


def _emotion_counts(entries) -> List[dict]:
    counts = Counter(e.emotion_label for e in entries if e.emotion_label)
    return [{"emotion_label": label, "count": n} for label, n in counts.most_common()]


def overview(user_id: int) -> dict:
    entries = (
        JournalEntry.query.filter_by(user_id=user_id)
        .order_by(JournalEntry.created_at.asc(), JournalEntry.id.asc())
        .all()
    )
    tasks = Task.query.filter_by(user_id=user_id).order_by(Task.created_at.asc()).all()

    themes = Counter(e.theme for e in entries if e.theme)
    weekly: "OrderedDict[str, dict]" = OrderedDict()
    for task in tasks:
        week = to_local(task.created_at).strftime("%Y-%W")
        bucket = weekly.setdefault(week, {"week": week, "total": 0, "completed": 0})
        bucket["total"] += 1
        bucket["completed"] += 1 if task.completed else 0
    monthly = Counter(e.entry_date.strftime("%Y-%m") for e in entries)

    return {
        "emotion_stats": _emotion_counts(entries),
        "emotion_trend": [
            {"date": e.entry_date.isoformat(), "emotion_label": e.emotion_label}
            for e in entries
            if e.emotion_label
        ],
        "theme_stats": [{"theme": t, "count": n} for t, n in themes.most_common(TOP_THEMES)],
        "task_stats": {
            "total": len(tasks),
            "completed": sum(1 for t in tasks if t.completed),
        },
        "task_completion_trend": list(weekly.values()),
        "journal_count_trend": [{"month": m, "count": monthly[m]} for m in sorted(monthly)],
    }


def render_summary(
    week_start, week_end, emotion_stats: List[dict], themes: List[str], total: int, completed: int
) -> str:
    lines = [f"本周回顾 ({week_start.isoformat()} 至 {week_end.isoformat()}):", ""]

    lines.append("【情绪概览】")
    if emotion_stats:
        lines.append(f"本周主要情绪: {emotion_stats[0]['emotion_label']}")
        lines.extend(f"- {e['emotion_label']}: {e['count']} 次" for e in emotion_stats)
    else:
        lines.append("本周没有记录情绪")

    lines += ["", "【主题回顾】"]
    if themes:
        lines.append(f"本周关注的主题: {', '.join(themes[:SUMMARY_THEMES])}")
    else:
        lines.append("本周没有记录主题")

    lines += ["", "【任务完成情况】"]
    if total > 0:
        lines.append(f"完成率: {completed / total * 100:.1f}%")
        lines.append(f"- 总任务数: {total}")
        lines.append(f"- 已完成: {completed}")
        lines.append(f"- 未完成: {total - completed}")
    else:
        lines.append("本周没有记录任务")
    return "\n".join(lines) + "\n"


def weekly_summary(user_id: int, *, now: Optional[datetime] = None) -> Tuple[WeeklySummary, bool]:
    """Return ``(summary, is_new)``; an existing row for the same week start is reused."""
    today = local_today(now or utcnow())
    week_start = today - timedelta(days=7)
    existing = WeeklySummary.query.filter_by(user_id=user_id, week_start_date=week_start).first()
    if existing:
        return existing, False

    entries = (
        JournalEntry.query.filter(
            JournalEntry.user_id == user_id,
            JournalEntry.entry_date >= week_start,
            JournalEntry.entry_date <= today,
        )
        .order_by(JournalEntry.created_at.desc())
        .all()
    )
    tasks = [
        t
        for t in Task.query.filter_by(user_id=user_id).all()
        if week_start <= to_local(t.created_at).date() <= today
    ]
    emotion_stats = _emotion_counts(entries)
    themes = [e.theme for e in entries if e.theme]
    total = len(tasks)
    completed = sum(1 for t in tasks if t.completed)
    rate = (completed / total * 100) if total else 0.0

    summary = WeeklySummary(
        user_id=user_id,
        week_start_date=week_start,
        week_end_date=today,
        emotion_stats=emotion_stats,
        theme_summary=", ".join(themes[:SUMMARY_THEMES]),
        task_completion_rate=rate,
        generated_content=render_summary(week_start, today, emotion_stats, themes, total, completed),
    )
    db.session.add(summary)
    try:
        db.session.commit()
    except IntegrityError:
        # Another request stored this week first.
        db.session.rollback()
        existing = WeeklySummary.query.filter_by(user_id=user_id, week_start_date=week_start).first()
        if existing is None:
            raise
        return existing, False
    logger.info("Generated weekly summary %s for user %s", summary.id, user_id)
    return summary, True


def map_summary(summary: WeeklySummary) -> dict:
    return {
        "id": summary.id,
        "user_id": summary.user_id,
        "week_start_date": summary.week_start_date.isoformat(),
        "week_end_date": summary.week_end_date.isoformat(),
        "emotion_stats": summary.emotion_stats or [],
        "theme_summary": summary.theme_summary or "",
        "task_completion_rate": summary.task_completion_rate or 0.0,
        "generated_content": summary.generated_content,
        "created_at": summary.created_at.isoformat() if summary.created_at else None,
    }


def export(user_id: int) -> dict:
    user = get_user(user_id)
    if user is None:
        raise NotFoundError("用户不存在")
    journals = (
        JournalEntry.query.filter_by(user_id=user_id).order_by(JournalEntry.created_at.desc()).all()
    )
    tasks = Task.query.filter_by(user_id=user_id).order_by(Task.created_at.desc()).all()
    summaries = (
        WeeklySummary.query.filter_by(user_id=user_id)
        .order_by(WeeklySummary.week_start_date.desc())
        .all()
    )
    return {
        "user": serialize_user(user),
        "journals": [map_entry(j) for j in journals],
        "tasks": [map_task(t) for t in tasks],
        "weekly_summaries": [map_summary(s) for s in summaries],
        "export_date": utcnow().isoformat(),
    }
