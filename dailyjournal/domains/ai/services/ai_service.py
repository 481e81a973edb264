"""AI-backed journal analysis, task extraction and weekly reports."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from dailyjournal.core.utils.dates import local_today, to_local, trailing_week, utcnow
from dailyjournal.domains.ai import parsers, prompts
from dailyjournal.domains.ai.services import task_extractor
from dailyjournal.domains.ai.services.deepseek_client import DeepSeekClient
from dailyjournal.domains.journal.models import JournalEntry
from dailyjournal.domains.journal.services import journal_service
from dailyjournal.domains.settings.services import settings_service
from dailyjournal.domains.tasks.models import Task
from dailyjournal.domains.tasks.services import task_service

logger = logging.getLogger(__name__)

ANALYSIS_PLACEHOLDERS = {
    "emotion_label": "未知",
    "theme": "未能识别主题",
    "evaluation": "未能生成分析",
    "thought_process": "未提供思考过程",
}
WEEKLY_REPORT_PLACEHOLDER = "暂无内容"
WEEKLY_REPORT_FIELDS = tuple(parsers.WEEKLY_REPORT_KEYS)


def analyze_content(content: str, api_key: Optional[str]) -> dict:
    """Analyse one journal text.

    Text fields the reply does not provide are filled with placeholders;
    sentiment and depth stay ``None`` when unrecognised.
    """
    client = DeepSeekClient(api_key)
    reply = client.chat(prompts.analysis_messages(content), temperature=0.7, max_tokens=1000)
    decoded = parsers.decode_analysis(reply)
    if decoded is None:
        logger.warning("Analysis reply could not be decoded; using placeholders")
        decoded = {}
    columns = JournalEntry.__table__.c
    result = {
        key: parsers.fit_column(decoded.get(key) or placeholder, columns[key])
        for key, placeholder in ANALYSIS_PLACEHOLDERS.items()
    }
    result["sentiment"] = decoded.get("sentiment")
    result["depth"] = decoded.get("depth")
    return result


def analyze_journal(user_id: int, entry_id: int) -> JournalEntry:
    entry = journal_service.get_entry(user_id, entry_id)
    analysis = analyze_content(entry.content, settings_service.get_api_key(user_id))
    return journal_service.update_analysis(user_id, entry_id, **analysis)


def extract_tasks_for_journal(user_id: int, entry_id: int, *, now: Optional[datetime] = None) -> List[Task]:
    """Identify tasks in an owned entry and save them with deadlines.

    Works without an API key through the regex patterns.
    """
    entry = journal_service.get_entry(user_id, entry_id)
    identified = task_extractor.identify_tasks(entry.content, settings_service.get_api_key(user_id))
    today = local_today(now)
    items = [
        {
            "content": t["task"],
            "original_text": t.get("original_text"),
            "time_context": t.get("time_context"),
            "deadline": task_extractor.resolve_deadline(t, today),
        }
        for t in identified
    ]
    if not items:
        return []
    return task_service.create_extracted_tasks(user_id, entry.id, items)


def _journal_digest(entry) -> dict:
    if isinstance(entry, dict):
        return {
            "date": str(entry.get("entry_date") or entry.get("date") or ""),
            "content": entry.get("content", ""),
            "theme": entry.get("theme") or "无主题",
            "sentiment": entry.get("sentiment") or "未分析",
        }
    return {
        "date": entry.entry_date.isoformat(),
        "content": entry.content,
        "theme": entry.theme or "无主题",
        "sentiment": entry.sentiment or "未分析",
    }


def _task_digest(task) -> dict:
    if isinstance(task, dict):
        return {"content": task.get("content", ""), "completed_at": str(task.get("completed_at") or "")}
    completed_at = to_local(task.completed_at).date().isoformat() if task.completed_at else ""
    return {"content": task.content, "completed_at": completed_at}


def generate_weekly_report(journals, completed_tasks, api_key: Optional[str]) -> dict:
    """Five narrative sections about the week; missing ones get a placeholder."""
    client = DeepSeekClient(api_key)
    messages = prompts.weekly_report_messages(
        [_journal_digest(j) for j in journals],
        [_task_digest(t) for t in completed_tasks],
    )
    reply = client.chat(messages, temperature=0.7, max_tokens=1000)
    decoded = parsers.decode_weekly_report(reply) or {}
    return {field: decoded.get(field) or WEEKLY_REPORT_PLACEHOLDER for field in WEEKLY_REPORT_FIELDS}


def generate_weekly_report_for_user(user_id: int, *, now: Optional[datetime] = None) -> dict:
    """Weekly report over the user's own trailing week."""
    api_key = settings_service.get_api_key(user_id)
    start, end = trailing_week(now or utcnow())
    journals = (
        JournalEntry.query.filter(
            JournalEntry.user_id == user_id,
            JournalEntry.entry_date >= to_local(start).date(),
        )
        .order_by(JournalEntry.entry_date.asc())
        .all()
    )
    completed = (
        Task.query.filter(
            Task.user_id == user_id,
            Task.completed.is_(True),
            Task.completed_at >= start,
            Task.completed_at <= end,
        )
        .order_by(Task.completed_at.asc())
        .all()
    )
    return generate_weekly_report(journals, completed, api_key)
