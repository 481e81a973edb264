"""Task identification: Chinese intent patterns, optional AI pass, deadlines."""

from __future__ import annotations

import logging
import re
from datetime import date, timedelta
from typing import Dict, List, Optional

from dailyjournal.core.errors import AppError
from dailyjournal.domains.ai import parsers, prompts
from dailyjournal.domains.ai.services.deepseek_client import DeepSeekClient
from dailyjournal.domains.tasks.models import TIME_CONTEXT_UNSPECIFIED, Task

logger = logging.getLogger(__name__)

_CLAUSE_END = r"(?:。|，|；|！|\n|$)"
_WHEN = r"(?:今天|明天|周[一二三四五六日末]|下周|本周|这周|下个月|本月|这个月)?"

# Order matters: results follow pattern order, then position in the text.
TASK_PATTERNS = [
    re.compile(rf"今天(?:我)?要(?:去)?(.+?){_CLAUSE_END}"),
    *[
        re.compile(rf"{marker}{_WHEN}(?:要)?(?:去)?(.+?){_CLAUSE_END}")
        for marker in ("计划", "打算", "准备", "需要", "应该", "得")
    ],
    re.compile(rf"明天(?:我)?要(?:去)?(.+?){_CLAUSE_END}"),
    re.compile(rf"这周(?:我)?要(?:去)?(.+?){_CLAUSE_END}"),
    re.compile(rf"我要(?:去)?(.+?){_CLAUSE_END}"),
]

# First hit wins, checked against the whole matched clause.
TIME_PATTERNS = [
    (re.compile(r"今天"), "today"),
    (re.compile(r"明天"), "tomorrow"),
    (re.compile(r"后天"), "day_after_tomorrow"),
    (re.compile(r"周一|星期一|礼拜一"), "monday"),
    (re.compile(r"周二|星期二|礼拜二"), "tuesday"),
    (re.compile(r"周三|星期三|礼拜三"), "wednesday"),
    (re.compile(r"周四|星期四|礼拜四"), "thursday"),
    (re.compile(r"周五|星期五|礼拜五"), "friday"),
    (re.compile(r"周六|星期六|礼拜六"), "saturday"),
    (re.compile(r"周日|周天|星期日|星期天|礼拜日|礼拜天"), "sunday"),
    (re.compile(r"下周|下星期|下礼拜"), "next_week"),
    (re.compile(r"本周|这周|这星期|这礼拜"), "this_week"),
    (re.compile(r"下个月|下月"), "next_month"),
    (re.compile(r"本月|这个月"), "this_month"),
]

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
FRIDAY = 4


def detect_time_context(text: str) -> str:
    for pattern, value in TIME_PATTERNS:
        if pattern.search(text):
            return value
    return TIME_CONTEXT_UNSPECIFIED


def extract_tasks_with_regex(content: Optional[str]) -> List[Dict[str, str]]:
    """Deterministic ``[{task, time_context}]`` from intent phrases.

    Repeated task texts keep their first occurrence only.
    """
    if not content:
        return []
    tasks: List[Dict[str, str]] = []
    seen = set()
    for pattern in TASK_PATTERNS:
        for match in pattern.finditer(content):
            description = (match.group(1) or "").strip()
            if not description or description in seen:
                continue
            seen.add(description)
            tasks.append(
                {"task": description, "time_context": detect_time_context(match.group(0))}
            )
    return tasks


def extract_tasks_with_ai(content: Optional[str], api_key: str) -> List[dict]:
    """Ask the model for tasks; an unusable reply yields ``[]``.

    Transport failures propagate as ``ExternalServiceError``.
    """
    if not content or not content.strip():
        return []
    client = DeepSeekClient(api_key)
    reply = client.chat(prompts.task_messages(content), temperature=0.3, max_tokens=1000)
    items = parsers.decode_task_list(reply)
    if not items:
        return []
    return [
        {
            "task": item["task"],
            "original_text": item.get("original_text"),
            "time_context": parsers.fit_column(
                item.get("time_context") or TIME_CONTEXT_UNSPECIFIED, Task.__table__.c.time_context
            ),
            "deadline": item.get("deadline"),
        }
        for item in items
    ]


def identify_tasks(content: Optional[str], api_key: Optional[str] = None) -> List[dict]:
    """Prefer the AI result when non-empty, otherwise the regex result."""
    if api_key:
        try:
            ai_tasks = extract_tasks_with_ai(content, api_key)
            if ai_tasks:
                return ai_tasks
        except AppError as exc:
            logger.warning("AI task extraction failed, falling back to regex: %s", exc.message)
    return [
        {"task": t["task"], "original_text": None, "time_context": t["time_context"], "deadline": None}
        for t in extract_tasks_with_regex(content)
    ]


def infer_deadline(time_context: Optional[str], today: date) -> Optional[date]:
    """Default deadline for a coarse time context.

    ``this_week`` means this week's Friday (or next Friday when today is past
    it); ``next_week`` is the Friday after that. Weekday names resolve to the
    next occurrence, today included.
    """
    if time_context == "today":
        return today
    if time_context == "tomorrow":
        return today + timedelta(days=1)
    if time_context == "day_after_tomorrow":
        return today + timedelta(days=2)
    if time_context == "this_week":
        return today + timedelta(days=(FRIDAY - today.weekday()) % 7)
    if time_context == "next_week":
        shifted = today + timedelta(days=7)
        return shifted + timedelta(days=(FRIDAY - shifted.weekday()) % 7)
    if time_context in WEEKDAYS:
        target = WEEKDAYS.index(time_context)
        return today + timedelta(days=(target - today.weekday()) % 7)
    return None


def resolve_deadline(task: dict, today: date) -> Optional[date]:
    """An explicit valid deadline wins over the inferred one."""
    explicit = task.get("deadline")
    if isinstance(explicit, date):
        return explicit
    explicit = parsers.parse_deadline(explicit)
    if explicit:
        return explicit
    return infer_deadline(task.get("time_context"), today)
