"""Decoders for chat-completion replies.

Every reply goes through two stages: a strict JSON decode (a bare document or
one wrapped in a fenced code block) and, when that fails, a permissive scan
for labelled sections in free text. Each decoder is a pure function that
returns a structured result or ``None``; filling placeholders is left to the
caller.
"""

from __future__ import annotations

import json
import re
from datetime import date
from typing import Any, Dict, List, Optional

from dailyjournal.domains.journal.models import DEPTHS, SENTIMENTS

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)

_SENTIMENT_ALIASES = {
    "积极": "positive",
    "正向": "positive",
    "正面": "positive",
    "中性": "neutral",
    "中立": "neutral",
    "平和": "neutral",
    "消极": "negative",
    "负面": "negative",
}
_DEPTH_ALIASES = {
    "浅层": "shallow",
    "浅": "shallow",
    "中等": "moderate",
    "适中": "moderate",
    "深度": "deep",
    "深刻": "deep",
    "深": "deep",
}

ANALYSIS_KEYS = {
    "theme": ("theme",),
    "evaluation": ("evaluation", "analysis"),
    "thought_process": ("thought_process", "thoughtProcess", "thinking_process"),
    "sentiment": ("sentiment",),
    "depth": ("depth",),
    "emotion_label": ("emotion_label", "emotionLabel", "emotion"),
}

_ANALYSIS_LABELS = ("情绪标签", "主题归纳", "内容评价", "深度分析", "思考过程", "情感分类", "深度分类")
_ANALYSIS_SECTIONS = {
    "emotion_label": ("情绪标签",),
    "theme": ("主题归纳",),
    "evaluation": ("内容评价", "深度分析"),
    "thought_process": ("思考过程",),
    "sentiment": ("情感分类",),
    "depth": ("深度分类",),
}
_SINGLE_LINE_FIELDS = {"emotion_label", "theme", "sentiment", "depth"}

WEEKLY_REPORT_KEYS = {
    "week_overview": ("week_overview", "weekOverview"),
    "theme_analysis": ("theme_analysis", "themeAnalysis"),
    "mood_trend": ("mood_trend", "moodTrend"),
    "achievements": ("achievements",),
    "growth_suggestions": ("growth_suggestions", "growthSuggestions"),
}
_WEEKLY_LABELS = {
    "week_overview": "本周概述",
    "theme_analysis": "主题分析",
    "mood_trend": "情绪趋势",
    "achievements": "成就回顾",
    "growth_suggestions": "成长建议",
}

_BULLET_RE = re.compile(r"^\s*(?:[-*•]|\d+[.、)])\s*(.+?)\s*$")


# ==================== Shared helpers ====================


def extract_json(text: Optional[str]) -> Any:
    """Decode a JSON document from a reply, or return ``None``."""
    if not text or not text.strip():
        return None
    candidates = [text.strip()]
    candidates.extend(m.group(1).strip() for m in _FENCE_RE.finditer(text))
    for opener, closer in (("{", "}"), ("[", "]")):
        start, end = text.find(opener), text.rfind(closer)
        if start != -1 and end > start:
            candidates.append(text[start : end + 1])
    for candidate in candidates:
        try:
            return json.loads(candidate)
        except (TypeError, ValueError):
            continue
    return None


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)
    value = value.strip()
    return value or None


def _pick(obj: dict, keys) -> Optional[str]:
    for key in keys:
        if key in obj:
            cleaned = _clean(obj[key])
            if cleaned:
                return cleaned
    return None


def _section(text: str, label: str, stop_labels, single_line: bool) -> Optional[str]:
    if single_line:
        pattern = rf"{label}\s*[：:]\s*(.+?)\s*(?:[\r\n]|$)"
    else:
        stops = "|".join(re.escape(s) for s in stop_labels if s != label)
        pattern = rf"{label}\s*[：:]\s*([\s\S]+?)(?=(?:\s*(?:\d+[.、]\s*)?(?:{stops})\s*[：:])|$)"
    match = re.search(pattern, text)
    return _clean(match.group(1)) if match else None


def fit_column(value: Optional[str], column) -> Optional[str]:
    """Trim ``value`` to the length of a ``String`` column."""
    limit = getattr(column.type, "length", None)
    if value is None or not limit:
        return value
    return value[:limit]


def normalize_sentiment(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    lowered = value.strip().strip("\"'“”").lower()
    if lowered in SENTIMENTS:
        return lowered
    for alias, mapped in _SENTIMENT_ALIASES.items():
        if alias in value:
            return mapped
    return None


def normalize_depth(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    lowered = value.strip().strip("\"'“”").lower()
    if lowered in DEPTHS:
        return lowered
    for alias, mapped in _DEPTH_ALIASES.items():
        if alias in value:
            return mapped
    return None


def parse_deadline(value: Any) -> Optional[date]:
    """ISO ``YYYY-MM-DD`` into a date; anything else is ``None``."""
    cleaned = _clean(value)
    if not cleaned or cleaned.lower() in ("null", "none"):
        return None
    try:
        return date.fromisoformat(cleaned[:10])
    except ValueError:
        return None


# ==================== Journal analysis ====================


def decode_analysis_json(text: Optional[str]) -> Optional[Dict[str, Optional[str]]]:
    obj = extract_json(text)
    if not isinstance(obj, dict):
        return None
    result = {field: _pick(obj, keys) for field, keys in ANALYSIS_KEYS.items()}
    if not any(result.values()):
        return None
    return result


def decode_analysis_sections(text: Optional[str]) -> Optional[Dict[str, Optional[str]]]:
    if not text:
        return None
    result: Dict[str, Optional[str]] = {}
    for field, labels in _ANALYSIS_SECTIONS.items():
        value = None
        for label in labels:
            value = _section(text, label, _ANALYSIS_LABELS, field in _SINGLE_LINE_FIELDS)
            if value:
                break
        result[field] = value
    if not any(result.values()):
        return None
    return result


def decode_analysis(text: Optional[str]) -> Optional[Dict[str, Optional[str]]]:
    result = decode_analysis_json(text) or decode_analysis_sections(text)
    if result is None:
        return None
    result["sentiment"] = normalize_sentiment(result.get("sentiment"))
    result["depth"] = normalize_depth(result.get("depth"))
    return result


# ==================== Task extraction ====================


def _task_item(item: Any) -> Optional[dict]:
    if isinstance(item, str):
        task = _clean(item)
        return {"task": task, "original_text": None, "time_context": None, "deadline": None} if task else None
    if not isinstance(item, dict):
        return None
    task = _pick(item, ("description", "task", "content"))
    if not task:
        return None
    return {
        "task": task,
        "original_text": _pick(item, ("originalText", "original_text")),
        "time_context": _pick(item, ("time_context", "timeContext")),
        "deadline": parse_deadline(item.get("deadline")),
    }


def decode_task_list_json(text: Optional[str]) -> Optional[List[dict]]:
    """Accepts ``{"tasks": [...]}`` or a bare array; an empty list is valid."""
    obj = extract_json(text)
    if isinstance(obj, dict):
        obj = obj.get("tasks")
    if not isinstance(obj, list):
        return None
    items = [_task_item(item) for item in obj]
    return [item for item in items if item]


def decode_task_list_sections(text: Optional[str]) -> Optional[List[dict]]:
    """Bulleted or numbered lines in a prose reply."""
    if not text:
        return None
    items = []
    for line in text.splitlines():
        match = _BULLET_RE.match(line)
        if match:
            item = _task_item(match.group(1))
            if item:
                items.append(item)
    return items or None


def decode_task_list(text: Optional[str]) -> Optional[List[dict]]:
    result = decode_task_list_json(text)
    if result is not None:
        return result
    return decode_task_list_sections(text)


# ==================== Weekly report ====================


def decode_weekly_report_json(text: Optional[str]) -> Optional[Dict[str, Optional[str]]]:
    obj = extract_json(text)
    if not isinstance(obj, dict):
        return None
    result = {field: _pick(obj, keys) for field, keys in WEEKLY_REPORT_KEYS.items()}
    if not any(result.values()):
        return None
    return result


def decode_weekly_report_sections(text: Optional[str]) -> Optional[Dict[str, Optional[str]]]:
    if not text:
        return None
    labels = tuple(_WEEKLY_LABELS.values())
    result = {
        field: _section(text, label, labels, single_line=False)
        for field, label in _WEEKLY_LABELS.items()
    }
    if not any(result.values()):
        return None
    return result


def decode_weekly_report(text: Optional[str]) -> Optional[Dict[str, Optional[str]]]:
    return decode_weekly_report_json(text) or decode_weekly_report_sections(text)
