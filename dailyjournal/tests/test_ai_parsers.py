"""Reply decoder tests."""

from __future__ import annotations

from datetime import date

import pytest

pytestmark = pytest.mark.unit

from dailyjournal.domains.ai import parsers


# ==================== JSON extraction ====================


def test_extract_bare_json():
    assert parsers.extract_json('{"a": 1}') == {"a": 1}


def test_extract_fenced_json():
    text = '好的，结果如下：\n```json\n{"theme": "工作"}\n```\n希望有帮助。'
    assert parsers.extract_json(text) == {"theme": "工作"}


def test_extract_json_embedded_in_prose():
    assert parsers.extract_json('结果是 {"a": [1, 2]} 以上') == {"a": [1, 2]}


@pytest.mark.parametrize("text", [None, "", "   ", "没有JSON", "{broken"])
def test_extract_json_failure(text):
    assert parsers.extract_json(text) is None


# ==================== Normalization ====================


@pytest.mark.parametrize(
    "value,expected",
    [
        ("positive", "positive"),
        ("Negative", "negative"),
        ("积极", "positive"),
        ("中性平和", "neutral"),
        ("消极负面", "negative"),
        ("???", None),
        (None, None),
    ],
)
def test_normalize_sentiment(value, expected):
    assert parsers.normalize_sentiment(value) == expected


@pytest.mark.parametrize(
    "value,expected",
    [
        ("deep", "deep"),
        ("浅层思考", "shallow"),
        ("中等深度", "moderate"),
        ("深度思考", "deep"),
        ("unknown", None),
    ],
)
def test_normalize_depth(value, expected):
    assert parsers.normalize_depth(value) == expected


@pytest.mark.parametrize(
    "value,expected",
    [
        ("2026-10-20", date(2026, 10, 20)),
        ("2026-10-20T08:00:00", date(2026, 10, 20)),
        ("null", None),
        ("下周", None),
        (None, None),
    ],
)
def test_parse_deadline(value, expected):
    assert parsers.parse_deadline(value) == expected


# ==================== Analysis ====================


def test_decode_analysis_json_normalizes_labels():
    text = (
        '{"emotion_label": "愉快", "theme": "工作顺利", "evaluation": "积极",'
        ' "thought_process": "从用词判断", "sentiment": "积极", "depth": "中等"}'
    )
    result = parsers.decode_analysis(text)
    assert result == {
        "theme": "工作顺利",
        "evaluation": "积极",
        "thought_process": "从用词判断",
        "sentiment": "positive",
        "depth": "moderate",
        "emotion_label": "愉快",
    }


def test_decode_analysis_accepts_camel_case_keys():
    result = parsers.decode_analysis('{"thoughtProcess": "思考", "emotionLabel": "平静"}')
    assert result["thought_process"] == "思考"
    assert result["emotion_label"] == "平静"
    assert result["sentiment"] is None


def test_decode_analysis_from_labelled_sections():
    text = (
        "1. 情绪标签：愉快\n"
        "2. 主题归纳：工作顺利\n"
        "3. 内容评价：整体积极向上。\n"
        "4. 思考过程：从用词判断。\n"
        "5. 情感分类：positive\n"
        "6. 深度分类：moderate"
    )
    result = parsers.decode_analysis(text)
    assert result == {
        "emotion_label": "愉快",
        "theme": "工作顺利",
        "evaluation": "整体积极向上。",
        "thought_process": "从用词判断。",
        "sentiment": "positive",
        "depth": "moderate",
    }


def test_decode_analysis_unusable():
    assert parsers.decode_analysis("我不知道") is None
    assert parsers.decode_analysis('{"unrelated": 1}') is None


# ==================== Task list ====================


def test_decode_task_list_object():
    text = '{"tasks": [{"description": "写报告", "time_context": "today", "deadline": "2026-10-14"}, {"description": ""}]}'
    assert parsers.decode_task_list(text) == [
        {
            "task": "写报告",
            "original_text": None,
            "time_context": "today",
            "deadline": date(2026, 10, 14),
        }
    ]


def test_decode_task_list_empty_is_not_none():
    assert parsers.decode_task_list('{"tasks": []}') == []


def test_decode_task_list_bullets():
    items = parsers.decode_task_list("识别到的任务：\n- 买菜\n2. 开会\n其他内容")
    assert [i["task"] for i in items] == ["买菜", "开会"]


def test_decode_task_list_unusable():
    assert parsers.decode_task_list("没有任务") is None


# ==================== Weekly report ====================


def test_decode_weekly_report_json():
    result = parsers.decode_weekly_report('{"weekOverview": "充实", "mood_trend": "平稳"}')
    assert result["week_overview"] == "充实"
    assert result["mood_trend"] == "平稳"
    assert result["achievements"] is None


def test_decode_weekly_report_sections():
    text = "本周概述：很充实\n主题分析：工作\n情绪趋势：平稳\n成就回顾：完成报告\n成长建议：多运动"
    assert parsers.decode_weekly_report(text) == {
        "week_overview": "很充实",
        "theme_analysis": "工作",
        "mood_trend": "平稳",
        "achievements": "完成报告",
        "growth_suggestions": "多运动",
    }


def test_decode_weekly_report_unusable():
    assert parsers.decode_weekly_report("无") is None
