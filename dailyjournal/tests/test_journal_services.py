"""Journal service tests.

- create_or_update_today (one entry per local day)
- get_today / get_entry ownership
- update_entry / update_analysis
- delete_entry cascade to tasks
- weekly_report counts
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

pytestmark = pytest.mark.integration

from dailyjournal.core.errors import AuthorizationError, NotFoundError, ValidationError
from dailyjournal.domains.journal.models import JournalEntry
from dailyjournal.domains.journal.services import journal_service
from dailyjournal.domains.tasks.models import Task
from dailyjournal.domains.tasks.services import task_service

NOW = datetime(2026, 10, 14, 9, 0)


# ==================== Create / Overwrite ====================


def test_first_write_of_the_day_creates_entry(user):
    entry, created = journal_service.create_or_update_today(user.id, "今天天气很好", now=NOW)
    assert created is True
    assert entry.id is not None
    assert entry.entry_date == date(2026, 10, 14)
    assert entry.is_analyzed is False


def test_second_write_same_day_overwrites(user):
    first, _ = journal_service.create_or_update_today(user.id, "早上", now=NOW)
    journal_service.update_analysis(user.id, first.id, theme="早晨", sentiment="positive")

    second, created = journal_service.create_or_update_today(
        user.id, "晚上改写", now=NOW + timedelta(hours=10)
    )
    assert created is False
    assert second.id == first.id
    assert second.content == "晚上改写"
    assert second.is_analyzed is False
    assert JournalEntry.query.filter_by(user_id=user.id).count() == 1


def test_next_day_creates_new_entry(user):
    journal_service.create_or_update_today(user.id, "第一天", now=NOW)
    entry, created = journal_service.create_or_update_today(
        user.id, "第二天", now=NOW + timedelta(days=1)
    )
    assert created is True
    assert JournalEntry.query.filter_by(user_id=user.id).count() == 2
    assert entry.entry_date == date(2026, 10, 15)


def test_day_boundary_follows_app_timezone(app, user):
    app.config["APP_TIMEZONE"] = "Asia/Shanghai"
    # 17:00 UTC is already the next morning in Shanghai.
    entry, _ = journal_service.create_or_update_today(
        user.id, "深夜", now=datetime(2026, 10, 14, 17, 0)
    )
    assert entry.entry_date == date(2026, 10, 15)


def test_entries_are_per_user(user, other_user):
    journal_service.create_or_update_today(user.id, "mine", now=NOW)
    _, created = journal_service.create_or_update_today(other_user.id, "theirs", now=NOW)
    assert created is True
    assert [e.content for e in journal_service.list_entries(user.id)] == ["mine"]


# ==================== Read ====================


def test_get_today_without_entry_raises(user):
    with pytest.raises(NotFoundError) as exc:
        journal_service.get_today(user.id, now=NOW)
    assert exc.value.message == "今日尚未创建日记"


def test_get_today_returns_entry(user):
    entry, _ = journal_service.create_or_update_today(user.id, "hello", now=NOW)
    assert journal_service.get_today(user.id, now=NOW).id == entry.id


def test_get_entry_missing(user):
    with pytest.raises(NotFoundError):
        journal_service.get_entry(user.id, 999)


def test_get_entry_of_other_user_is_forbidden(user, other_user):
    entry, _ = journal_service.create_or_update_today(other_user.id, "secret", now=NOW)
    with pytest.raises(AuthorizationError):
        journal_service.get_entry(user.id, entry.id)


def test_list_entries_newest_first(user):
    for offset in range(3):
        journal_service.create_or_update_today(
            user.id, f"day {offset}", now=NOW + timedelta(days=offset)
        )
    entries = journal_service.list_entries(user.id)
    assert [e.content for e in entries] == ["day 2", "day 1", "day 0"]


# ==================== Update ====================


def test_update_entry_resets_analysis_flag(user):
    entry, _ = journal_service.create_or_update_today(user.id, "before", now=NOW)
    journal_service.update_analysis(user.id, entry.id, theme="x")

    updated = journal_service.update_entry(user.id, entry.id, "after")
    assert updated.content == "after"
    assert updated.is_analyzed is False
    # Stored analysis is kept until the next analysis run.
    assert updated.theme == "x"


def test_update_analysis_merges_fields(user):
    entry, _ = journal_service.create_or_update_today(user.id, "content", now=NOW)
    journal_service.update_analysis(
        user.id,
        entry.id,
        theme="工作",
        evaluation="不错",
        sentiment="positive",
        depth="moderate",
        emotion_label="愉快",
    )
    updated = journal_service.update_analysis(user.id, entry.id, theme="学习", evaluation="  ")

    assert updated.theme == "学习"
    assert updated.evaluation == "不错"
    assert updated.sentiment == "positive"
    assert updated.emotion_label == "愉快"
    assert updated.is_analyzed is True
    assert updated.analyzed_at is not None


def test_update_analysis_without_fields_is_rejected(user):
    entry, _ = journal_service.create_or_update_today(user.id, "content", now=NOW)
    with pytest.raises(ValidationError):
        journal_service.update_analysis(user.id, entry.id, theme="  ", sentiment=None)

    stored = journal_service.get_entry(user.id, entry.id)
    assert stored.is_analyzed is False
    assert stored.analyzed_at is None


def test_update_analysis_of_other_user_is_forbidden(user, other_user):
    entry, _ = journal_service.create_or_update_today(other_user.id, "content", now=NOW)
    with pytest.raises(AuthorizationError):
        journal_service.update_analysis(user.id, entry.id, theme="hijack")


# ==================== Delete ====================


def test_delete_entry_removes_its_tasks(user):
    entry, _ = journal_service.create_or_update_today(user.id, "我要跑步", now=NOW)
    task_service.create_task(user.id, content="跑步", journal_id=entry.id)
    manual = task_service.create_task(user.id, content="manual")

    journal_service.delete_entry(user.id, entry.id)

    assert JournalEntry.query.filter_by(user_id=user.id).count() == 0
    remaining = Task.query.filter_by(user_id=user.id).all()
    assert [t.id for t in remaining] == [manual.id]


def test_delete_entry_of_other_user_is_forbidden(user, other_user):
    entry, _ = journal_service.create_or_update_today(other_user.id, "keep", now=NOW)
    with pytest.raises(AuthorizationError):
        journal_service.delete_entry(user.id, entry.id)
    assert JournalEntry.query.count() == 1


# ==================== Weekly report ====================


def test_weekly_report_counts_trailing_week(user):
    old, _ = journal_service.create_or_update_today(user.id, "old", now=NOW - timedelta(days=10))
    a, _ = journal_service.create_or_update_today(user.id, "a", now=NOW - timedelta(days=2))
    b, _ = journal_service.create_or_update_today(user.id, "b", now=NOW)
    journal_service.update_analysis(user.id, a.id, theme="工作", sentiment="positive")
    journal_service.update_analysis(user.id, b.id, theme="家庭", sentiment="positive")
    journal_service.update_analysis(user.id, old.id, theme="旧", sentiment="negative")

    done = task_service.create_task(user.id, content="done")
    task_service.complete_task(user.id, done.id, now=NOW - timedelta(days=1))
    stale = task_service.create_task(user.id, content="stale")
    task_service.complete_task(user.id, stale.id, now=NOW - timedelta(days=20))
    task_service.create_task(user.id, content="open")

    report = journal_service.weekly_report(user.id, now=NOW)
    assert report["journal_count"] == 2
    assert report["completed_task_count"] == 1
    assert report["themes"] == ["工作", "家庭"]
    assert report["sentiments"] == {"positive": 2}
    assert report["start_date"] == "2026-10-07T00:00:00"
    assert report["end_date"] == NOW.isoformat()


def test_weekly_report_empty(user):
    report = journal_service.weekly_report(user.id, now=NOW)
    assert report["journal_count"] == 0
    assert report["completed_task_count"] == 0
    assert report["themes"] == []
    assert report["sentiments"] == {}
