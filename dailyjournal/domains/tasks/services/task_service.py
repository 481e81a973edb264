"""Task service."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable, List, Optional

from dailyjournal.core.errors import AuthorizationError, NotFoundError, ValidationError
from dailyjournal.core.utils.dates import utcnow
from dailyjournal.domains.journal.models import JournalEntry
from dailyjournal.domains.tasks.models import TIME_CONTEXT_UNSPECIFIED, Task
from dailyjournal.extensions import db

logger = logging.getLogger(__name__)


def _owned_journal(user_id: int, journal_id: int) -> JournalEntry:
    journal = db.session.get(JournalEntry, journal_id)
    if journal is None:
        raise NotFoundError("未找到相关日记")
    if journal.user_id != user_id:
        raise AuthorizationError("未授权访问")
    return journal


def create_task(
    user_id: int,
    *,
    content: str,
    journal_id: int | None = None,
    original_text: str | None = None,
    deadline: date | None = None,
    time_context: str | None = None,
) -> Task:
    if journal_id is not None:
        _owned_journal(user_id, journal_id)
    content = (content or "").strip()
    if not content:
        raise ValidationError("待办事项内容不能为空")
    task = Task(
        user_id=user_id,
        journal_id=journal_id,
        content=content,
        original_text=(original_text or "").strip() or None,
        deadline=deadline,
        time_context=time_context or TIME_CONTEXT_UNSPECIFIED,
    )
    db.session.add(task)
    db.session.commit()
    return task


def create_extracted_tasks(user_id: int, journal_id: int, items: Iterable[dict]) -> List[Task]:
    """Persist tasks identified in a journal entry in one commit.

    Each item carries ``content`` and optionally ``original_text``,
    ``time_context`` and ``deadline``.
    """
    _owned_journal(user_id, journal_id)
    tasks = []
    for item in items:
        content = (item.get("content") or "").strip()
        if not content:
            continue
        tasks.append(
            Task(
                user_id=user_id,
                journal_id=journal_id,
                content=content,
                original_text=item.get("original_text"),
                time_context=item.get("time_context") or TIME_CONTEXT_UNSPECIFIED,
                deadline=item.get("deadline"),
            )
        )
    db.session.add_all(tasks)
    db.session.commit()
    logger.info("Saved %d extracted tasks for journal %s", len(tasks), journal_id)
    return tasks


def list_tasks(user_id: int, completed: Optional[bool] = None) -> List[Task]:
    """Incomplete first, then soonest deadline (undated last), then newest."""
    query = Task.query.filter_by(user_id=user_id)
    if completed is not None:
        query = query.filter(Task.completed == bool(completed))
    return query.order_by(
        Task.completed.asc(),
        Task.deadline.is_(None).asc(),
        Task.deadline.asc(),
        Task.created_at.desc(),
        Task.id.desc(),
    ).all()


def list_pending(user_id: int) -> List[Task]:
    return list_tasks(user_id, completed=False)


def get_task(user_id: int, task_id: int) -> Task:
    task = db.session.get(Task, task_id)
    if task is None:
        raise NotFoundError("未找到待办事项")
    if task.user_id != user_id:
        raise AuthorizationError("未授权访问")
    return task


def set_completed(task: Task, completed: bool, now: Optional[datetime] = None) -> None:
    """Apply a completion toggle; repeating the current value changes nothing."""
    if bool(task.completed) == bool(completed):
        return
    task.completed = bool(completed)
    task.completed_at = (now or utcnow()) if completed else None


def update_task(user_id: int, task_id: int, *, now: Optional[datetime] = None, **fields) -> Task:
    """Update content, completion or deadline.

    Only keys present in ``fields`` are applied, so ``deadline=None`` clears it.
    """
    task = get_task(user_id, task_id)
    if "content" in fields and fields["content"] is not None:
        content = fields["content"].strip()
        if not content:
            raise ValidationError("待办事项内容不能为空")
        task.content = content
    if "completed" in fields and fields["completed"] is not None:
        set_completed(task, fields["completed"], now)
    if "deadline" in fields:
        task.deadline = fields["deadline"]
    db.session.commit()
    return task


def complete_task(user_id: int, task_id: int, *, now: Optional[datetime] = None) -> Task:
    return update_task(user_id, task_id, now=now, completed=True)


def delete_task(user_id: int, task_id: int) -> None:
    task = get_task(user_id, task_id)
    db.session.delete(task)
    db.session.commit()


def update_reminder_status(user_id: int, task_id: int, *, now: Optional[datetime] = None) -> Task:
    """Record that a reminder for the task was shown to the user."""
    task = get_task(user_id, task_id)
    task.last_reminder_time = now or utcnow()
    task.reminder_count = (task.reminder_count or 0) + 1
    db.session.commit()
    return task
