"""Task mappers for DTO responses."""

from __future__ import annotations

from dailyjournal.domains.tasks.models import Task
from dailyjournal.domains.tasks.schemas.task_schemas import TaskResponse


def _iso(value) -> str | None:
    return value.isoformat() if value else None


def map_task(task: Task) -> dict:
    return TaskResponse(
        id=task.id,
        user_id=task.user_id,
        journal_id=task.journal_id,
        content=task.content,
        original_text=task.original_text,
        time_context=task.time_context,
        deadline=task.deadline,
        completed=bool(task.completed),
        completed_at=_iso(task.completed_at),
        last_reminder_time=_iso(task.last_reminder_time),
        reminder_count=task.reminder_count or 0,
        created_at=_iso(task.created_at) or "",
        updated_at=_iso(task.updated_at) or "",
    ).model_dump(mode="json")
