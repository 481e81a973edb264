"""Task request/response schemas."""

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class TaskCreate(BaseModel):
    content: str = Field(min_length=1)
    journal_id: Optional[int] = None
    original_text: Optional[str] = None
    deadline: Optional[date] = None
    time_context: Optional[str] = Field(default=None, max_length=32)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("待办事项内容不能为空")
        return v


class TaskUpdate(BaseModel):
    content: Optional[str] = Field(default=None, min_length=1)
    completed: Optional[bool] = None
    deadline: Optional[date] = None


class TaskListFilter(BaseModel):
    completed: Optional[bool] = None


class TaskResponse(BaseModel):
    id: int
    user_id: int
    journal_id: Optional[int]
    content: str
    original_text: Optional[str]
    time_context: str
    deadline: Optional[date]
    completed: bool
    completed_at: Optional[str]
    last_reminder_time: Optional[str]
    reminder_count: int
    created_at: str
    updated_at: str
