"""Journal request/response schemas."""

from __future__ import annotations

from datetime import date
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

Sentiment = Literal["positive", "neutral", "negative"]
Depth = Literal["shallow", "moderate", "deep"]


class JournalContentRequest(BaseModel):
    content: str = Field(min_length=1)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("日记内容不能为空")
        return v


class JournalAnalysisUpdate(BaseModel):
    theme: Optional[str] = Field(default=None, max_length=255)
    evaluation: Optional[str] = None
    thought_process: Optional[str] = None
    sentiment: Optional[Sentiment] = None
    depth: Optional[Depth] = None
    emotion_label: Optional[str] = Field(default=None, max_length=64)


class JournalEntryResponse(BaseModel):
    id: int
    user_id: int
    content: str
    entry_date: date
    theme: Optional[str]
    evaluation: Optional[str]
    thought_process: Optional[str]
    sentiment: Optional[str]
    depth: Optional[str]
    emotion_label: Optional[str]
    is_analyzed: bool
    analyzed_at: Optional[str]
    created_at: str
    updated_at: str


class WeeklyReportResponse(BaseModel):
    journal_count: int
    completed_task_count: int
    themes: List[str]
    sentiments: Dict[str, int]
    start_date: str
    end_date: str
