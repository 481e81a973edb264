"""Request/response schemas for the AI endpoints."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, model_validator


class AnalyzeRequest(BaseModel):
    journal_id: Optional[int] = None
    content: Optional[str] = None

    @model_validator(mode="after")
    def require_target(self) -> "AnalyzeRequest":
        if self.journal_id is None and not (self.content or "").strip():
            raise ValueError("内容不能为空")
        return self


class ExtractTasksRequest(BaseModel):
    journal_id: int


class WeeklyReportRequest(BaseModel):
    journals: Optional[List[dict]] = None
    completed_tasks: Optional[List[dict]] = None


class AnalysisResult(BaseModel):
    theme: str
    evaluation: str
    thought_process: str
    emotion_label: str
    sentiment: Optional[str] = None
    depth: Optional[str] = None


class WeeklyReportResult(BaseModel):
    week_overview: str = Field(default="")
    theme_analysis: str = Field(default="")
    mood_trend: str = Field(default="")
    achievements: str = Field(default="")
    growth_suggestions: str = Field(default="")
