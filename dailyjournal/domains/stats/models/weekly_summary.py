"""Stored weekly summary, one per user and week start."""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy.orm import Mapped, mapped_column

from dailyjournal.extensions import db


class WeeklySummary(db.Model):
    __tablename__ = "weekly_summary"
    __table_args__ = (
        db.UniqueConstraint("user_id", "week_start_date", name="uq_weekly_summary_user_week"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        db.ForeignKey("user.id", ondelete="CASCADE"), index=True, nullable=False
    )
    week_start_date: Mapped[date] = mapped_column(db.Date, nullable=False)
    week_end_date: Mapped[date] = mapped_column(db.Date, nullable=False)
    emotion_stats: Mapped[list] = mapped_column(db.JSON, default=list)
    theme_summary: Mapped[str | None] = mapped_column(db.Text)
    task_completion_rate: Mapped[float] = mapped_column(db.Float, default=0.0)
    generated_content: Mapped[str] = mapped_column(db.Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
