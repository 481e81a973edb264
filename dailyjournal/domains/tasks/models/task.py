"""To-do items extracted from journal entries or created by hand."""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy.orm import Mapped, mapped_column, relationship

from dailyjournal.extensions import db

TIME_CONTEXT_UNSPECIFIED = "unspecified"


class Task(db.Model):
    __tablename__ = "task"
    __table_args__ = (
        db.Index("ix_task_user_completed", "user_id", "completed"),
        db.Index("ix_task_user_deadline", "user_id", "deadline"),
        db.Index("ix_task_user_completed_at", "user_id", "completed_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        db.ForeignKey("user.id", ondelete="CASCADE"), index=True, nullable=False
    )
    journal_id: Mapped[int | None] = mapped_column(
        db.ForeignKey("journal_entry.id", ondelete="CASCADE"), index=True, nullable=True
    )
    content: Mapped[str] = mapped_column(db.Text, nullable=False)
    original_text: Mapped[str | None] = mapped_column(db.Text)
    time_context: Mapped[str] = mapped_column(
        db.String(32), default=TIME_CONTEXT_UNSPECIFIED, nullable=False
    )
    deadline: Mapped[date | None] = mapped_column(db.Date)

    completed: Mapped[bool] = mapped_column(default=False, nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(nullable=True)
    last_reminder_time: Mapped[datetime | None] = mapped_column(nullable=True)
    reminder_count: Mapped[int] = mapped_column(default=0, nullable=False)

    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)

    journal: Mapped["JournalEntry | None"] = relationship(  # noqa: F821
        "JournalEntry", back_populates="tasks"
    )
