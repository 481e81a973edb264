"""Daily journal entry and its AI analysis fields."""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy.orm import Mapped, mapped_column, relationship

from dailyjournal.extensions import db

SENTIMENTS = ("positive", "neutral", "negative")
DEPTHS = ("shallow", "moderate", "deep")


class JournalEntry(db.Model):
    __tablename__ = "journal_entry"
    __table_args__ = (
        db.Index("ix_journal_entry_user_entry_date", "user_id", "entry_date"),
        db.Index("ix_journal_entry_user_created_at", "user_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        db.ForeignKey("user.id", ondelete="CASCADE"), index=True, nullable=False
    )
    content: Mapped[str] = mapped_column(db.Text, nullable=False)
    entry_date: Mapped[date] = mapped_column(db.Date, nullable=False)

    theme: Mapped[str | None] = mapped_column(db.String(255))
    evaluation: Mapped[str | None] = mapped_column(db.Text)
    thought_process: Mapped[str | None] = mapped_column(db.Text)
    sentiment: Mapped[str | None] = mapped_column(db.String(16))
    depth: Mapped[str | None] = mapped_column(db.String(16))
    emotion_label: Mapped[str | None] = mapped_column(db.String(64))
    is_analyzed: Mapped[bool] = mapped_column(default=False, nullable=False)
    analyzed_at: Mapped[datetime | None] = mapped_column(nullable=True)

    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)

    tasks: Mapped[list["Task"]] = relationship(  # noqa: F821
        "Task", back_populates="journal", cascade="all"
    )
