"""Journal mappers for DTO responses."""

from __future__ import annotations

from dailyjournal.domains.journal.models import JournalEntry
from dailyjournal.domains.journal.schemas.journal_schemas import JournalEntryResponse


def map_entry(entry: JournalEntry) -> dict:
    return JournalEntryResponse(
        id=entry.id,
        user_id=entry.user_id,
        content=entry.content,
        entry_date=entry.entry_date,
        theme=entry.theme,
        evaluation=entry.evaluation,
        thought_process=entry.thought_process,
        sentiment=entry.sentiment,
        depth=entry.depth,
        emotion_label=entry.emotion_label,
        is_analyzed=bool(entry.is_analyzed),
        analyzed_at=entry.analyzed_at.isoformat() if entry.analyzed_at else None,
        created_at=entry.created_at.isoformat() if entry.created_at else "",
        updated_at=entry.updated_at.isoformat() if entry.updated_at else "",
    ).model_dump(mode="json")
