from dailyjournal.domains.journal.models.journal_entry import DEPTHS, SENTIMENTS, JournalEntry

__all__ = ["JournalEntry", "SENTIMENTS", "DEPTHS"]
