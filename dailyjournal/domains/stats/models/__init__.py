from dailyjournal.domains.stats.models.weekly_summary import WeeklySummary

__all__ = ["WeeklySummary"]
