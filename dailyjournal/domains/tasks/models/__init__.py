from dailyjournal.domains.tasks.models.task import TIME_CONTEXT_UNSPECIFIED, Task

__all__ = ["Task", "TIME_CONTEXT_UNSPECIFIED"]
