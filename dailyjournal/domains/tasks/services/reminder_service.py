"""Reminder scheduling for unfinished tasks.

A pending task is either never reminded or reminded and awaiting the user.
It becomes due again once ``reminder_interval`` has elapsed since its last
reminder; a never-reminded task is due immediately. At most one reminder is
displayed at a time, and bookkeeping (``last_reminder_time`` and
``reminder_count``) is written when the reminder is shown, not when the user
responds to it.

The pure helpers at the top are what the HTTP endpoint uses. The
``ReminderScheduler`` wraps them into a cancellable loop that sleeps until the
earliest next-eligible time instead of scanning on a fixed tick.
"""

from __future__ import annotations

import logging
import random
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Protocol, Sequence

from dailyjournal.core.errors import AppError
from dailyjournal.core.utils.dates import utcnow
from dailyjournal.domains.settings.services import settings_service
from dailyjournal.domains.tasks.services import task_service
from dailyjournal.extensions import db

logger = logging.getLogger(__name__)

STRATEGY_FIRST = "first"
STRATEGY_RANDOM = "random"
STRATEGIES = (STRATEGY_FIRST, STRATEGY_RANDOM)

MIN_WAIT_SECONDS = 1.0


class RemindableTask(Protocol):
    id: int
    content: str
    completed: bool
    last_reminder_time: Optional[datetime]
    reminder_count: int


class TaskGateway(Protocol):
    def list_pending(self) -> List[RemindableTask]: ...

    def mark_reminded(self, task_id: int, now: datetime) -> RemindableTask: ...

    def complete(self, task_id: int, now: datetime) -> RemindableTask: ...


@dataclass
class ReminderConfig:
    interval: timedelta
    poll_seconds: float = 60.0
    display_seconds: Optional[float] = None
    strategy: str = STRATEGY_FIRST

    @classmethod
    def from_app_config(cls, config, *, interval_minutes: Optional[int] = None) -> "ReminderConfig":
        minutes = interval_minutes or int(config.get("DEFAULT_REMINDER_INTERVAL_MINUTES", 20))
        return cls(
            interval=timedelta(minutes=minutes),
            poll_seconds=float(config.get("REMINDER_POLL_SECONDS", 60)),
            display_seconds=float(config.get("REMINDER_DISPLAY_SECONDS", 20)),
            strategy=config.get("REMINDER_STRATEGY", STRATEGY_FIRST),
        )


# ==================== Pure helpers ====================


def is_due(task: RemindableTask, now: datetime, interval: timedelta) -> bool:
    if task.completed:
        return False
    if task.last_reminder_time is None:
        return True
    return now - task.last_reminder_time >= interval


def next_eligible_at(task: RemindableTask, interval: timedelta) -> Optional[datetime]:
    """When the task may be surfaced again; ``None`` means right away."""
    if task.last_reminder_time is None:
        return None
    return task.last_reminder_time + interval


def select_due_task(
    tasks: Sequence[RemindableTask],
    now: datetime,
    interval: timedelta,
    strategy: str = STRATEGY_FIRST,
    rng: Optional[random.Random] = None,
) -> Optional[RemindableTask]:
    """Pick one due task: the first in list order, or uniformly at random."""
    if strategy not in STRATEGIES:
        raise ValueError(f"unknown reminder strategy: {strategy}")
    due = [t for t in tasks if is_due(t, now, interval)]
    if not due:
        return None
    if strategy == STRATEGY_RANDOM:
        return (rng or random).choice(due)
    return due[0]


def earliest_eligible_at(
    tasks: Sequence[RemindableTask], now: datetime, interval: timedelta
) -> Optional[datetime]:
    """Soonest moment any pending task becomes due, clamped to ``now``."""
    times = []
    for task in tasks:
        if task.completed:
            continue
        eligible = next_eligible_at(task, interval)
        times.append(now if eligible is None or eligible < now else eligible)
    return min(times) if times else None


# ==================== Scheduler ====================


class ReminderScheduler:
    """Surfaces one due task at a time through ``on_surface``."""

    def __init__(
        self,
        gateway: TaskGateway,
        interval: timedelta,
        on_surface: Optional[Callable[[RemindableTask], None]] = None,
        *,
        strategy: str = STRATEGY_FIRST,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = utcnow,
        poll_seconds: float = 60.0,
        display_seconds: Optional[float] = None,
    ) -> None:
        if strategy not in STRATEGIES:
            raise ValueError(f"unknown reminder strategy: {strategy}")
        self.gateway = gateway
        self.interval = interval
        self.on_surface = on_surface
        self.strategy = strategy
        self.rng = rng or random.Random()
        self.clock = clock
        self.poll_seconds = poll_seconds
        self.display_seconds = display_seconds
        self.current: Optional[RemindableTask] = None
        self._shown_at: Optional[datetime] = None
        self._stop = threading.Event()

    def tick(self, now: Optional[datetime] = None) -> Optional[RemindableTask]:
        """Surface a due task if nothing is displayed. Returns the surfaced task."""
        now = now or self.clock()
        if self.current is not None and self._display_expired(now):
            self.dismiss_current()
        if self.current is not None:
            return None
        task = select_due_task(
            self.gateway.list_pending(), now, self.interval, self.strategy, self.rng
        )
        if task is None:
            return None
        task = self.gateway.mark_reminded(task.id, now)
        self.current = task
        self._shown_at = now
        if self.on_surface is not None:
            self.on_surface(task)
        return task

    def complete_current(self, now: Optional[datetime] = None) -> Optional[RemindableTask]:
        if self.current is None:
            return None
        task = self.gateway.complete(self.current.id, now or self.clock())
        self._clear()
        return task

    def dismiss_current(self) -> None:
        """Hide the reminder; the task stays eligible for the next check."""
        self._clear()

    def seconds_until_next_check(self, now: Optional[datetime] = None) -> float:
        now = now or self.clock()
        if self.current is not None:
            if self.display_seconds is None:
                return self.poll_seconds
            remaining = self.display_seconds - (now - self._shown_at).total_seconds()
            return max(MIN_WAIT_SECONDS, min(remaining, self.poll_seconds))
        eligible = earliest_eligible_at(self.gateway.list_pending(), now, self.interval)
        if eligible is None:
            return self.poll_seconds
        wait = (eligible - now).total_seconds()
        return max(MIN_WAIT_SECONDS, min(wait, self.poll_seconds))

    def run(self) -> None:
        logger.info(
            "Starting reminder scheduler (interval=%ss, poll=%ss, strategy=%s)",
            int(self.interval.total_seconds()),
            self.poll_seconds,
            self.strategy,
        )
        try:
            while not self._stop.is_set():
                now = self.clock()
                try:
                    self.tick(now)
                except AppError as exc:
                    # e.g. the task was deleted between listing and marking it
                    logger.warning("Reminder check failed: %s", exc.message)
                if self._stop.is_set():
                    break
                self._stop.wait(self.seconds_until_next_check(now))
        except KeyboardInterrupt:
            logger.info("Reminder scheduler stopped by user")

    def cancel(self) -> None:
        self._stop.set()

    @property
    def cancelled(self) -> bool:
        return self._stop.is_set()

    def _display_expired(self, now: datetime) -> bool:
        if self.display_seconds is None or self._shown_at is None:
            return False
        return (now - self._shown_at).total_seconds() >= self.display_seconds

    def _clear(self) -> None:
        self.current = None
        self._shown_at = None


# ==================== Database gateway ====================


class DatabaseTaskGateway:
    """TaskGateway backed by the task service for one user."""

    def __init__(self, user_id: int) -> None:
        self.user_id = user_id

    def list_pending(self):
        # Pick up changes made by other processes (e.g. completion over HTTP).
        db.session.expire_all()
        return task_service.list_pending(self.user_id)

    def mark_reminded(self, task_id: int, now: datetime):
        return task_service.update_reminder_status(self.user_id, task_id, now=now)

    def complete(self, task_id: int, now: datetime):
        return task_service.complete_task(self.user_id, task_id, now=now)


def build_scheduler_for_user(
    user_id: int,
    config,
    on_surface: Optional[Callable[[RemindableTask], None]] = None,
    *,
    strategy: Optional[str] = None,
) -> ReminderScheduler:
    cfg = ReminderConfig.from_app_config(
        config, interval_minutes=settings_service.get_reminder_interval(user_id)
    )
    return ReminderScheduler(
        DatabaseTaskGateway(user_id),
        cfg.interval,
        on_surface,
        strategy=strategy or cfg.strategy,
        poll_seconds=cfg.poll_seconds,
        display_seconds=cfg.display_seconds,
    )


def next_reminder(user_id: int, *, strategy: str = STRATEGY_FIRST, now: Optional[datetime] = None) -> dict:
    """Due task (if any) and the next time a check is worth making."""
    now = now or utcnow()
    interval = timedelta(minutes=settings_service.get_reminder_interval(user_id))
    pending = task_service.list_pending(user_id)
    task = select_due_task(pending, now, interval, strategy)
    if task is not None:
        next_check = now
    else:
        next_check = earliest_eligible_at(pending, now, interval)
    return {
        "task": task,
        "next_check_at": next_check,
        "interval_minutes": int(interval.total_seconds() // 60),
    }
