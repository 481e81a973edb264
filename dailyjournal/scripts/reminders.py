"""CLI commands for task reminders.

Usage:
    flask reminders run --user 1                  # Surface due tasks in the log
    flask reminders run --user 1 --strategy random
    flask reminders next --user 1                 # Show the task due right now
"""

from __future__ import annotations

import logging
import os

import click
from flask import current_app
from flask.cli import with_appcontext

logger = logging.getLogger(__name__)


@click.group("reminders")
def reminders_group():
    """Task reminder tooling."""


@reminders_group.command("run")
@click.option("--user", "-u", "user_id", type=int, required=True, help="User whose tasks to remind")
@click.option(
    "--strategy",
    "-s",
    type=click.Choice(["first", "random"]),
    default=None,
    help="How to pick among due tasks (defaults to REMINDER_STRATEGY)",
)
@with_appcontext
def run_reminders_command(user_id: int, strategy: str | None):
    """Run the reminder loop until interrupted."""
    from dailyjournal.core.users.services import get_user
    from dailyjournal.domains.tasks.services.reminder_service import build_scheduler_for_user

    logging.basicConfig(
        level=os.environ.get("REMINDER_LOGLEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if get_user(user_id) is None:
        raise click.ClickException(f"User {user_id} not found")

    def _surface(task):
        logger.info("Reminder #%s for task %s: %s", task.reminder_count, task.id, task.content)

    scheduler = build_scheduler_for_user(user_id, current_app.config, _surface, strategy=strategy)
    scheduler.run()


@reminders_group.command("next")
@click.option("--user", "-u", "user_id", type=int, required=True, help="User whose tasks to check")
@with_appcontext
def next_reminder_command(user_id: int):
    """Print the task that is due now without recording a reminder."""
    from dailyjournal.domains.tasks.services.reminder_service import next_reminder

    result = next_reminder(user_id)
    task = result["task"]
    if task is None:
        next_check = result["next_check_at"]
        click.echo(f"Nothing due. Next check: {next_check.isoformat() if next_check else 'no pending tasks'}")
        return
    click.echo(f"Due: [{task.id}] {task.content} (reminded {task.reminder_count} times)")


def register_commands(app):
    """Register CLI commands with the app."""
    app.cli.add_command(reminders_group)
