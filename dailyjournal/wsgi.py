"""WSGI entrypoint: ``gunicorn dailyjournal.wsgi:app``."""

from dailyjournal import create_app

app = create_app()
