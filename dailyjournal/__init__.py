"""Daily Journal application factory and bootstrap."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from flask import Flask
from pydantic import ValidationError as PydanticValidationError

from dailyjournal.config import config_by_name
from dailyjournal.core.errors import AppError, ExternalServiceError
from dailyjournal.extensions import init_extensions, jwt


def create_app(config_name: Optional[str] = None) -> Flask:
    """Create and configure the Daily Journal Flask application."""
    env_name = (config_name or os.environ.get("APP_ENV") or "development").lower()
    project_root = Path(__file__).resolve().parent.parent
    instance_root = project_root / "instance"

    app = Flask(__name__, instance_path=str(instance_root), instance_relative_config=True)
    config_cls = config_by_name.get(env_name, config_by_name["development"])
    app.config.from_object(config_cls)

    # Normalize sqlite path to absolute to avoid "unable to open database file"
    db_uri = app.config.get("SQLALCHEMY_DATABASE_URI")
    if db_uri and db_uri.startswith("sqlite:///") and not db_uri.startswith("sqlite:////"):
        db_path = db_uri.replace("sqlite:///", "", 1)
        abs_path = project_root / db_path
        abs_path.parent.mkdir(parents=True, exist_ok=True)
        app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{abs_path}"

    init_extensions(app)
    _register_blueprints(app)
    _register_error_handlers(app)
    _register_auth_handlers(app)

    @app.get("/health")
    def health():
        return {"success": True}, 200

    # Register CLI commands
    from dailyjournal.scripts.reminders import register_commands

    register_commands(app)

    return app


def _register_blueprints(app: Flask) -> None:
    """Lazy import and register all controllers."""
    from dailyjournal.core.auth.controllers import auth_bp  # local import to avoid circulars
    from dailyjournal.domains.ai.controllers.deepseek_api import deepseek_api_bp
    from dailyjournal.domains.journal.controllers.journal_api import journal_api_bp
    from dailyjournal.domains.settings.controllers.settings_api import settings_api_bp
    from dailyjournal.domains.stats.controllers.stats_api import stats_api_bp
    from dailyjournal.domains.tasks.controllers.task_api import reminder_api_bp, task_api_bp

    app.register_blueprint(auth_bp, url_prefix="/api/users")
    app.register_blueprint(journal_api_bp, url_prefix="/api/journals")
    app.register_blueprint(task_api_bp, url_prefix="/api/tasks")
    app.register_blueprint(reminder_api_bp, url_prefix="/api/reminders")
    app.register_blueprint(settings_api_bp, url_prefix="/api/settings")
    app.register_blueprint(deepseek_api_bp, url_prefix="/api/deepseek")
    app.register_blueprint(stats_api_bp, url_prefix="/api/stats")


def _jsonable_errors(exc: PydanticValidationError) -> list[dict]:
    errors = exc.errors(include_url=False)
    for err in errors:
        if "ctx" in err and isinstance(err["ctx"], dict):
            err["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
        err.pop("input", None)
    return errors


def _register_error_handlers(app: Flask) -> None:
    """JSON error envelopes: ``{"success": false, "error": message}``."""
    from werkzeug.exceptions import HTTPException

    @app.errorhandler(AppError)
    def _app_error(exc: AppError):
        if isinstance(exc, ExternalServiceError):
            # Only the generic message leaves the server.
            app.logger.error("External service failure: %s", exc.message)
            return {"success": False, "error": exc.public_message}, exc.status_code
        return {"success": False, "error": exc.message}, exc.status_code

    @app.errorhandler(PydanticValidationError)
    def _validation_error(exc: PydanticValidationError):
        errors = _jsonable_errors(exc)
        message = errors[0].get("msg", "请求参数无效") if errors else "请求参数无效"
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        return {"success": False, "error": message, "details": errors}, 400

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return {"success": False, "error": exc.description}, exc.code

    @app.errorhandler(Exception)
    def _generic_error(exc: Exception):
        app.logger.exception("Unhandled error: %s", exc)
        # In debug/testing, surface the exception message to speed up diagnosis
        if app.debug or app.testing:
            return {"success": False, "error": str(exc)}, 500
        return {"success": False, "error": "服务器内部错误"}, 500


def _register_auth_handlers(app: Flask) -> None:
    """Reject revoked session credentials."""
    from dailyjournal.core.auth.auth_service import is_token_revoked

    @jwt.token_in_blocklist_loader
    def _token_revoked(jwt_header, jwt_payload) -> bool:
        return is_token_revoked(jwt_payload.get("jti", ""))
