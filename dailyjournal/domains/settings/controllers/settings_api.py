"""Settings JSON API."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from dailyjournal.core.utils.decorators import auth_required, current_user_id
from dailyjournal.domains.settings.models import UserSettings
from dailyjournal.domains.settings.schemas.settings_schemas import (
    ApiKeyUpdate,
    SettingsResponse,
    SettingsUpdate,
)
from dailyjournal.domains.settings.services import settings_service

settings_api_bp = Blueprint("settings_api", __name__)


def _map_settings(settings: UserSettings) -> dict:
    return SettingsResponse(
        reminder_interval=settings.reminder_interval,
        theme=settings.theme,
        email_notifications=bool(settings.email_notifications),
        has_api_key=settings_service.has_api_key(settings.user_id),
    ).model_dump()


@settings_api_bp.get("")
@auth_required
def get_settings():
    settings = settings_service.get_settings(current_user_id())
    return jsonify({"success": True, "settings": _map_settings(settings)})


@settings_api_bp.put("")
@auth_required
def update_settings():
    data = SettingsUpdate.model_validate(request.get_json(silent=True) or {})
    settings = settings_service.update_settings(current_user_id(), **data.model_dump())
    return jsonify({"success": True, "settings": _map_settings(settings)})


@settings_api_bp.get("/api-key")
@auth_required
def get_api_key():
    return jsonify({"success": True, **settings_service.get_api_key_view(current_user_id())})


@settings_api_bp.put("/api-key")
@auth_required
def update_api_key():
    data = ApiKeyUpdate.model_validate(request.get_json(silent=True) or {})
    settings_service.set_api_key(current_user_id(), data.api_key)
    return jsonify({"success": True, "message": "API密钥已更新"})


@settings_api_bp.delete("/api-key")
@auth_required
def delete_api_key():
    settings_service.delete_api_key(current_user_id())
    return jsonify({"success": True, "message": "API密钥已删除"})
