"""Statistics JSON API."""

from __future__ import annotations

from flask import Blueprint, jsonify

from dailyjournal.core.utils.decorators import auth_required, current_user_id
from dailyjournal.domains.stats.services import stats_service

stats_api_bp = Blueprint("stats_api", __name__)


@stats_api_bp.get("")
@auth_required
def get_stats():
    return jsonify({"success": True, "stats": stats_service.overview(current_user_id())})


@stats_api_bp.get("/weekly-summary")
@auth_required
def weekly_summary():
    summary, is_new = stats_service.weekly_summary(current_user_id())
    return jsonify({"success": True, "summary": stats_service.map_summary(summary), "is_new": is_new})


@stats_api_bp.get("/export")
@auth_required
def export_data():
    return jsonify({"success": True, "data": stats_service.export(current_user_id())})
