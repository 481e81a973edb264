"""Journal JSON API."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from dailyjournal.core.utils.decorators import auth_required, current_user_id
from dailyjournal.domains.journal.mappers import map_entry
from dailyjournal.domains.journal.schemas.journal_schemas import (
    JournalAnalysisUpdate,
    JournalContentRequest,
    WeeklyReportResponse,
)
from dailyjournal.domains.journal.services import journal_service

journal_api_bp = Blueprint("journal_api", __name__)


@journal_api_bp.post("")
@auth_required
def create_journal_entry():
    data = JournalContentRequest.model_validate(request.get_json(silent=True) or {})
    entry, created = journal_service.create_or_update_today(current_user_id(), data.content)
    return jsonify({"success": True, "journal": map_entry(entry)}), (201 if created else 200)


@journal_api_bp.get("")
@auth_required
def list_journal():
    entries = journal_service.list_entries(current_user_id())
    return jsonify(
        {"success": True, "count": len(entries), "journals": [map_entry(e) for e in entries]}
    )


@journal_api_bp.get("/today")
@auth_required
def get_today():
    entry = journal_service.get_today(current_user_id())
    return jsonify({"success": True, "journal": map_entry(entry)})


@journal_api_bp.get("/weekly-report")
@auth_required
def weekly_report():
    report = WeeklyReportResponse(**journal_service.weekly_report(current_user_id()))
    return jsonify({"success": True, "report": report.model_dump()})


@journal_api_bp.get("/<int:entry_id>")
@auth_required
def get_entry(entry_id: int):
    entry = journal_service.get_entry(current_user_id(), entry_id)
    return jsonify({"success": True, "journal": map_entry(entry)})


@journal_api_bp.put("/<int:entry_id>")
@auth_required
def update_journal_entry(entry_id: int):
    data = JournalContentRequest.model_validate(request.get_json(silent=True) or {})
    entry = journal_service.update_entry(current_user_id(), entry_id, data.content)
    return jsonify({"success": True, "journal": map_entry(entry)})


@journal_api_bp.delete("/<int:entry_id>")
@auth_required
def delete_journal_entry(entry_id: int):
    journal_service.delete_entry(current_user_id(), entry_id)
    return jsonify({"success": True, "message": "日记已删除"})


@journal_api_bp.put("/<int:entry_id>/analysis")
@auth_required
def update_analysis(entry_id: int):
    data = JournalAnalysisUpdate.model_validate(request.get_json(silent=True) or {})
    entry = journal_service.update_analysis(current_user_id(), entry_id, **data.model_dump())
    return jsonify({"success": True, "journal": map_entry(entry)})
