"""AI JSON API: analysis, task extraction, weekly report."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from dailyjournal.core.utils.decorators import auth_required, current_user_id
from dailyjournal.domains.ai.schemas.ai_schemas import (
    AnalysisResult,
    AnalyzeRequest,
    ExtractTasksRequest,
    WeeklyReportRequest,
    WeeklyReportResult,
)
from dailyjournal.domains.ai.services import ai_service
from dailyjournal.domains.journal.mappers import map_entry
from dailyjournal.domains.settings.services import settings_service
from dailyjournal.domains.tasks.mappers import map_task

deepseek_api_bp = Blueprint("deepseek_api", __name__)


@deepseek_api_bp.post("/analyze")
@auth_required
def analyze():
    data = AnalyzeRequest.model_validate(request.get_json(silent=True) or {})
    user_id = current_user_id()
    if data.journal_id is not None:
        entry = ai_service.analyze_journal(user_id, data.journal_id)
        return jsonify({"success": True, "message": "日记分析成功", "journal": map_entry(entry)})
    result = ai_service.analyze_content(data.content, settings_service.get_api_key(user_id))
    return jsonify({"success": True, "result": AnalysisResult(**result).model_dump()})


@deepseek_api_bp.post("/extract-tasks")
@auth_required
def extract_tasks():
    data = ExtractTasksRequest.model_validate(request.get_json(silent=True) or {})
    tasks = ai_service.extract_tasks_for_journal(current_user_id(), data.journal_id)
    message = f"成功识别并保存了 {len(tasks)} 个任务" if tasks else "未识别到任务"
    return jsonify({"success": True, "message": message, "tasks": [map_task(t) for t in tasks]})


@deepseek_api_bp.post("/weekly-report")
@auth_required
def weekly_report():
    data = WeeklyReportRequest.model_validate(request.get_json(silent=True) or {})
    user_id = current_user_id()
    if data.journals is None and data.completed_tasks is None:
        report = ai_service.generate_weekly_report_for_user(user_id)
    else:
        report = ai_service.generate_weekly_report(
            data.journals or [], data.completed_tasks or [], settings_service.get_api_key(user_id)
        )
    return jsonify({"success": True, "report": WeeklyReportResult(**report).model_dump()})
