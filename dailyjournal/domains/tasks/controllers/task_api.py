"""Task and reminder JSON API."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from dailyjournal.core.errors import ValidationError
from dailyjournal.core.utils.decorators import auth_required, current_user_id
from dailyjournal.domains.tasks.mappers import map_task
from dailyjournal.domains.tasks.schemas.task_schemas import TaskCreate, TaskListFilter, TaskUpdate
from dailyjournal.domains.tasks.services import reminder_service, task_service

task_api_bp = Blueprint("task_api", __name__)
reminder_api_bp = Blueprint("reminder_api", __name__)


@task_api_bp.post("")
@auth_required
def create_task():
    data = TaskCreate.model_validate(request.get_json(silent=True) or {})
    task = task_service.create_task(current_user_id(), **data.model_dump())
    return jsonify({"success": True, "task": map_task(task)}), 201


@task_api_bp.get("")
@auth_required
def list_tasks():
    filters = TaskListFilter.model_validate(request.args.to_dict())
    tasks = task_service.list_tasks(current_user_id(), completed=filters.completed)
    return jsonify({"success": True, "count": len(tasks), "tasks": [map_task(t) for t in tasks]})


@task_api_bp.get("/<int:task_id>")
@auth_required
def get_task(task_id: int):
    task = task_service.get_task(current_user_id(), task_id)
    return jsonify({"success": True, "task": map_task(task)})


@task_api_bp.put("/<int:task_id>")
@auth_required
def update_task(task_id: int):
    data = TaskUpdate.model_validate(request.get_json(silent=True) or {})
    task = task_service.update_task(
        current_user_id(), task_id, **data.model_dump(exclude_unset=True)
    )
    return jsonify({"success": True, "task": map_task(task)})


@task_api_bp.delete("/<int:task_id>")
@auth_required
def delete_task(task_id: int):
    task_service.delete_task(current_user_id(), task_id)
    return jsonify({"success": True, "message": "待办事项已删除"})


@task_api_bp.put("/<int:task_id>/reminder")
@auth_required
def update_reminder_status(task_id: int):
    task = task_service.update_reminder_status(current_user_id(), task_id)
    return jsonify({"success": True, "task": map_task(task)})


@reminder_api_bp.get("/next")
@auth_required
def next_reminder():
    strategy = request.args.get("strategy", reminder_service.STRATEGY_FIRST)
    if strategy not in reminder_service.STRATEGIES:
        raise ValidationError("提醒策略无效")
    result = reminder_service.next_reminder(current_user_id(), strategy=strategy)
    task = result["task"]
    next_check = result["next_check_at"]
    return jsonify(
        {
            "success": True,
            "task": map_task(task) if task is not None else None,
            "next_check_at": next_check.isoformat() if next_check else None,
            "interval_minutes": result["interval_minutes"],
        }
    )
