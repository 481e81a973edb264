"""Journal API tests.

- POST /api/journals - create or overwrite today's entry
- GET /api/journals - list
- GET /api/journals/today
- GET/PUT/DELETE /api/journals/<id>
- PUT /api/journals/<id>/analysis
- GET /api/journals/weekly-report
"""

from __future__ import annotations

import pytest

pytestmark = pytest.mark.integration

from dailyjournal.domains.journal.models import JournalEntry
from dailyjournal.domains.tasks.models import Task
from dailyjournal.domains.tasks.services import task_service


def _create(client, headers, content="今天很开心"):
    return client.post("/api/journals", json={"content": content}, headers=headers)


# ==================== Auth ====================


@pytest.mark.parametrize(
    "method,path",
    [
        ("get", "/api/journals"),
        ("post", "/api/journals"),
        ("get", "/api/journals/today"),
        ("get", "/api/journals/1"),
        ("get", "/api/journals/weekly-report"),
    ],
)
def test_endpoints_require_auth(client, method, path):
    resp = getattr(client, method)(path)
    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


# ==================== Create ====================


def test_create_then_overwrite_today(client, user, auth_headers):
    resp = _create(client, auth_headers, "first")
    assert resp.status_code == 201
    first = resp.get_json()["journal"]
    assert first["content"] == "first"
    assert first["is_analyzed"] is False

    resp = _create(client, auth_headers, "second")
    assert resp.status_code == 200
    second = resp.get_json()["journal"]
    assert second["id"] == first["id"]
    assert second["content"] == "second"
    assert JournalEntry.query.filter_by(user_id=user.id).count() == 1


@pytest.mark.parametrize("payload", [{}, {"content": ""}, {"content": "   "}])
def test_create_rejects_empty_content(client, auth_headers, payload):
    resp = client.post("/api/journals", json=payload, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_blank_content_error_message(client, auth_headers):
    resp = _create(client, auth_headers, "   ")
    assert resp.get_json()["error"] == "日记内容不能为空"


# ==================== Read ====================


def test_today_not_found(client, auth_headers):
    resp = client.get("/api/journals/today", headers=auth_headers)
    assert resp.status_code == 404
    assert resp.get_json() == {"success": False, "error": "今日尚未创建日记"}


def test_today_found(client, auth_headers):
    created = _create(client, auth_headers).get_json()["journal"]
    resp = client.get("/api/journals/today", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.get_json()["journal"]["id"] == created["id"]


def test_list_only_own_entries(client, auth_headers, other_auth_headers):
    _create(client, auth_headers, "mine")
    _create(client, other_auth_headers, "theirs")

    body = client.get("/api/journals", headers=auth_headers).get_json()
    assert body["count"] == 1
    assert [j["content"] for j in body["journals"]] == ["mine"]


def test_get_foreign_entry_is_forbidden(client, auth_headers, other_auth_headers):
    theirs = _create(client, other_auth_headers, "theirs").get_json()["journal"]
    resp = client.get(f"/api/journals/{theirs['id']}", headers=auth_headers)
    assert resp.status_code == 403
    assert resp.get_json()["error"] == "未授权访问"


def test_get_missing_entry(client, auth_headers):
    resp = client.get("/api/journals/999", headers=auth_headers)
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "未找到日记"


# ==================== Update ====================


def test_update_entry(client, auth_headers):
    created = _create(client, auth_headers).get_json()["journal"]
    resp = client.put(
        f"/api/journals/{created['id']}", json={"content": "修改后"}, headers=auth_headers
    )
    assert resp.status_code == 200
    assert resp.get_json()["journal"]["content"] == "修改后"


def test_update_foreign_entry_is_forbidden(client, auth_headers, other_auth_headers):
    theirs = _create(client, other_auth_headers, "theirs").get_json()["journal"]
    resp = client.put(
        f"/api/journals/{theirs['id']}", json={"content": "hijack"}, headers=auth_headers
    )
    assert resp.status_code == 403


def test_update_analysis(client, auth_headers):
    created = _create(client, auth_headers).get_json()["journal"]
    resp = client.put(
        f"/api/journals/{created['id']}/analysis",
        json={"theme": "生活", "sentiment": "positive", "depth": "deep", "emotion_label": "愉快"},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    journal = resp.get_json()["journal"]
    assert journal["theme"] == "生活"
    assert journal["sentiment"] == "positive"
    assert journal["depth"] == "deep"
    assert journal["is_analyzed"] is True
    assert journal["analyzed_at"]


def test_update_analysis_rejects_unknown_sentiment(client, auth_headers):
    created = _create(client, auth_headers).get_json()["journal"]
    resp = client.put(
        f"/api/journals/{created['id']}/analysis",
        json={"sentiment": "ecstatic"},
        headers=auth_headers,
    )
    assert resp.status_code == 400


def test_update_analysis_with_empty_body_is_rejected(client, auth_headers):
    created = _create(client, auth_headers).get_json()["journal"]
    resp = client.put(f"/api/journals/{created['id']}/analysis", json={}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False

    journal = client.get(f"/api/journals/{created['id']}", headers=auth_headers).get_json()["journal"]
    assert journal["is_analyzed"] is False


# ==================== Delete ====================


def test_delete_entry_and_its_tasks(client, user, auth_headers):
    created = _create(client, auth_headers).get_json()["journal"]
    task_service.create_task(user.id, content="linked", journal_id=created["id"])

    resp = client.delete(f"/api/journals/{created['id']}", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.get_json() == {"success": True, "message": "日记已删除"}
    assert JournalEntry.query.count() == 0
    assert Task.query.count() == 0


def test_delete_foreign_entry_is_forbidden(client, auth_headers, other_auth_headers):
    theirs = _create(client, other_auth_headers, "theirs").get_json()["journal"]
    resp = client.delete(f"/api/journals/{theirs['id']}", headers=auth_headers)
    assert resp.status_code == 403
    assert JournalEntry.query.count() == 1


# ==================== Weekly report ====================


def test_weekly_report(client, user, auth_headers):
    created = _create(client, auth_headers).get_json()["journal"]
    client.put(
        f"/api/journals/{created['id']}/analysis",
        json={"theme": "工作", "sentiment": "neutral"},
        headers=auth_headers,
    )
    task = task_service.create_task(user.id, content="done")
    task_service.complete_task(user.id, task.id)

    resp = client.get("/api/journals/weekly-report", headers=auth_headers)
    assert resp.status_code == 200
    report = resp.get_json()["report"]
    assert report["journal_count"] == 1
    assert report["completed_task_count"] == 1
    assert report["themes"] == ["工作"]
    assert report["sentiments"] == {"neutral": 1}
