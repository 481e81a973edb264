"""Settings API and encrypted API key tests."""

from __future__ import annotations

import pytest

pytestmark = pytest.mark.integration

from dailyjournal.core.errors import NotFoundError, ValidationError
from dailyjournal.core.utils.encryption import decrypt, encrypt, mask_secret
from dailyjournal.domains.settings.models import UserSettings
from dailyjournal.domains.settings.services import settings_service

KEY = "sk-abcdefghijklmnop"


# ==================== Preferences ====================


def test_defaults_created_on_first_read(client, user, auth_headers):
    resp = client.get("/api/settings", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.get_json()["settings"] == {
        "reminder_interval": 20,
        "theme": "system",
        "email_notifications": False,
        "has_api_key": False,
    }
    assert UserSettings.query.filter_by(user_id=user.id).count() == 1


def test_update_settings(client, auth_headers):
    resp = client.put(
        "/api/settings",
        json={"reminder_interval": 45, "theme": "dark", "email_notifications": True},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    settings = resp.get_json()["settings"]
    assert settings["reminder_interval"] == 45
    assert settings["theme"] == "dark"
    assert settings["email_notifications"] is True


def test_partial_update_keeps_other_fields(client, auth_headers):
    client.put("/api/settings", json={"theme": "light"}, headers=auth_headers)
    resp = client.put("/api/settings", json={"reminder_interval": 5}, headers=auth_headers)
    settings = resp.get_json()["settings"]
    assert settings["theme"] == "light"
    assert settings["reminder_interval"] == 5


@pytest.mark.parametrize(
    "payload",
    [{"reminder_interval": 4}, {"reminder_interval": 121}, {"theme": "neon"}],
)
def test_update_settings_validation(client, auth_headers, payload):
    resp = client.put("/api/settings", json=payload, headers=auth_headers)
    assert resp.status_code == 400


def test_service_rejects_out_of_range_interval(user):
    with pytest.raises(ValidationError):
        settings_service.update_settings(user.id, reminder_interval=500)


# ==================== API key ====================


def test_api_key_is_encrypted_at_rest(user):
    settings_service.set_api_key(user.id, KEY)
    stored = UserSettings.query.filter_by(user_id=user.id).one()
    assert stored.deepseek_api_key_encrypted
    assert KEY not in stored.deepseek_api_key_encrypted
    assert settings_service.get_api_key(user.id) == KEY


def test_api_key_view_is_masked(client, auth_headers):
    resp = client.put("/api/settings/api-key", json={"api_key": KEY}, headers=auth_headers)
    assert resp.get_json() == {"success": True, "message": "API密钥已更新"}

    body = client.get("/api/settings/api-key", headers=auth_headers).get_json()
    assert body["has_api_key"] is True
    assert body["api_key"] == {"masked": "sk-a...mnop"}
    assert KEY not in str(body)

    settings = client.get("/api/settings", headers=auth_headers).get_json()["settings"]
    assert settings["has_api_key"] is True


def test_api_key_view_without_key(client, auth_headers):
    body = client.get("/api/settings/api-key", headers=auth_headers).get_json()
    assert body == {"success": True, "has_api_key": False, "api_key": None}


@pytest.mark.parametrize("payload", [{}, {"api_key": ""}, {"api_key": "   "}])
def test_empty_api_key_rejected(client, auth_headers, payload):
    resp = client.put("/api/settings/api-key", json=payload, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "API密钥不能为空"


def test_delete_api_key(client, user, auth_headers):
    settings_service.set_api_key(user.id, KEY)
    resp = client.delete("/api/settings/api-key", headers=auth_headers)
    assert resp.get_json() == {"success": True, "message": "API密钥已删除"}
    assert settings_service.get_api_key(user.id) is None


def test_delete_api_key_without_settings(user):
    with pytest.raises(NotFoundError):
        settings_service.delete_api_key(user.id)


def test_api_keys_are_per_user(user, other_user):
    settings_service.set_api_key(user.id, KEY)
    assert settings_service.get_api_key(other_user.id) is None


def test_undecryptable_key_reads_as_missing(app, user):
    app.config["API_KEY_ENCRYPTION_KEY"] = ""
    settings_service.set_api_key(user.id, KEY)
    app.config["SECRET_KEY"] = "rotated-secret"
    assert settings_service.get_api_key(user.id) is None


def test_undecryptable_key_is_reported_missing_everywhere(app, client, user, auth_headers):
    app.config["API_KEY_ENCRYPTION_KEY"] = ""
    settings_service.set_api_key(user.id, KEY)
    app.config["SECRET_KEY"] = "rotated-secret"

    settings = client.get("/api/settings", headers=auth_headers).get_json()["settings"]
    view = client.get("/api/settings/api-key", headers=auth_headers).get_json()
    assert settings["has_api_key"] is False
    assert view["has_api_key"] is False
    assert view["api_key"] is None


# ==================== Encryption helpers ====================


@pytest.mark.unit
def test_encrypt_round_trip(app):
    token = encrypt("secret-value")
    assert token != "secret-value"
    assert decrypt(token) == "secret-value"


@pytest.mark.unit
@pytest.mark.parametrize(
    "secret,expected",
    [("sk-1234567890abcd", "sk-1...abcd"), ("short", "*****"), ("12345678", "********")],
)
def test_mask_secret(secret, expected):
    assert mask_secret(secret) == expected
