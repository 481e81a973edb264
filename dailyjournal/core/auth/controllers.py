"""Auth HTTP controllers (API only)."""

from __future__ import annotations

from flask import Blueprint, g, jsonify, request
from flask_jwt_extended import get_jwt, set_access_cookies, unset_jwt_cookies

from dailyjournal.core.auth.auth_service import login_user, register_user, revoke_token
from dailyjournal.core.auth.schemas import LoginRequest, RegisterRequest
from dailyjournal.core.users.schemas import serialize_user
from dailyjournal.core.utils.decorators import auth_required
from dailyjournal.extensions import limiter

auth_bp = Blueprint("auth_api", __name__)


def _session_response(result: dict, status: int = 200):
    resp = jsonify(
        {
            "success": True,
            "user": serialize_user(result["user"]),
            "access_token": result["access_token"],
        }
    )
    set_access_cookies(resp, result["access_token"])
    return resp, status


@auth_bp.post("/register")
@limiter.limit("5/minute")
def register():
    data = RegisterRequest.model_validate(request.get_json(silent=True) or {})
    return _session_response(register_user(data), 201)


@auth_bp.post("/login")
@limiter.limit("10/minute")
def login():
    data = LoginRequest.model_validate(request.get_json(silent=True) or {})
    return _session_response(login_user(data))


@auth_bp.post("/logout")
@auth_required
def logout():
    claims = get_jwt()
    revoke_token(claims.get("jti"), user_id=g.current_user.id, expires=claims.get("exp"))
    resp = jsonify({"success": True, "message": "已退出登录"})
    unset_jwt_cookies(resp)
    return resp


@auth_bp.get("/me")
@auth_required
def me():
    return jsonify({"success": True, "user": serialize_user(g.current_user)})
