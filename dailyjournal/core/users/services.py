"""User service layer."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import func

from dailyjournal.core.users.models import User
from dailyjournal.extensions import db


def get_user(user_id: int) -> Optional[User]:
    return db.session.get(User, user_id)


def find_by_email(email: str) -> Optional[User]:
    normalized = (email or "").strip().lower()
    return User.query.filter(func.lower(User.email) == normalized).first()


def find_by_username(username: str) -> Optional[User]:
    return User.query.filter_by(username=(username or "").strip()).first()
