"""Typed schemas for user IO."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from dailyjournal.core.users.models import User


class UserResponse(BaseModel):
    id: int
    username: str
    email: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


def serialize_user(user: "User") -> dict:
    return UserResponse.model_validate(user).model_dump(mode="json")
