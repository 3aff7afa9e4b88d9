"""Request and response models for XP, streak, daily task and milestone endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from playvault.schemas import CamelModel
from playvault.users.schemas import UserResponse


# --- XP ---


class XPAddRequest(CamelModel):
    # Range checks happen in the service so a bad amount is a 400, not a schema error.
    xp_gained: int
    type: str
    description: str = ""
    metadata: dict[str, Any] | None = None


class XPAddResponse(CamelModel):
    user: UserResponse
    xp_gained: int


class ActivityResponse(CamelModel):
    id: str
    user_id: str
    type: str
    description: str
    xp_gained: int
    metadata: dict[str, Any] = {}
    created_at: datetime | None = None


# --- Streak ---


class StreakUpdateResponse(CamelModel):
    user: UserResponse
    incremented: bool


# --- Daily tasks ---


class DailyTaskResponse(CamelModel):
    id: str
    user_id: str
    task_type: str
    completed: bool
    date: str
    xp_reward: int
    created_at: datetime | None = None


class CompleteTaskRequest(CamelModel):
    task_type: str


class CompleteTaskResponse(CamelModel):
    task: DailyTaskResponse | None = None
    message: str


# --- Milestones ---


class MilestoneResponse(CamelModel):
    id: str
    user_id: str
    type: str
    current: int
    target: int
    xp_reward: int
    completed: bool
    completed_at: datetime | None = None
    created_at: datetime | None = None
