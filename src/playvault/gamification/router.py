"""XP, streak, activity, leaderboard, daily task and milestone endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from playvault.auth.dependencies import get_current_user
from playvault.auth.router import user_response
from playvault.config import get_settings
from playvault.database import get_session
from playvault.db.models import Activity, DailyTask, Milestone, User
from playvault.gamification.daily_tasks import complete_daily_task, get_or_create_daily_tasks
from playvault.gamification.milestone_service import get_user_milestones
from playvault.gamification.schemas import (
    ActivityResponse,
    CompleteTaskRequest,
    CompleteTaskResponse,
    DailyTaskResponse,
    MilestoneResponse,
    StreakUpdateResponse,
    XPAddRequest,
    XPAddResponse,
)
from playvault.gamification.streak_service import update_streak
from playvault.gamification.xp_service import get_user_activities, grant_xp
from playvault.users.schemas import PublicUserResponse
from playvault.users.service import get_users_by_xp

router = APIRouter(prefix="/api", tags=["Gamification"])

settings = get_settings()


def _activity_response(a: Activity) -> ActivityResponse:
    return ActivityResponse(
        id=a.id,
        user_id=a.user_id,
        type=a.type,
        description=a.description,
        xp_gained=a.xp_gained,
        metadata=a.activity_metadata or {},
        created_at=a.created_at,
    )


def _task_response(t: DailyTask) -> DailyTaskResponse:
    return DailyTaskResponse(
        id=t.id,
        user_id=t.user_id,
        task_type=t.task_type,
        completed=t.completed,
        date=t.date,
        xp_reward=t.xp_reward,
        created_at=t.created_at,
    )


def _milestone_response(m: Milestone) -> MilestoneResponse:
    return MilestoneResponse(
        id=m.id,
        user_id=m.user_id,
        type=m.type,
        current=m.current,
        target=m.target,
        xp_reward=m.xp_reward,
        completed=m.completed,
        completed_at=m.completed_at,
        created_at=m.created_at,
    )


# ── XP & streak ──


@router.post("/xp/add", response_model=XPAddResponse)
async def add_xp(
    body: XPAddRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> XPAddResponse:
    """Grant XP to the current user and record the activity."""
    updated = await grant_xp(db, user.id, body.xp_gained, body.type, body.description, body.metadata)
    await db.commit()
    return XPAddResponse(user=user_response(updated), xp_gained=body.xp_gained)


@router.post("/streak/update", response_model=StreakUpdateResponse)
async def post_streak_update(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> StreakUpdateResponse:
    """Apply the login streak rule for the current user."""
    updated, incremented = await update_streak(db, user.id)
    await db.commit()
    return StreakUpdateResponse(user=user_response(updated), incremented=incremented)


@router.get("/activities", response_model=list[ActivityResponse])
async def list_activities(
    limit: int = Query(settings.activity_default_limit, ge=1, le=settings.max_page_size),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> list[ActivityResponse]:
    """Recent activity for the current user, newest first."""
    activities = await get_user_activities(db, user.id, limit)
    return [_activity_response(a) for a in activities]


@router.get("/leaderboard", response_model=list[PublicUserResponse])
async def get_leaderboard(
    limit: int = Query(settings.leaderboard_default_limit, ge=1, le=settings.max_page_size),
    db: AsyncSession = Depends(get_session),
) -> list[PublicUserResponse]:
    """Top users by XP. Public: only display fields are returned."""
    users = await get_users_by_xp(db, limit)
    return [
        PublicUserResponse(
            id=u.id,
            first_name=u.first_name,
            last_name=u.last_name,
            xp=u.xp,
            level=u.level,
            profile_image_url=u.profile_image_url,
        )
        for u in users
    ]


# ── Daily tasks ──


@router.get("/daily-tasks", response_model=list[DailyTaskResponse])
async def list_daily_tasks(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> list[DailyTaskResponse]:
    """Today's tasks, created on the first request of the UTC day."""
    tasks = await get_or_create_daily_tasks(db, user.id)
    await db.commit()
    return [_task_response(t) for t in tasks]


@router.post("/daily-tasks/complete", response_model=CompleteTaskResponse)
async def post_complete_daily_task(
    body: CompleteTaskRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> CompleteTaskResponse:
    """Complete one of today's tasks. Completing a finished task is a no-op."""
    task = await complete_daily_task(db, user.id, body.task_type)
    if task is None:
        return CompleteTaskResponse(task=None, message="Task already completed or not found")

    await db.commit()
    return CompleteTaskResponse(task=_task_response(task), message="Task completed")


# ── Milestones ──


@router.get("/milestones", response_model=list[MilestoneResponse])
async def list_milestones(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> list[MilestoneResponse]:
    """Milestone progress for the current user."""
    milestones = await get_user_milestones(db, user.id)
    return [_milestone_response(m) for m in milestones]
