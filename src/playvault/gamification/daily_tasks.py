"""Daily task lifecycle: one batch of tasks per user per UTC day."""

from __future__ import annotations

from datetime import datetime, timezone

import structlog
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from playvault.db.models import DailyTask
from playvault.errors import ValidationError
from playvault.gamification.xp_service import grant_xp

logger = structlog.get_logger()

# Ordered as the dashboard lists them.
DAILY_TASK_REWARDS: dict[str, int] = {
    "survey": 50,
    "game": 100,
    "referral_share": 25,
}


def today_key(now: datetime | None = None) -> str:
    """Day key for daily tasks, e.g. '2026-10-17'. Always UTC."""
    if now is None:
        now = datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).date().isoformat()


def _ordered(tasks: list[DailyTask]) -> list[DailyTask]:
    order = list(DAILY_TASK_REWARDS)
    return sorted(tasks, key=lambda t: order.index(t.task_type) if t.task_type in order else len(order))


async def get_daily_tasks(db: AsyncSession, user_id: str, day: str) -> list[DailyTask]:
    result = await db.execute(
        select(DailyTask)
        .where(DailyTask.user_id == user_id, DailyTask.date == day)
        .execution_options(populate_existing=True)
    )
    return _ordered(list(result.scalars().all()))


async def get_or_create_daily_tasks(db: AsyncSession, user_id: str, day: str | None = None) -> list[DailyTask]:
    """Return the day's tasks, creating the whole batch on the first request of the day.

    The batch is inserted under one savepoint: either all three rows exist
    afterwards or none were written by this call. A concurrent first request
    loses on the unique (user, date, task_type) key and re-reads the winner's rows.
    """
    day = day or today_key()
    tasks = await get_daily_tasks(db, user_id, day)
    if tasks:
        return tasks

    try:
        async with db.begin_nested():
            db.add_all([
                DailyTask(user_id=user_id, task_type=task_type, date=day, xp_reward=reward)
                for task_type, reward in DAILY_TASK_REWARDS.items()
            ])
            await db.flush()
    except IntegrityError:
        logger.info("daily_tasks_already_created", user_id=user_id, date=day)
    else:
        logger.info("daily_tasks_created", user_id=user_id, date=day)

    return await get_daily_tasks(db, user_id, day)


async def complete_daily_task(
    db: AsyncSession,
    user_id: str,
    task_type: str,
    day: str | None = None,
) -> DailyTask | None:
    """Mark a pending task completed and grant its XP.

    Returns None when there is nothing to complete: the task is already done,
    or today's tasks were never created.
    """
    if task_type not in DAILY_TASK_REWARDS:
        raise ValidationError(f"Invalid task type: {task_type!r}")
    day = day or today_key()

    result = await db.execute(
        update(DailyTask)
        .where(
            DailyTask.user_id == user_id,
            DailyTask.task_type == task_type,
            DailyTask.date == day,
            DailyTask.completed.is_(False),
        )
        .values(completed=True)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        return None

    task_result = await db.execute(
        select(DailyTask)
        .where(
            DailyTask.user_id == user_id,
            DailyTask.task_type == task_type,
            DailyTask.date == day,
        )
        .execution_options(populate_existing=True)
    )
    task = task_result.scalar_one()

    await grant_xp(
        db,
        user_id,
        task.xp_reward,
        "daily_task",
        f"Completed daily task: {task_type}",
        {"taskType": task_type},
    )
    logger.info("daily_task_completed", user_id=user_id, task_type=task_type, date=day, xp=task.xp_reward)
    return task
