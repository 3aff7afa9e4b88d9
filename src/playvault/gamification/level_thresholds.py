"""Level thresholds and computation.

A user at level ``n`` reaches level ``n + 1`` once their XP is at least
``n * LEVEL_XP_STEP``. A single grant advances at most one level, even when
it crosses several thresholds: a user at level 1 granted 5000 XP ends at
level 2, not 3. The next grant re-checks against the new level.

Levels never go down; spending XP on rewards leaves the level untouched.
"""

from __future__ import annotations

from sqlalchemy import ColumnElement, case

from playvault.db.models import User

LEVEL_XP_STEP = 2000


def level_threshold(level: int) -> int:
    """XP needed to leave ``level``."""
    return level * LEVEL_XP_STEP


def level_after_grant(level: int, new_xp: int) -> int:
    """Level after a grant brought the balance to ``new_xp``.

    Reference form of the rule. Grants apply it in SQL through
    :func:`level_after_grant_expr`; the two are checked against each other in tests.
    """
    if new_xp >= level_threshold(level):
        return level + 1
    return level


def level_after_grant_expr(amount: int) -> ColumnElement[int]:
    """SQL form of :func:`level_after_grant`, evaluated against the row being updated."""
    return case(
        (User.xp + amount >= User.level * LEVEL_XP_STEP, User.level + 1),
        else_=User.level,
    )


def level_progress(xp: int, level: int) -> dict:
    """XP still needed before the next level-up check passes."""
    threshold = level_threshold(level)
    return {
        "level": level,
        "next_level_xp": threshold,
        "xp_to_next_level": max(threshold - xp, 0),
    }
