"""Initial schema: users, activities, rewards, redemptions, game offers,
daily tasks and milestones.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-17
"""

from collections.abc import Sequence

from alembic import op

revision: str = "001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # --- Users ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id VARCHAR(64) PRIMARY KEY,
            email VARCHAR(320) UNIQUE,
            first_name VARCHAR(128),
            last_name VARCHAR(128),
            profile_image_url TEXT,
            xp INTEGER NOT NULL DEFAULT 0,
            level INTEGER NOT NULL DEFAULT 1,
            streak INTEGER NOT NULL DEFAULT 0,
            last_login TIMESTAMPTZ,
            referral_code VARCHAR(32) UNIQUE,
            referred_by VARCHAR(64),
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS ix_users_referred_by ON users(referred_by)")
    # Leaderboard scan
    op.execute("CREATE INDEX IF NOT EXISTS idx_users_xp ON users(xp DESC)")

    # --- Activities ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS activities (
            id VARCHAR(36) PRIMARY KEY,
            user_id VARCHAR(64) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            type VARCHAR(32) NOT NULL,
            description TEXT NOT NULL,
            xp_gained INTEGER NOT NULL,
            metadata JSONB NOT NULL DEFAULT '{}',
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS idx_activities_user_created ON activities(user_id, created_at)")

    # --- Rewards ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS rewards (
            id VARCHAR(36) PRIMARY KEY,
            name VARCHAR(128) NOT NULL,
            description TEXT,
            xp_cost INTEGER NOT NULL,
            type VARCHAR(32) NOT NULL,
            image_url TEXT,
            is_active BOOLEAN NOT NULL DEFAULT true,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)

    # --- Redemptions ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS redemptions (
            id VARCHAR(36) PRIMARY KEY,
            user_id VARCHAR(64) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            reward_id VARCHAR(36) NOT NULL REFERENCES rewards(id),
            status VARCHAR(16) NOT NULL DEFAULT 'processing',
            xp_spent INTEGER NOT NULL,
            delivery_info JSONB NOT NULL DEFAULT '{}',
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS idx_redemptions_user_created ON redemptions(user_id, created_at)")

    # --- Game offers ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS game_offers (
            id VARCHAR(36) PRIMARY KEY,
            name VARCHAR(128) NOT NULL,
            description TEXT,
            xp_reward INTEGER NOT NULL,
            image_url TEXT,
            affiliate_url TEXT NOT NULL,
            is_active BOOLEAN NOT NULL DEFAULT true,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)

    # --- Daily tasks ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS daily_tasks (
            id VARCHAR(36) PRIMARY KEY,
            user_id VARCHAR(64) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            task_type VARCHAR(32) NOT NULL,
            completed BOOLEAN NOT NULL DEFAULT false,
            date VARCHAR(10) NOT NULL,
            xp_reward INTEGER NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT daily_tasks_user_date_type_key UNIQUE (user_id, date, task_type)
        )
    """)

    # --- Milestones ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS milestones (
            id VARCHAR(36) PRIMARY KEY,
            user_id VARCHAR(64) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            type VARCHAR(32) NOT NULL,
            current INTEGER NOT NULL DEFAULT 0,
            target INTEGER NOT NULL,
            xp_reward INTEGER NOT NULL,
            completed BOOLEAN NOT NULL DEFAULT false,
            completed_at TIMESTAMPTZ,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT milestones_user_type_key UNIQUE (user_id, type)
        )
    """)


def downgrade() -> None:
    for table in (
        "milestones",
        "daily_tasks",
        "game_offers",
        "redemptions",
        "rewards",
        "activities",
        "users",
    ):
        op.execute(f"DROP TABLE IF EXISTS {table} CASCADE")
