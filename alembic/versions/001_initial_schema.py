"""Initial schema — user_profiles, user_blocks, swipes, matches.

Revision ID: 001_initial
Revises:
Create Date: 2026-10-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ── 1. user_profiles ────────────────────────────────────────────
    op.create_table(
        "user_profiles",
        sa.Column("uid", sa.String, primary_key=True),
        sa.Column("display_name", sa.String, nullable=True),
        sa.Column(
            "gender",
            sa.String,
            nullable=True,
            comment="female / male / nonbinary / other",
        ),
        sa.Column(
            "gender_preferences",
            postgresql.JSONB,
            nullable=True,
            comment="Genders the user wants shown",
        ),
        sa.Column(
            "relationship_intent",
            postgresql.JSONB,
            nullable=True,
            comment="Subset of friends / romance",
        ),
        sa.Column("city", sa.String, nullable=True),
        sa.Column(
            "genre_ratings",
            postgresql.JSONB,
            nullable=True,
            comment="Genre name -> rating 0-5",
        ),
        sa.Column(
            "favorites",
            postgresql.JSONB,
            nullable=True,
            comment="Up to 4 favorite movies",
        ),
        sa.Column(
            "recent_watches",
            postgresql.JSONB,
            nullable=True,
            comment="Up to 10 rated recent watches",
        ),
        sa.Column("has_profile", sa.Boolean, server_default="false", nullable=False),
        sa.Column("has_preferences", sa.Boolean, server_default="false", nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_user_profiles_city", "user_profiles", ["city"])
    op.create_index(
        "ix_user_profiles_discovery",
        "user_profiles",
        ["has_profile", "has_preferences", "gender"],
    )

    # ── 2. user_blocks ──────────────────────────────────────────────
    op.create_table(
        "user_blocks",
        sa.Column("blocker_id", sa.String, primary_key=True),
        sa.Column("blocked_id", sa.String, primary_key=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_user_blocks_blocked_id", "user_blocks", ["blocked_id"])

    # ── 3. swipes (one row per ordered pair) ────────────────────────
    op.create_table(
        "swipes",
        sa.Column("from_user_id", sa.String, primary_key=True),
        sa.Column("to_user_id", sa.String, primary_key=True),
        sa.Column("action", sa.String, nullable=False, comment="like / pass"),
        sa.Column(
            "timestamp",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )

    # ── 4. matches (one row per sorted pair) ────────────────────────
    op.create_table(
        "matches",
        sa.Column(
            "id",
            sa.String,
            primary_key=True,
            comment="match_<lower id>_<higher id>",
        ),
        sa.Column("user1_id", sa.String, nullable=False),
        sa.Column("user2_id", sa.String, nullable=False),
        sa.Column("chat_id", sa.String, nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_matches_user1_id", "matches", ["user1_id"])
    op.create_index("ix_matches_user2_id", "matches", ["user2_id"])


def downgrade() -> None:
    op.drop_table("matches")
    op.drop_table("swipes")
    op.drop_table("user_blocks")
    op.drop_table("user_profiles")
