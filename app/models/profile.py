"""
Filmatch — UserProfile model (demographics, preferences and taste data).
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, String, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class UserProfile(Base):
    __tablename__ = "user_profiles"
    __table_args__ = (
        Index("ix_user_profiles_discovery", "has_profile", "has_preferences", "gender"),
    )

    uid: Mapped[str] = mapped_column(String, primary_key=True)
    display_name: Mapped[str | None] = mapped_column(String, nullable=True)
    gender: Mapped[str | None] = mapped_column(
        String, nullable=True, comment="female / male / nonbinary / other"
    )
    gender_preferences: Mapped[list | None] = mapped_column(
        JSONB, nullable=True, comment="Genders the user wants shown"
    )
    relationship_intent: Mapped[list | None] = mapped_column(
        JSONB, nullable=True, comment="Subset of friends / romance"
    )
    city: Mapped[str | None] = mapped_column(String, index=True, nullable=True)
    genre_ratings: Mapped[dict | None] = mapped_column(
        JSONB, nullable=True, comment="Genre name -> rating 0-5"
    )
    favorites: Mapped[list | None] = mapped_column(
        JSONB, nullable=True, comment="Up to 4 favorite movies"
    )
    recent_watches: Mapped[list | None] = mapped_column(
        JSONB, nullable=True, comment="Up to 10 rated recent watches"
    )
    has_profile: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false", nullable=False
    )
    has_preferences: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false", nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), onupdate=func.now(), nullable=True
    )

    def __repr__(self) -> str:
        return f"<UserProfile {self.uid!r} gender={self.gender!r} city={self.city!r}>"


class UserBlock(Base):
    __tablename__ = "user_blocks"

    blocker_id: Mapped[str] = mapped_column(String, primary_key=True)
    blocked_id: Mapped[str] = mapped_column(String, primary_key=True, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        return f"<UserBlock {self.blocker_id} -| {self.blocked_id}>"
