"""
Filmatch — Swipe and Match models.

A swipe row is keyed by the ordered pair (from, to); a match row is keyed by
the sorted pair, so both users' detection attempts target the same row.
"""

from datetime import datetime

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Swipe(Base):
    __tablename__ = "swipes"

    from_user_id: Mapped[str] = mapped_column(String, primary_key=True)
    to_user_id: Mapped[str] = mapped_column(String, primary_key=True)
    action: Mapped[str] = mapped_column(
        String, nullable=False, comment="like / pass"
    )
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        return f"<Swipe {self.from_user_id} -> {self.to_user_id} action={self.action!r}>"


class Match(Base):
    __tablename__ = "matches"

    id: Mapped[str] = mapped_column(
        String, primary_key=True, comment="match_<lower id>_<higher id>"
    )
    user1_id: Mapped[str] = mapped_column(String, index=True, nullable=False)
    user2_id: Mapped[str] = mapped_column(String, index=True, nullable=False)
    chat_id: Mapped[str] = mapped_column(String, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        return f"<Match {self.user1_id} <-> {self.user2_id}>"
