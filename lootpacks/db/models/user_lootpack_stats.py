from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, DateTime, Integer, Numeric, String, text
from sqlalchemy.orm import Mapped, mapped_column

from lootpacks.db.models.base import Base

DEFAULT_DEAL_COINS = 500
DEFAULT_DAILY_STREAK = 1
DEFAULT_LEVEL = 1
DEFAULT_MEMBER_STATUS = "Bronze"


class UserLootpackStats(Base):
    __tablename__ = "user_lootpack_stats"
    __table_args__ = (
        CheckConstraint("daily_streak >= 0", name="ck_user_lootpack_stats_streak_non_negative"),
        CheckConstraint("level >= 1", name="ck_user_lootpack_stats_level_positive"),
        CheckConstraint(
            "level_progress >= 0 AND level_progress < 100",
            name="ck_user_lootpack_stats_level_progress_range",
        ),
    )

    user_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    deal_coins: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        server_default=text(str(DEFAULT_DEAL_COINS)),
    )
    daily_streak: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        server_default=text(str(DEFAULT_DAILY_STREAK)),
    )
    last_daily_claim: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    total_packs_opened: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    level: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text(str(DEFAULT_LEVEL)))
    level_progress: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    total_savings_inr: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        server_default=text("0"),
    )
    member_status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        server_default=text(f"'{DEFAULT_MEMBER_STATUS}'"),
    )
    puzzle_pieces: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    puzzle_packs_claimed: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )
