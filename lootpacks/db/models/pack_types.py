from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Boolean, CheckConstraint, DateTime, Index, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from lootpacks.db.models.base import Base


class PackType(Base):
    __tablename__ = "pack_types"
    __table_args__ = (
        CheckConstraint("price_coins IS NULL OR price_coins >= 0", name="ck_pack_types_price_non_negative"),
        CheckConstraint("min_rewards >= 0", name="ck_pack_types_min_rewards_non_negative"),
        CheckConstraint("max_rewards >= min_rewards", name="ck_pack_types_reward_range"),
        Index("idx_pack_types_active", "is_active"),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    icon: Mapped[str | None] = mapped_column(String(64), nullable=True)
    color_gradient: Mapped[str | None] = mapped_column(String(128), nullable=True)
    price_coins: Mapped[int | None] = mapped_column(Integer, nullable=True)
    cooldown_hours: Mapped[int | None] = mapped_column(Integer, nullable=True)
    min_rewards: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    max_rewards: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    possible_reward_types: Mapped[list[str]] = mapped_column(
        ARRAY(String(16)),
        nullable=False,
        server_default=text("'{}'"),
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("true"))
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
