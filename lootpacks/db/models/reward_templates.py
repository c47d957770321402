from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Boolean, CheckConstraint, DateTime, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from lootpacks.db.models.base import Base


class RewardTemplate(Base):
    __tablename__ = "reward_templates"
    __table_args__ = (
        CheckConstraint("type IN ('points','coupon','voucher')", name="ck_reward_templates_type"),
        CheckConstraint(
            "rarity IN ('common','rare','epic','legendary')",
            name="ck_reward_templates_rarity",
        ),
        CheckConstraint(
            "validity_days IS NULL OR validity_days > 0",
            name="ck_reward_templates_validity_days_positive",
        ),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True, default=uuid4)
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    title: Mapped[str] = mapped_column(String(128), nullable=False)
    value: Mapped[str] = mapped_column(String(64), nullable=False)
    points_amount: Mapped[int | None] = mapped_column(Integer, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    rarity: Mapped[str] = mapped_column(String(16), nullable=False)
    code_pattern: Mapped[str | None] = mapped_column(String(64), nullable=True)
    validity_days: Mapped[int | None] = mapped_column(Integer, nullable=True)
    metadata_: Mapped[dict[str, object]] = mapped_column(
        "metadata",
        JSONB,
        nullable=False,
        server_default=text("'{}'::jsonb"),
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("true"))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )
