from __future__ import annotations

from uuid import UUID

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from lootpacks.db.models.base import Base

# Weight applied to a mapping whose weight column is NULL.
DEFAULT_MAPPING_WEIGHT = 1


class PackRewardMapping(Base):
    __tablename__ = "pack_reward_mappings"
    __table_args__ = (
        CheckConstraint("weight IS NULL OR weight >= 0", name="ck_pack_reward_mappings_weight_non_negative"),
        Index("idx_pack_reward_mappings_pack_weight", "pack_type_id", "weight"),
    )

    pack_type_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("pack_types.id"),
        primary_key=True,
    )
    reward_template_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("reward_templates.id"),
        primary_key=True,
    )
    weight: Mapped[int | None] = mapped_column(Integer, nullable=True)
