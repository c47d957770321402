from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Numeric, String, text
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from lootpacks.db.models.base import Base


class UserPackHistory(Base):
    __tablename__ = "user_pack_history"
    __table_args__ = (Index("idx_user_pack_history_user_opened", "user_id", "opened_at"),)

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False)
    pack_type_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("pack_types.id"),
        nullable=False,
    )
    rewards_count: Mapped[int] = mapped_column(Integer, nullable=False)
    # NULL until reward valuation exists.
    total_value_inr: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    opened_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )
