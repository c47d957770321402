from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, Boolean, DateTime, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column

from lootpacks.db.models.base import Base


class UserAdInteraction(Base):
    __tablename__ = "user_ad_interactions"
    __table_args__ = (
        Index(
            "idx_user_ad_interactions_user_placement_completed",
            "user_id",
            "ad_placement",
            "completed_at",
        ),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False)
    ad_placement: Mapped[str] = mapped_column(String(64), nullable=False)
    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("false"))
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )
