from __future__ import annotations

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lootpacks.db.models.user_ad_interactions import UserAdInteraction


class AdInteractionsRepo:
    @staticmethod
    async def get_latest_completed_since(
        session: AsyncSession,
        *,
        user_id: str,
        ad_placement: str,
        since_utc: datetime,
    ) -> UserAdInteraction | None:
        stmt = (
            select(UserAdInteraction)
            .where(
                UserAdInteraction.user_id == user_id,
                UserAdInteraction.ad_placement == ad_placement,
                UserAdInteraction.is_completed.is_(True),
                UserAdInteraction.completed_at > since_utc,
            )
            .order_by(UserAdInteraction.completed_at.desc())
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()
