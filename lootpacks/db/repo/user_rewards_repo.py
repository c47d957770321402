from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lootpacks.db.models.user_rewards import UserReward


class UserRewardsRepo:
    @staticmethod
    async def create_many(session: AsyncSession, *, rewards: Sequence[UserReward]) -> None:
        if not rewards:
            return
        session.add_all(rewards)
        await session.flush()

    @staticmethod
    async def list_for_user(session: AsyncSession, *, user_id: str) -> list[UserReward]:
        stmt = (
            select(UserReward)
            .where(UserReward.user_id == user_id)
            .order_by(UserReward.created_at.desc(), UserReward.id.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())
