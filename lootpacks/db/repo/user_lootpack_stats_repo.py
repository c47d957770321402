from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from lootpacks.db.models.user_lootpack_stats import (
    DEFAULT_DAILY_STREAK,
    DEFAULT_DEAL_COINS,
    DEFAULT_LEVEL,
    DEFAULT_MEMBER_STATUS,
    UserLootpackStats,
)


class UserLootpackStatsRepo:
    @staticmethod
    async def get_by_user_id(session: AsyncSession, user_id: str) -> UserLootpackStats | None:
        return await session.get(UserLootpackStats, user_id)

    @staticmethod
    async def get_by_user_id_for_update(session: AsyncSession, user_id: str) -> UserLootpackStats | None:
        stmt = select(UserLootpackStats).where(UserLootpackStats.user_id == user_id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def insert_default_if_missing(session: AsyncSession, *, user_id: str) -> None:
        stmt = (
            insert(UserLootpackStats)
            .values(
                user_id=user_id,
                deal_coins=DEFAULT_DEAL_COINS,
                daily_streak=DEFAULT_DAILY_STREAK,
                total_packs_opened=0,
                level=DEFAULT_LEVEL,
                level_progress=0,
                total_savings_inr=0,
                member_status=DEFAULT_MEMBER_STATUS,
                puzzle_pieces=0,
                puzzle_packs_claimed=0,
            )
            .on_conflict_do_nothing(index_elements=[UserLootpackStats.user_id])
        )
        await session.execute(stmt)

    @staticmethod
    async def get_or_create(session: AsyncSession, *, user_id: str) -> UserLootpackStats | None:
        stats = await UserLootpackStatsRepo.get_by_user_id(session, user_id)
        if stats is not None:
            return stats
        await UserLootpackStatsRepo.insert_default_if_missing(session, user_id=user_id)
        return await UserLootpackStatsRepo.get_by_user_id(session, user_id)

    @staticmethod
    async def get_or_create_for_update(session: AsyncSession, *, user_id: str) -> UserLootpackStats | None:
        stats = await UserLootpackStatsRepo.get_by_user_id_for_update(session, user_id)
        if stats is not None:
            return stats
        await UserLootpackStatsRepo.insert_default_if_missing(session, user_id=user_id)
        return await UserLootpackStatsRepo.get_by_user_id_for_update(session, user_id)
