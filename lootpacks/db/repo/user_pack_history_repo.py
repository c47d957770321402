from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from lootpacks.db.models.user_pack_history import UserPackHistory


class UserPackHistoryRepo:
    @staticmethod
    async def create(session: AsyncSession, *, history: UserPackHistory) -> UserPackHistory:
        session.add(history)
        await session.flush()
        return history
