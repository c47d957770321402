from __future__ import annotations

from uuid import UUID

from sqlalchemy import case, select
from sqlalchemy.ext.asyncio import AsyncSession

from lootpacks.db.models.pack_types import PackType


class PackTypesRepo:
    @staticmethod
    async def list_active(session: AsyncSession) -> list[PackType]:
        stmt = (
            select(PackType)
            .where(PackType.is_active.is_(True))
            .order_by(
                case((PackType.type == "free", 0), else_=1),
                PackType.price_coins.asc().nulls_first(),
            )
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def get_active_by_id(session: AsyncSession, pack_type_id: UUID) -> PackType | None:
        stmt = select(PackType).where(PackType.id == pack_type_id, PackType.is_active.is_(True))
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_id(session: AsyncSession, pack_type_id: UUID) -> PackType | None:
        return await session.get(PackType, pack_type_id)
