from __future__ import annotations

from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from lootpacks.db.models.pack_reward_mappings import DEFAULT_MAPPING_WEIGHT, PackRewardMapping
from lootpacks.db.models.reward_templates import RewardTemplate


class RewardTemplatesRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, template_id: UUID) -> RewardTemplate | None:
        return await session.get(RewardTemplate, template_id)

    @staticmethod
    def active_for_pack_type_stmt(pack_type_id: UUID) -> Select:
        # A NULL weight counts as 1, so it sorts with the 1s, never after the 0s.
        effective_weight = func.coalesce(PackRewardMapping.weight, DEFAULT_MAPPING_WEIGHT)
        return (
            select(RewardTemplate, PackRewardMapping.weight)
            .join(PackRewardMapping, PackRewardMapping.reward_template_id == RewardTemplate.id)
            .where(
                PackRewardMapping.pack_type_id == pack_type_id,
                RewardTemplate.is_active.is_(True),
            )
            .order_by(effective_weight.desc(), RewardTemplate.id.asc())
        )

    @staticmethod
    async def list_active_for_pack_type(
        session: AsyncSession,
        *,
        pack_type_id: UUID,
    ) -> list[tuple[RewardTemplate, int | None]]:
        stmt = RewardTemplatesRepo.active_for_pack_type_stmt(pack_type_id)
        result = await session.execute(stmt)
        return [(template, weight) for template, weight in result.all()]

    @staticmethod
    async def upsert_mapping(
        session: AsyncSession,
        *,
        pack_type_id: UUID,
        reward_template_id: UUID,
        weight: int,
    ) -> None:
        stmt = (
            insert(PackRewardMapping)
            .values(
                pack_type_id=pack_type_id,
                reward_template_id=reward_template_id,
                weight=weight,
            )
            .on_conflict_do_update(
                index_elements=[PackRewardMapping.pack_type_id, PackRewardMapping.reward_template_id],
                set_={"weight": weight},
            )
        )
        await session.execute(stmt)
