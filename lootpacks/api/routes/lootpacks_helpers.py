from __future__ import annotations

from lootpacks.db.models.pack_types import PackType
from lootpacks.db.models.user_rewards import UserReward
from lootpacks.economy.lootpacks.types import (
    GeneratedReward,
    InventorySummary,
    LootpackStatsView,
    OpenPackResult,
)

from .lootpacks_models import (
    GeneratedRewardResponse,
    InventoryResponse,
    InventoryStatsResponse,
    OpenPackResponse,
    PackTypeResponse,
    UserRewardResponse,
    UserStatsResponse,
)


def _pack_type_as_response(pack_type: PackType) -> PackTypeResponse:
    return PackTypeResponse(
        id=pack_type.id,
        name=pack_type.name,
        type=pack_type.type,
        description=pack_type.description,
        icon=pack_type.icon,
        color_gradient=pack_type.color_gradient,
        price_coins=pack_type.price_coins,
        cooldown_hours=pack_type.cooldown_hours,
        min_rewards=pack_type.min_rewards,
        max_rewards=pack_type.max_rewards,
        possible_reward_types=list(pack_type.possible_reward_types or []),
    )


def _stats_as_response(stats: LootpackStatsView) -> UserStatsResponse:
    return UserStatsResponse(
        deal_coins=stats.deal_coins,
        daily_streak=stats.daily_streak,
        total_packs_opened=stats.total_packs_opened,
        level=stats.level,
        level_progress=stats.level_progress,
        member_status=stats.member_status,
        can_claim_daily=stats.can_claim_daily,
        next_daily_claim=stats.next_daily_claim,
    )


def _generated_reward_as_response(reward: GeneratedReward) -> GeneratedRewardResponse:
    return GeneratedRewardResponse(
        id=reward.reward_id,
        template_id=reward.template_id,
        type=reward.kind,
        title=reward.title,
        value=reward.value,
        description=reward.description,
        code=reward.code,
        rarity=reward.rarity,
        expires_at=reward.expires_at,
    )


def _open_result_as_response(result: OpenPackResult) -> OpenPackResponse:
    return OpenPackResponse(
        pack_history_id=result.pack_history_id,
        rewards=[_generated_reward_as_response(reward) for reward in result.rewards],
        updated_stats=_stats_as_response(result.stats),
    )


def _user_reward_as_response(reward: UserReward) -> UserRewardResponse:
    return UserRewardResponse(
        id=reward.id,
        pack_history_id=reward.pack_history_id,
        template_id=reward.template_id,
        type=reward.type,
        title=reward.title,
        value=reward.value,
        description=reward.description,
        code=reward.code,
        rarity=reward.rarity,
        source=reward.source,
        expires_at=reward.expires_at,
        is_used=bool(reward.is_used),
        used_at=reward.used_at,
        created_at=reward.created_at,
    )


def _inventory_as_response(summary: InventorySummary) -> InventoryResponse:
    return InventoryResponse(
        rewards=[_user_reward_as_response(reward) for reward in summary.rewards],
        stats=InventoryStatsResponse(
            active_count=summary.active_count,
            used_count=summary.used_count,
            expiring_soon_count=summary.expiring_soon_count,
            total_value_estimate=summary.total_value_estimate,
        ),
    )
