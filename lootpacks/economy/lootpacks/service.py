from __future__ import annotations

import random
from datetime import datetime, timedelta
from uuid import UUID, uuid4

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from lootpacks.core.config import get_settings
from lootpacks.db.models.pack_types import PackType
from lootpacks.db.models.user_lootpack_stats import UserLootpackStats
from lootpacks.db.models.user_pack_history import UserPackHistory
from lootpacks.db.models.user_rewards import UserReward
from lootpacks.db.repo.ad_interactions_repo import AdInteractionsRepo
from lootpacks.db.repo.pack_types_repo import PackTypesRepo
from lootpacks.db.repo.user_lootpack_stats_repo import UserLootpackStatsRepo
from lootpacks.db.repo.user_pack_history_repo import UserPackHistoryRepo
from lootpacks.db.repo.user_rewards_repo import UserRewardsRepo
from lootpacks.economy.lootpacks.constants import (
    DAILY_PACK_AD_PLACEMENT,
    EXPIRING_SOON_DAYS,
    PACK_CATEGORY_FREE,
)
from lootpacks.economy.lootpacks.errors import (
    AdRequiredError,
    DailyPackCooldownError,
    InsufficientBalanceError,
    LootpackInvariantError,
    PackTypeNotFoundError,
)
from lootpacks.economy.lootpacks.pool_cache import RewardPoolCache, reward_pool_cache
from lootpacks.economy.lootpacks.rewards import default_rng, roll_reward_count, roll_rewards
from lootpacks.economy.lootpacks.rules import advance, is_daily_claim_available, to_stats_view
from lootpacks.economy.lootpacks.types import (
    GeneratedReward,
    InventorySummary,
    LootpackStatsSnapshot,
    LootpackStatsView,
    OpenPackResult,
)

logger = structlog.get_logger(__name__)


class LootpackService:
    @staticmethod
    def _snapshot_from_model(stats: UserLootpackStats) -> LootpackStatsSnapshot:
        return LootpackStatsSnapshot(
            deal_coins=stats.deal_coins,
            daily_streak=stats.daily_streak,
            last_daily_claim=stats.last_daily_claim,
            total_packs_opened=stats.total_packs_opened,
            level=stats.level,
            level_progress=stats.level_progress,
            member_status=stats.member_status,
        )

    @staticmethod
    def _apply_snapshot_to_model(
        stats: UserLootpackStats,
        snapshot: LootpackStatsSnapshot,
        now_utc: datetime,
    ) -> None:
        stats.deal_coins = snapshot.deal_coins
        stats.daily_streak = snapshot.daily_streak
        stats.last_daily_claim = snapshot.last_daily_claim
        stats.total_packs_opened = snapshot.total_packs_opened
        stats.level = snapshot.level
        stats.level_progress = snapshot.level_progress
        stats.updated_at = now_utc

    @staticmethod
    def _build_inventory_row(
        reward: GeneratedReward,
        *,
        user_id: str,
        pack_history_id: UUID,
        source: str,
        now_utc: datetime,
    ) -> UserReward:
        return UserReward(
            id=reward.reward_id,
            user_id=user_id,
            pack_history_id=pack_history_id,
            template_id=reward.template_id,
            type=reward.kind,
            title=reward.title,
            value=reward.value,
            description=reward.description,
            code=reward.code,
            rarity=reward.rarity,
            source=source,
            expires_at=reward.expires_at,
            is_used=False,
            created_at=now_utc,
        )

    @staticmethod
    async def list_pack_types(session: AsyncSession) -> list[PackType]:
        return await PackTypesRepo.list_active(session)

    @staticmethod
    async def get_user_stats(
        session: AsyncSession,
        *,
        user_id: str,
        now_utc: datetime,
    ) -> LootpackStatsView:
        stats = await UserLootpackStatsRepo.get_or_create(session, user_id=user_id)
        if stats is None:
            raise LootpackInvariantError("stats row missing after lazy create")
        return to_stats_view(LootpackService._snapshot_from_model(stats), now_utc=now_utc)

    @staticmethod
    async def _validate_eligibility(
        session: AsyncSession,
        *,
        user_id: str,
        pack_type: PackType,
        stats: UserLootpackStats,
        now_utc: datetime,
    ) -> None:
        if pack_type.type == PACK_CATEGORY_FREE:
            if not is_daily_claim_available(stats.last_daily_claim, now_utc=now_utc):
                raise DailyPackCooldownError

            ad_window = timedelta(minutes=get_settings().lootpack_ad_window_minutes)
            recent_ad = await AdInteractionsRepo.get_latest_completed_since(
                session,
                user_id=user_id,
                ad_placement=DAILY_PACK_AD_PLACEMENT,
                since_utc=now_utc - ad_window,
            )
            if recent_ad is None:
                raise AdRequiredError
            return

        if pack_type.price_coins is not None and stats.deal_coins < pack_type.price_coins:
            raise InsufficientBalanceError

    @staticmethod
    async def open_pack(
        session: AsyncSession,
        *,
        user_id: str,
        pack_type_id: UUID,
        now_utc: datetime,
        rng: random.Random | None = None,
        pool_cache: RewardPoolCache | None = None,
    ) -> OpenPackResult:
        """Opens one pack inside the caller's transaction.

        The caller owns the transaction boundary: every write here is only
        flushed, so an exception anywhere leaves nothing behind once the
        session rolls back. The stats row is locked for the whole call, which
        serializes concurrent openings for one user.
        """
        rng = rng if rng is not None else default_rng
        pool_cache = pool_cache if pool_cache is not None else reward_pool_cache

        pack_type = await PackTypesRepo.get_active_by_id(session, pack_type_id)
        if pack_type is None:
            raise PackTypeNotFoundError

        stats = await UserLootpackStatsRepo.get_or_create_for_update(session, user_id=user_id)
        if stats is None:
            raise LootpackInvariantError("stats row missing after lazy create")

        await LootpackService._validate_eligibility(
            session,
            user_id=user_id,
            pack_type=pack_type,
            stats=stats,
            now_utc=now_utc,
        )

        pool = await pool_cache.get_or_build(session, pack_type.id)

        num_rewards = roll_reward_count(
            min_rewards=pack_type.min_rewards,
            max_rewards=pack_type.max_rewards,
            rng=rng,
        )
        rewards = roll_rewards(
            pool,
            count=num_rewards,
            pack_category=pack_type.type,
            price_coins=pack_type.price_coins,
            rng=rng,
            now_utc=now_utc,
        )

        history = await UserPackHistoryRepo.create(
            session,
            history=UserPackHistory(
                id=uuid4(),
                user_id=user_id,
                pack_type_id=pack_type.id,
                rewards_count=len(rewards),
                total_value_inr=None,
                opened_at=now_utc,
            ),
        )
        await UserRewardsRepo.create_many(
            session,
            rewards=[
                LootpackService._build_inventory_row(
                    reward,
                    user_id=user_id,
                    pack_history_id=history.id,
                    source=pack_type.name,
                    now_utc=now_utc,
                )
                for reward in rewards
            ],
        )

        snapshot = advance(
            LootpackService._snapshot_from_model(stats),
            pack_category=pack_type.type,
            price_coins=pack_type.price_coins,
            rewards=rewards,
            now_utc=now_utc,
        )
        LootpackService._apply_snapshot_to_model(stats, snapshot, now_utc)
        await session.flush()

        logger.info(
            "lootpack_opened",
            user_id=user_id,
            pack_type_id=str(pack_type.id),
            pack_name=pack_type.name,
            rewards_count=len(rewards),
        )
        return OpenPackResult(
            pack_history_id=history.id,
            rewards=tuple(rewards),
            stats=to_stats_view(snapshot, now_utc=now_utc),
        )

    @staticmethod
    async def get_user_inventory(
        session: AsyncSession,
        *,
        user_id: str,
        now_utc: datetime,
    ) -> InventorySummary:
        rewards = await UserRewardsRepo.list_for_user(session, user_id=user_id)

        active_count = 0
        used_count = 0
        expiring_soon_count = 0
        for reward in rewards:
            if reward.is_used:
                used_count += 1
                continue
            active_count += 1
            if reward.expires_at is not None and (reward.expires_at - now_utc).days <= EXPIRING_SOON_DAYS:
                expiring_soon_count += 1

        return InventorySummary(
            rewards=rewards,
            active_count=active_count,
            used_count=used_count,
            expiring_soon_count=expiring_soon_count,
        )
