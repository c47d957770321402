from __future__ import annotations

import asyncio
from dataclasses import dataclass
from time import monotonic
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from lootpacks.core.config import get_settings
from lootpacks.db.models.reward_templates import RewardTemplate
from lootpacks.db.repo.reward_templates_repo import RewardTemplatesRepo
from lootpacks.economy.lootpacks.pool import RewardPool
from lootpacks.economy.lootpacks.types import RewardTemplateSpec

logger = structlog.get_logger(__name__)


@dataclass(slots=True)
class _PoolCacheEntry:
    loaded_at_mono: float
    pool: RewardPool


def _clamp_cache_ttl_seconds(value: int) -> int | None:
    if int(value) <= 0:
        return None
    return max(1, min(3600, int(value)))


def to_template_spec(record: RewardTemplate) -> RewardTemplateSpec:
    return RewardTemplateSpec(
        template_id=record.id,
        kind=record.type,
        title=record.title,
        value=record.value,
        rarity=record.rarity,
        description=record.description,
        code_pattern=record.code_pattern,
        validity_days=record.validity_days,
        points_amount=record.points_amount,
    )


async def load_reward_pool(session: AsyncSession, *, pack_type_id: UUID) -> RewardPool:
    mappings = await RewardTemplatesRepo.list_active_for_pack_type(session, pack_type_id=pack_type_id)
    return RewardPool.build((to_template_spec(template), weight) for template, weight in mappings)


class RewardPoolCache:
    """Process-local cache of reward pools keyed by pack type id.

    Hits are plain dictionary reads and never wait on a build. Misses take a
    per-pack-type lock so concurrent misses for one pack build once while other
    pack types are unaffected. ``invalidate`` and ``clear`` bump the cache
    version; a build that started before the bump returns its pool to the
    caller but does not store it.
    """

    def __init__(self, *, ttl_seconds: int | None = None) -> None:
        self._ttl_seconds_override = ttl_seconds
        self._entries: dict[UUID, _PoolCacheEntry] = {}
        self._versions: dict[UUID, int] = {}
        self._epoch = 0
        self._build_locks: dict[UUID, asyncio.Lock] = {}

    def _ttl_seconds(self) -> int | None:
        if self._ttl_seconds_override is not None:
            return _clamp_cache_ttl_seconds(self._ttl_seconds_override)
        return _clamp_cache_ttl_seconds(get_settings().lootpack_reward_pool_cache_ttl_seconds)

    def _fresh_entry(self, pack_type_id: UUID) -> _PoolCacheEntry | None:
        cached = self._entries.get(pack_type_id)
        if cached is None:
            return None
        ttl_seconds = self._ttl_seconds()
        if ttl_seconds is not None and (monotonic() - cached.loaded_at_mono) > ttl_seconds:
            return None
        return cached

    def _version_of(self, pack_type_id: UUID) -> tuple[int, int]:
        return self._epoch, self._versions.get(pack_type_id, 0)

    def peek(self, pack_type_id: UUID) -> RewardPool | None:
        cached = self._fresh_entry(pack_type_id)
        return cached.pool if cached is not None else None

    async def get_or_build(self, session: AsyncSession, pack_type_id: UUID) -> RewardPool:
        pool = self.peek(pack_type_id)
        if pool is not None:
            return pool

        lock = self._build_locks.setdefault(pack_type_id, asyncio.Lock())
        async with lock:
            cached = self._fresh_entry(pack_type_id)
            if cached is not None:
                return cached.pool

            version = self._version_of(pack_type_id)
            pool = await load_reward_pool(session, pack_type_id=pack_type_id)
            if self._version_of(pack_type_id) == version:
                self._entries[pack_type_id] = _PoolCacheEntry(loaded_at_mono=monotonic(), pool=pool)
            logger.info(
                "reward_pool_built",
                pack_type_id=str(pack_type_id),
                templates=len(pool.rewards),
                total_weight=pool.total_weight,
            )
            return pool

    def invalidate(self, pack_type_id: UUID) -> None:
        self._versions[pack_type_id] = self._versions.get(pack_type_id, 0) + 1
        self._entries.pop(pack_type_id, None)
        logger.info("reward_pool_invalidated", pack_type_id=str(pack_type_id))

    def clear(self) -> None:
        self._epoch += 1
        self._entries.clear()
        logger.info("reward_pool_cache_cleared")

    def __len__(self) -> int:
        return len(self._entries)


reward_pool_cache = RewardPoolCache()


def clear_reward_pool_cache() -> None:
    reward_pool_cache.clear()
