from __future__ import annotations

import random
from datetime import datetime, timedelta
from uuid import uuid4

from lootpacks.economy.lootpacks.constants import (
    CODE_PREFIXES_BY_KIND,
    CODE_SUFFIX_MAX,
    CODE_SUFFIX_MIN,
    DEFAULT_CODE_PREFIXES,
    GUARANTEED_RARITIES,
    GUARANTEED_RARITY_MIN_PRICE,
    PACK_CATEGORY_PREMIUM,
    REWARD_KIND_COUPON,
    REWARD_KIND_POINTS,
    REWARD_KIND_VOUCHER,
)
from lootpacks.economy.lootpacks.pool import RewardPool
from lootpacks.economy.lootpacks.types import GeneratedReward, RewardTemplateSpec

# Drives draws and codes only; reward ids always come from uuid4.
# Callers inject a seeded ``random.Random`` in tests.
default_rng = random.Random()


def generate_redemption_code(kind: str, *, rng: random.Random) -> str:
    prefixes = CODE_PREFIXES_BY_KIND.get(kind, DEFAULT_CODE_PREFIXES)
    prefix = prefixes[rng.randrange(len(prefixes))]
    suffix = rng.randint(CODE_SUFFIX_MIN, CODE_SUFFIX_MAX)
    return f"{prefix}{suffix}"


def reward_expiry(template: RewardTemplateSpec, *, now_utc: datetime) -> datetime | None:
    if template.kind == REWARD_KIND_POINTS or template.validity_days is None:
        return None
    return now_utc + timedelta(days=template.validity_days)


def materialize_reward(
    template: RewardTemplateSpec,
    *,
    rng: random.Random,
    now_utc: datetime,
) -> GeneratedReward:
    code = None
    if template.kind in {REWARD_KIND_COUPON, REWARD_KIND_VOUCHER}:
        code = generate_redemption_code(template.kind, rng=rng)

    return GeneratedReward(
        reward_id=uuid4(),
        template_id=template.template_id,
        kind=template.kind,
        title=template.title,
        value=template.value,
        description=template.description or "",
        rarity=template.rarity,
        code=code,
        expires_at=reward_expiry(template, now_utc=now_utc),
        points_amount=template.points_amount,
    )


def has_rarity_guarantee(*, pack_category: str, price_coins: int | None) -> bool:
    return pack_category == PACK_CATEGORY_PREMIUM and (price_coins or 0) >= GUARANTEED_RARITY_MIN_PRICE


def guaranteed_candidates(pool: RewardPool) -> list[RewardTemplateSpec]:
    candidates: list[RewardTemplateSpec] = []
    for rarity in GUARANTEED_RARITIES:
        candidates.extend(pool.get_by_rarity(rarity))
    return candidates


def roll_reward_count(*, min_rewards: int, max_rewards: int, rng: random.Random) -> int:
    low = max(0, min_rewards)
    high = max(low, max_rewards)
    return rng.randint(low, high)


def roll_rewards(
    pool: RewardPool,
    *,
    count: int,
    pack_category: str,
    price_coins: int | None,
    rng: random.Random,
    now_utc: datetime,
) -> list[GeneratedReward]:
    """Rolls ``count`` rewards from the pool.

    Premium packs priced at or above the guarantee threshold spend their first
    slot on a uniform pick among rare, epic and legendary templates. Remaining
    slots are independent weighted draws; a degenerate pool yields nothing for
    them.
    """
    rewards: list[GeneratedReward] = []

    if has_rarity_guarantee(pack_category=pack_category, price_coins=price_coins):
        candidates = guaranteed_candidates(pool)
        if candidates:
            template = candidates[rng.randrange(len(candidates))]
            rewards.append(materialize_reward(template, rng=rng, now_utc=now_utc))

    for _ in range(count - len(rewards)):
        if pool.is_degenerate:
            continue
        target_weight = rng.randint(1, pool.total_weight)
        template = pool.select_by_weight(target_weight)
        if template is not None:
            rewards.append(materialize_reward(template, rng=rng, now_utc=now_utc))

    return rewards
