from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime

from lootpacks.economy.lootpacks.constants import (
    DAILY_CLAIM_INTERVAL,
    LEVEL_PROGRESS_CAP,
    LEVEL_PROGRESS_PER_PACK,
    LEVEL_UP_BONUS_COINS,
    PACK_CATEGORY_FREE,
    PACK_CATEGORY_PREMIUM,
    REWARD_KIND_POINTS,
    STREAK_CONTINUE_MIN_HOURS,
    STREAK_RESET_MIN_HOURS,
)
from lootpacks.economy.lootpacks.types import GeneratedReward, LootpackStatsSnapshot, LootpackStatsView

_SIGNED_INT_RE = re.compile(r"-?\d+")


def parse_points_value(value: str) -> int:
    """Parses a display value like ``"+50"``; anything non-numeric counts as 0."""
    candidate = value.lstrip("+")
    if _SIGNED_INT_RE.fullmatch(candidate) is None:
        return 0
    return int(candidate)


def reward_points_value(reward: GeneratedReward) -> int:
    if reward.kind != REWARD_KIND_POINTS:
        return 0
    if reward.points_amount is not None:
        return reward.points_amount
    return parse_points_value(reward.value)


def coin_bonus(rewards: Iterable[GeneratedReward]) -> int:
    return sum(reward_points_value(reward) for reward in rewards)


def pack_cost(*, pack_category: str, price_coins: int | None) -> int:
    if pack_category != PACK_CATEGORY_PREMIUM:
        return 0
    return price_coins or 0


def whole_hours_between(earlier: datetime, later: datetime) -> int:
    return int((later - earlier).total_seconds() // 3600)


def is_daily_claim_available(last_daily_claim: datetime | None, *, now_utc: datetime) -> bool:
    if last_daily_claim is None:
        return True
    return now_utc - last_daily_claim >= DAILY_CLAIM_INTERVAL


def project_daily_claim(
    last_daily_claim: datetime | None,
    *,
    now_utc: datetime,
) -> tuple[bool, datetime | None]:
    if last_daily_claim is None or is_daily_claim_available(last_daily_claim, now_utc=now_utc):
        return True, None
    return False, last_daily_claim + DAILY_CLAIM_INTERVAL


def next_streak(current_streak: int, *, last_daily_claim: datetime | None, now_utc: datetime) -> int:
    if last_daily_claim is None:
        return 1

    hours = whole_hours_between(last_daily_claim, now_utc)
    if STREAK_CONTINUE_MIN_HOURS <= hours < STREAK_RESET_MIN_HOURS:
        return current_streak + 1
    if hours >= STREAK_RESET_MIN_HOURS:
        return 1
    return current_streak


def advance(
    snapshot: LootpackStatsSnapshot,
    *,
    pack_category: str,
    price_coins: int | None,
    rewards: Iterable[GeneratedReward],
    now_utc: datetime,
) -> LootpackStatsSnapshot:
    deal_coins = (
        snapshot.deal_coins
        + coin_bonus(rewards)
        - pack_cost(pack_category=pack_category, price_coins=price_coins)
    )
    level = snapshot.level
    level_progress = snapshot.level_progress + LEVEL_PROGRESS_PER_PACK
    if level_progress >= LEVEL_PROGRESS_CAP:
        level += 1
        level_progress = 0
        deal_coins += LEVEL_UP_BONUS_COINS

    daily_streak = snapshot.daily_streak
    last_daily_claim = snapshot.last_daily_claim
    if pack_category == PACK_CATEGORY_FREE:
        daily_streak = next_streak(
            snapshot.daily_streak,
            last_daily_claim=snapshot.last_daily_claim,
            now_utc=now_utc,
        )
        last_daily_claim = now_utc

    return replace(
        snapshot,
        deal_coins=deal_coins,
        daily_streak=daily_streak,
        last_daily_claim=last_daily_claim,
        total_packs_opened=snapshot.total_packs_opened + 1,
        level=level,
        level_progress=level_progress,
    )


def to_stats_view(snapshot: LootpackStatsSnapshot, *, now_utc: datetime) -> LootpackStatsView:
    can_claim_daily, next_daily_claim = project_daily_claim(snapshot.last_daily_claim, now_utc=now_utc)
    return LootpackStatsView(
        deal_coins=snapshot.deal_coins,
        daily_streak=snapshot.daily_streak,
        total_packs_opened=snapshot.total_packs_opened,
        level=snapshot.level,
        level_progress=snapshot.level_progress,
        member_status=snapshot.member_status,
        can_claim_daily=can_claim_daily,
        next_daily_claim=next_daily_claim,
    )
