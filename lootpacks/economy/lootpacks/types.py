from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from uuid import UUID


@dataclass(frozen=True, slots=True)
class RewardTemplateSpec:
    template_id: UUID
    kind: str
    title: str
    value: str
    rarity: str
    description: str | None = None
    code_pattern: str | None = None
    validity_days: int | None = None
    points_amount: int | None = None


@dataclass(frozen=True, slots=True)
class GeneratedReward:
    reward_id: UUID
    template_id: UUID
    kind: str
    title: str
    value: str
    description: str
    rarity: str
    code: str | None
    expires_at: datetime | None
    points_amount: int | None = None


@dataclass(slots=True)
class LootpackStatsSnapshot:
    deal_coins: int
    daily_streak: int
    last_daily_claim: datetime | None
    total_packs_opened: int
    level: int
    level_progress: int
    member_status: str


@dataclass(frozen=True, slots=True)
class LootpackStatsView:
    deal_coins: int
    daily_streak: int
    total_packs_opened: int
    level: int
    level_progress: int
    member_status: str
    can_claim_daily: bool
    next_daily_claim: datetime | None


@dataclass(frozen=True, slots=True)
class OpenPackResult:
    pack_history_id: UUID
    rewards: tuple[GeneratedReward, ...]
    stats: LootpackStatsView


@dataclass(slots=True)
class InventorySummary:
    rewards: Sequence[object]
    active_count: int
    used_count: int
    expiring_soon_count: int
    # Reward valuation is not implemented; None means "unknown", never zero.
    total_value_estimate: Decimal | None = field(default=None)
