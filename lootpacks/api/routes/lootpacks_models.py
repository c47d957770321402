from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field


class PackTypeResponse(BaseModel):
    id: UUID
    name: str
    type: str
    description: str | None = None
    icon: str | None = None
    color_gradient: str | None = None
    price_coins: int | None = None
    cooldown_hours: int | None = None
    min_rewards: int = Field(ge=0)
    max_rewards: int = Field(ge=0)
    possible_reward_types: list[str]


class PackTypeListResponse(BaseModel):
    pack_types: list[PackTypeResponse]


class UserStatsResponse(BaseModel):
    deal_coins: int
    daily_streak: int = Field(ge=0)
    total_packs_opened: int = Field(ge=0)
    level: int = Field(ge=1)
    level_progress: int = Field(ge=0, le=99)
    member_status: str
    can_claim_daily: bool
    next_daily_claim: datetime | None = None


class GeneratedRewardResponse(BaseModel):
    id: UUID
    template_id: UUID
    type: str
    title: str
    value: str
    description: str
    code: str | None = None
    rarity: str
    expires_at: datetime | None = None


class OpenPackResponse(BaseModel):
    pack_history_id: UUID
    rewards: list[GeneratedRewardResponse]
    updated_stats: UserStatsResponse


class UserRewardResponse(BaseModel):
    id: UUID
    pack_history_id: UUID | None = None
    template_id: UUID | None = None
    type: str
    title: str
    value: str
    description: str | None = None
    code: str | None = None
    rarity: str
    source: str
    expires_at: datetime | None = None
    is_used: bool
    used_at: datetime | None = None
    created_at: datetime


class InventoryStatsResponse(BaseModel):
    active_count: int = Field(ge=0)
    used_count: int = Field(ge=0)
    expiring_soon_count: int = Field(ge=0)
    total_value_estimate: Decimal | None = Field(
        default=None,
        description="Reward valuation is not implemented yet; always null.",
    )


class InventoryResponse(BaseModel):
    rewards: list[UserRewardResponse]
    stats: InventoryStatsResponse


class RewardMappingUpsertRequest(BaseModel):
    weight: int = Field(ge=0, le=1_000_000)


class RewardMappingUpsertResponse(BaseModel):
    pack_type_id: UUID
    reward_template_id: UUID
    weight: int
    pool_invalidated: bool


class RewardPoolInvalidateRequest(BaseModel):
    pack_type_id: UUID | None = None


class RewardPoolInvalidateResponse(BaseModel):
    scope: str
    pack_type_id: UUID | None = None
