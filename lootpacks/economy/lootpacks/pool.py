from __future__ import annotations

from bisect import bisect_left
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from lootpacks.db.models.pack_reward_mappings import DEFAULT_MAPPING_WEIGHT
from lootpacks.economy.lootpacks.types import RewardTemplateSpec


@dataclass(frozen=True, slots=True)
class WeightedReward:
    template: RewardTemplateSpec
    weight: int
    cumulative_weight: int


def _normalize_weight(weight: int | None) -> int:
    if weight is None:
        return DEFAULT_MAPPING_WEIGHT
    return max(0, int(weight))


@dataclass(frozen=True, slots=True)
class RewardPool:
    """Weighted reward table for one pack type.

    Entries keep the order they were built in (descending mapping weight), and
    ``select_by_weight`` walks the cumulative weights in that order, so a target
    drawn uniformly from ``[1, total_weight]`` picks each template with
    probability ``weight / total_weight``. Pools are never mutated; a changed
    mapping produces a new pool.
    """

    rewards: tuple[WeightedReward, ...]
    total_weight: int
    rarity_index: Mapping[str, tuple[RewardTemplateSpec, ...]]
    cumulative_weights: tuple[int, ...]

    @classmethod
    def build(
        cls,
        mappings: Iterable[tuple[RewardTemplateSpec, int | None]],
    ) -> RewardPool:
        rewards: list[WeightedReward] = []
        by_rarity: dict[str, list[RewardTemplateSpec]] = {}
        cumulative_weight = 0

        for template, raw_weight in mappings:
            weight = _normalize_weight(raw_weight)
            cumulative_weight += weight
            rewards.append(
                WeightedReward(
                    template=template,
                    weight=weight,
                    cumulative_weight=cumulative_weight,
                )
            )
            by_rarity.setdefault(template.rarity, []).append(template)

        return cls(
            rewards=tuple(rewards),
            total_weight=cumulative_weight,
            rarity_index=MappingProxyType(
                {rarity: tuple(templates) for rarity, templates in by_rarity.items()}
            ),
            cumulative_weights=tuple(reward.cumulative_weight for reward in rewards),
        )

    @classmethod
    def empty(cls) -> RewardPool:
        return cls.build(())

    @property
    def is_degenerate(self) -> bool:
        return self.total_weight <= 0

    def select_by_weight(self, target: int) -> RewardTemplateSpec | None:
        if self.is_degenerate or target < 1 or target > self.total_weight:
            return None

        index = bisect_left(self.cumulative_weights, target)
        if index >= len(self.rewards):
            return None
        return self.rewards[index].template

    def get_by_rarity(self, rarity: str) -> tuple[RewardTemplateSpec, ...]:
        return self.rarity_index.get(rarity, ())
