from lootpacks.db.models.pack_reward_mappings import PackRewardMapping
from lootpacks.db.models.pack_types import PackType
from lootpacks.db.models.reward_templates import RewardTemplate
from lootpacks.db.models.user_ad_interactions import UserAdInteraction
from lootpacks.db.models.user_lootpack_stats import UserLootpackStats
from lootpacks.db.models.user_pack_history import UserPackHistory
from lootpacks.db.models.user_rewards import UserReward

__all__ = [
    "PackRewardMapping",
    "PackType",
    "RewardTemplate",
    "UserAdInteraction",
    "UserLootpackStats",
    "UserPackHistory",
    "UserReward",
]
