from lootpacks.db.repo.ad_interactions_repo import AdInteractionsRepo
from lootpacks.db.repo.pack_types_repo import PackTypesRepo
from lootpacks.db.repo.reward_templates_repo import RewardTemplatesRepo
from lootpacks.db.repo.user_lootpack_stats_repo import UserLootpackStatsRepo
from lootpacks.db.repo.user_pack_history_repo import UserPackHistoryRepo
from lootpacks.db.repo.user_rewards_repo import UserRewardsRepo

__all__ = [
    "AdInteractionsRepo",
    "PackTypesRepo",
    "RewardTemplatesRepo",
    "UserLootpackStatsRepo",
    "UserPackHistoryRepo",
    "UserRewardsRepo",
]
