from __future__ import annotations

from datetime import timedelta

PACK_CATEGORY_FREE = "free"
PACK_CATEGORY_PREMIUM = "premium"

REWARD_KIND_POINTS = "points"
REWARD_KIND_COUPON = "coupon"
REWARD_KIND_VOUCHER = "voucher"

RARITY_COMMON = "common"
RARITY_RARE = "rare"
RARITY_EPIC = "epic"
RARITY_LEGENDARY = "legendary"

GUARANTEED_RARITY_MIN_PRICE = 299
GUARANTEED_RARITIES: tuple[str, ...] = (RARITY_RARE, RARITY_EPIC, RARITY_LEGENDARY)

LEVEL_PROGRESS_PER_PACK = 10
LEVEL_PROGRESS_CAP = 100
LEVEL_UP_BONUS_COINS = 100

DAILY_CLAIM_INTERVAL = timedelta(hours=24)
STREAK_CONTINUE_MIN_HOURS = 24
STREAK_RESET_MIN_HOURS = 48

DAILY_PACK_AD_PLACEMENT = "daily_pack_ad"

CODE_PREFIXES_BY_KIND: dict[str, tuple[str, ...]] = {
    REWARD_KIND_COUPON: ("DEAL", "SAVE", "SHOP", "MEGA", "SUPER"),
    REWARD_KIND_VOUCHER: ("GIFT", "FREE", "ENJOY", "TREAT", "BONUS"),
}
DEFAULT_CODE_PREFIXES: tuple[str, ...] = ("DEAL",)
CODE_SUFFIX_MIN = 100
CODE_SUFFIX_MAX = 999

EXPIRING_SOON_DAYS = 3
