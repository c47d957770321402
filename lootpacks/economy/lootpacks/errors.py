class LootpackError(Exception):
    pass


class PackTypeNotFoundError(LootpackError):
    pass


class LootpackValidationError(LootpackError):
    code = "E_LOOTPACK_INVALID"
    message = "Pack cannot be opened"


class DailyPackCooldownError(LootpackValidationError):
    code = "E_DAILY_COOLDOWN"
    message = "Daily pack still on cooldown"


class AdRequiredError(LootpackValidationError):
    code = "E_AD_REQUIRED"
    message = "Please watch an ad to claim your daily free pack"


class InsufficientBalanceError(LootpackValidationError):
    code = "E_INSUFFICIENT_BALANCE"
    message = "Insufficient DealCoins"


class LootpackInvariantError(LootpackError):
    pass
