from lootpacks.economy.lootpacks import LootpackService

__all__ = ["LootpackService"]
