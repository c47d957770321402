from lootpacks.economy.lootpacks.service import LootpackService

__all__ = ["LootpackService"]
