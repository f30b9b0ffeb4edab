from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from questline.factories.collectibles import Rarity


class ShopCategory(Enum):
    POWERUPS = "powerups"
    COSMETICS = "cosmetics"
    BOOSTERS = "boosters"
    SPECIAL = "special"


@dataclass(frozen=True, slots=True)
class ShopItem:
    """Catalog entry for something bought with coins.

    ``unlock_level`` is the lowest player level allowed to buy it and
    ``max_purchases`` caps repeat purchases (``None`` means unlimited).
    """

    id: str
    name: str
    category: ShopCategory
    price: int
    rarity: Rarity = Rarity.COMMON
    unlock_level: int = 1
    max_purchases: int | None = None


class ShopCatalog:
    """In-memory collection of shop items keyed by id."""

    def __init__(self, items: Iterable[ShopItem] = ()) -> None:
        self._items: dict[str, ShopItem] = {}
        for item in items:
            self.register(item)

    def register(self, item: ShopItem) -> None:
        if item.id in self._items:
            raise ValueError(f"Shop item '{item.id}' already registered")
        if item.price < 0:
            raise ValueError(f"Shop item '{item.id}' has a negative price")
        self._items[item.id] = item

    def get(self, item_id: str) -> ShopItem:
        try:
            return self._items[item_id]
        except KeyError as exc:
            raise KeyError(f"Shop item '{item_id}' is not registered") from exc

    def has(self, item_id: str) -> bool:
        return item_id in self._items

    def all(self) -> Iterable[ShopItem]:
        return tuple(self._items.values())

    def available_for(self, level: int) -> tuple[ShopItem, ...]:
        return tuple(item for item in self._items.values() if item.unlock_level <= level)


default_shop_catalog = ShopCatalog(
    [
        ShopItem("speed-boost-1", "Speed Boost", ShopCategory.POWERUPS, 50),
        ShopItem("coin-magnet-1", "Coin Magnet", ShopCategory.POWERUPS, 100, Rarity.UNCOMMON),
        ShopItem("score-booster-1", "Score Booster", ShopCategory.BOOSTERS, 150, Rarity.UNCOMMON),
        ShopItem("hint-token-1", "Hint Token", ShopCategory.POWERUPS, 75, max_purchases=10),
        ShopItem("time-freeze-1", "Time Freeze", ShopCategory.POWERUPS, 200, Rarity.RARE),
        ShopItem("gold-badge-1", "Golden Badge", ShopCategory.COSMETICS, 120, Rarity.UNCOMMON),
        ShopItem("crown-1", "Civic Crown", ShopCategory.COSMETICS, 300, Rarity.RARE, unlock_level=2),
        ShopItem("trophy-display-1", "Trophy Display", ShopCategory.COSMETICS, 500, Rarity.LEGENDARY, unlock_level=2),
        ShopItem("mystery-box-1", "Mystery Box", ShopCategory.SPECIAL, 250, Rarity.RARE),
        ShopItem("lucky-charm-1", "Lucky Charm", ShopCategory.SPECIAL, 400, Rarity.LEGENDARY, unlock_level=2),
    ]
)
