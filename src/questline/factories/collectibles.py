from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable


class ItemCategory(Enum):
    COIN = "coin"
    BADGE = "badge"
    POWERUP = "powerup"
    TREASURE = "treasure"


class Rarity(Enum):
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    LEGENDARY = "legendary"


@dataclass(frozen=True, slots=True)
class CollectibleItem:
    """A world pickup. Picking one up is idempotent per ``id``."""

    id: str
    category: ItemCategory
    name: str
    coin_value: int
    point_value: int
    rarity: Rarity = Rarity.COMMON


class CollectibleRegistry:
    """In-memory collection of collectible definitions."""

    def __init__(self, items: Iterable[CollectibleItem] = ()) -> None:
        self._items: dict[str, CollectibleItem] = {}
        for item in items:
            self.register(item)

    def register(self, item: CollectibleItem) -> None:
        if item.id in self._items:
            raise ValueError(f"Collectible '{item.id}' already registered")
        self._items[item.id] = item

    def get(self, item_id: str) -> CollectibleItem:
        try:
            return self._items[item_id]
        except KeyError as exc:
            raise KeyError(f"Collectible '{item_id}' is not registered") from exc

    def has(self, item_id: str) -> bool:
        return item_id in self._items

    def all(self) -> Iterable[CollectibleItem]:
        return tuple(self._items.values())


def _coin(item_id: str, value: int = 5) -> CollectibleItem:
    return CollectibleItem(item_id, ItemCategory.COIN, "Coin", value, 10)


default_collectible_registry = CollectibleRegistry(
    [
        *(_coin(f"barangay-coin-{n}") for n in range(1, 6)),
        *(_coin(f"city-coin-{n}", value=10) for n in range(1, 6)),
        CollectibleItem("barangay-badge-1", ItemCategory.BADGE, "Volunteer Pin", 10, 50, Rarity.UNCOMMON),
        CollectibleItem("barangay-powerup-1", ItemCategory.POWERUP, "Energy Drink", 0, 25, Rarity.COMMON),
        CollectibleItem("barangay-treasure-1", ItemCategory.TREASURE, "Old Town Map", 50, 100, Rarity.RARE),
        CollectibleItem("city-badge-1", ItemCategory.BADGE, "Civic Medal", 20, 75, Rarity.UNCOMMON),
        CollectibleItem("city-powerup-1", ItemCategory.POWERUP, "Transit Pass", 0, 40, Rarity.UNCOMMON),
        CollectibleItem("city-treasure-1", ItemCategory.TREASURE, "Founders' Charter", 100, 250, Rarity.LEGENDARY),
    ]
)
