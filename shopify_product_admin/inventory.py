"""Inventory quantity aggregation."""

from typing import TYPE_CHECKING, Iterable

from .models import InventoryLevel

if TYPE_CHECKING:
    from .catalog import BaseCatalog

ON_HAND = "on_hand"
AVAILABLE = "available"


def level_quantity(level: InventoryLevel) -> int:
    """Quantity of one level: on_hand when reported, else available, else 0."""
    if ON_HAND in level.quantities:
        return level.quantities[ON_HAND]
    return level.quantities.get(AVAILABLE, 0)


def sum_inventory_quantity(levels: Iterable[InventoryLevel]) -> int:
    """
    Total quantity of an inventory item across all locations.

    The on_hand/available preference is applied per level before summing,
    so one location may contribute on_hand while another contributes
    available.
    """
    return sum(level_quantity(level) for level in levels)


class InventoryQuantityReader:
    """Reads the displayed quantity of an inventory item."""

    def __init__(self, catalog: "BaseCatalog"):
        """
        Args:
            catalog: Catalog used to fetch inventory levels
        """
        self.catalog = catalog

    async def read_quantity(self, inventory_item_id: str) -> int:
        levels = await self.catalog.get_inventory_levels(inventory_item_id)
        return sum_inventory_quantity(levels)
