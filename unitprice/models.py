"""Records consumed by the engine.

Inventory items and offers are owned by the calling application (storage,
forms); the engine only reads them. Field names follow the offers table of
the shopping app.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class InventoryItem:
    """An item whose offers are compared in its canonical unit.

    ``canonical_unit`` must equal the resolver's canonical unit for
    ``canonical_dimension``; the engine does not check this.
    """

    id: str
    name: str
    canonical_dimension: str
    canonical_unit: str
    shelf_life_sensitive: bool = False
    category: Optional[str] = None
    equivalence_factor: Optional[float] = None


@dataclass(frozen=True)
class Offer:
    """A recorded price for some amount of an inventory item."""

    amount: float
    amount_unit: str
    total_price: float
    shipping_cost: Optional[float] = None
    shipping_included: bool = False
    id: Optional[str] = None
    inventory_item_id: Optional[str] = None
    quality_rating: Optional[float] = None


__all__ = ["InventoryItem", "Offer"]
