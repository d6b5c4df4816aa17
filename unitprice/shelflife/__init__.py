"""Shelf-life module: warnings for large purchases of perishable items.

Public API:
    analyze_shelf_life_warning(item, quantity, config=None) -> ShelfLifeWarningResult
    get_warning_threshold(item, config=None) -> float
    make_shelf_life_config(overrides) -> ShelfLifeWarningConfig
    load_shelf_life_config(path) -> ShelfLifeWarningConfig

Examples:
    >>> from unitprice.models import InventoryItem
    >>> from unitprice.shelflife import analyze_shelf_life_warning
    >>> milk = InventoryItem("milk", "Milk", "volume", "ml", shelf_life_sensitive=True)
    >>> analyze_shelf_life_warning(milk, 12).severity
    'warning'
"""

from .shelflifeconfig import (
    ShelfLifeWarningConfig,
    DEFAULT_SHELF_LIFE_CONFIG,
    make_shelf_life_config,
    load_shelf_life_config,
)
from .shelflifepolicy import (
    SEVERITY_INFO,
    SEVERITY_WARNING,
    SEVERITY_HIGH,
    ShelfLifeWarningResult,
    is_shelf_life_sensitive,
    get_warning_threshold,
    analyze_shelf_life_warning,
    analyze_offer_shelf_life_warning,
    get_shelf_life_warning_message,
    should_show_shelf_life_warning,
    get_shelf_life_warning_severity,
)

__all__ = [
    "ShelfLifeWarningConfig",
    "DEFAULT_SHELF_LIFE_CONFIG",
    "make_shelf_life_config",
    "load_shelf_life_config",
    "SEVERITY_INFO",
    "SEVERITY_WARNING",
    "SEVERITY_HIGH",
    "ShelfLifeWarningResult",
    "is_shelf_life_sensitive",
    "get_warning_threshold",
    "analyze_shelf_life_warning",
    "analyze_offer_shelf_life_warning",
    "get_shelf_life_warning_message",
    "should_show_shelf_life_warning",
    "get_shelf_life_warning_severity",
]
