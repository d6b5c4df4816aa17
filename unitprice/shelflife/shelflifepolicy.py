"""Shelf-life warning policy.

Classifies a purchase of a shelf-life sensitive item by quantity:

  1. Items that are not sensitive never warn
  2. Quantities below the minimum quantity floor never warn
  3. The threshold T comes from the first applicable override:
     item id -> category -> default multiplier
  4. Quantities up to T do not warn
  5. Above T, severity follows quantity / T:
     >= 5.0 high, >= 3.0 warning, otherwise info

The policy is stateless: the same item, quantity and config always produce
the same result.
"""

import math
import numbers
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

from unitprice.models import InventoryItem, Offer
from unitprice.shelflife.shelflifeconfig import (
    DEFAULT_SHELF_LIFE_CONFIG,
    ShelfLifeWarningConfig,
)

SEVERITY_INFO = "info"
SEVERITY_WARNING = "warning"
SEVERITY_HIGH = "high"

HIGH_SEVERITY_RATIO = 5.0
WARNING_SEVERITY_RATIO = 3.0


@dataclass(frozen=True)
class ShelfLifeWarningResult:
    should_show_warning: bool
    severity: str = SEVERITY_INFO
    warning_message: Optional[str] = None
    exceeded_threshold: Optional[float] = None
    actual_quantity: Optional[float] = None


_NO_WARNING = ShelfLifeWarningResult(should_show_warning=False, severity=SEVERITY_INFO)


def _valid_threshold(value: Any) -> bool:
    return (
        not isinstance(value, bool)
        and isinstance(value, numbers.Real)
        and math.isfinite(value)
        and value > 0
    )


def _threshold_lookups(
    item: InventoryItem,
    config: ShelfLifeWarningConfig,
) -> Tuple[Callable[[], Any], ...]:
    # Highest priority first.
    return (
        lambda: (config.item_thresholds or {}).get(item.id),
        lambda: (config.category_thresholds or {}).get(item.category) if item.category else None,
    )


def is_shelf_life_sensitive(item: InventoryItem) -> bool:
    return item.shelf_life_sensitive is True


def get_warning_threshold(
    item: InventoryItem,
    config: Optional[ShelfLifeWarningConfig] = None,
) -> float:
    """Threshold for an item: item override, then category, then default.

    Overrides that are not positive finite numbers are skipped. A default
    multiplier that is not positive and finite falls back to 3.0.

    Examples:
        >>> cfg = make_shelf_life_config({"category_thresholds": {"Dairy": 2.5}})
        >>> get_warning_threshold(InventoryItem("milk", "Milk", "volume", "ml", True, "Dairy"), cfg)
        2.5
    """
    config = config or DEFAULT_SHELF_LIFE_CONFIG
    for lookup in _threshold_lookups(item, config):
        value = lookup()
        if _valid_threshold(value):
            return float(value)
    if _valid_threshold(config.default_threshold_multiplier):
        return float(config.default_threshold_multiplier)
    return DEFAULT_SHELF_LIFE_CONFIG.default_threshold_multiplier


def _minimum_quantity(config: ShelfLifeWarningConfig) -> float:
    # None or non-finite floors disable the floor.
    value = config.minimum_quantity_threshold
    if isinstance(value, bool) or not isinstance(value, numbers.Real) or not math.isfinite(value):
        return 0.0
    return float(value)


def _format_quantity(quantity: float) -> str:
    """Exact rendering: 15 -> "15", 15.0 -> "15", 12.75 -> "12.75"."""
    if isinstance(quantity, numbers.Integral):
        return str(int(quantity))
    quantity = float(quantity)
    if quantity.is_integer():
        return str(int(quantity))
    return repr(quantity)


def _classify(ratio: float) -> str:
    if ratio >= HIGH_SEVERITY_RATIO:
        return SEVERITY_HIGH
    if ratio >= WARNING_SEVERITY_RATIO:
        return SEVERITY_WARNING
    return SEVERITY_INFO


def _warning_message(severity: str, item: InventoryItem, quantity: float) -> str:
    qty = _format_quantity(quantity)
    if severity == SEVERITY_HIGH:
        return (
            f"⚠️ High quantity purchase: {qty} units may exceed shelf life for {item.name}. "
            f"Consider smaller quantities or faster usage."
        )
    if severity == SEVERITY_WARNING:
        return f"⚠️ Large quantity purchase: {qty} units of {item.name} may be difficult to use before expiry."
    return (
        f"ℹ️ Shelf-life sensitive: {item.name} has limited shelf life. "
        f"Consider usage rate when purchasing {qty} units."
    )


def analyze_shelf_life_warning(
    item: InventoryItem,
    quantity: float,
    config: Optional[ShelfLifeWarningConfig] = None,
) -> ShelfLifeWarningResult:
    """Decide whether purchasing ``quantity`` of ``item`` deserves a warning.

    Examples:
        >>> item = InventoryItem("yogurt", "Yogurt", "count", "unit", shelf_life_sensitive=True)
        >>> analyze_shelf_life_warning(item, 15.0).severity
        'high'
        >>> analyze_shelf_life_warning(item, 8).should_show_warning
        False
    """
    config = config or DEFAULT_SHELF_LIFE_CONFIG

    if not is_shelf_life_sensitive(item):
        return _NO_WARNING

    if not isinstance(quantity, numbers.Real) or not math.isfinite(quantity):
        return _NO_WARNING

    if quantity < _minimum_quantity(config):
        return _NO_WARNING

    threshold = get_warning_threshold(item, config)
    if not quantity > threshold:
        return _NO_WARNING

    severity = _classify(quantity / threshold)
    return ShelfLifeWarningResult(
        should_show_warning=True,
        severity=severity,
        warning_message=_warning_message(severity, item, quantity),
        exceeded_threshold=threshold,
        actual_quantity=quantity,
    )


def analyze_offer_shelf_life_warning(
    item: InventoryItem,
    offer: Offer,
    config: Optional[ShelfLifeWarningConfig] = None,
) -> ShelfLifeWarningResult:
    """Shelf-life analysis for an offer's purchased amount (in its own unit)."""
    return analyze_shelf_life_warning(item, offer.amount, config)


def get_shelf_life_warning_message(
    item: InventoryItem,
    quantity: float,
    config: Optional[ShelfLifeWarningConfig] = None,
) -> Optional[str]:
    result = analyze_shelf_life_warning(item, quantity, config)
    return result.warning_message if result.should_show_warning else None


def should_show_shelf_life_warning(
    item: InventoryItem,
    offer: Offer,
    config: Optional[ShelfLifeWarningConfig] = None,
) -> bool:
    return analyze_offer_shelf_life_warning(item, offer, config).should_show_warning


def get_shelf_life_warning_severity(
    item: InventoryItem,
    offer: Offer,
    config: Optional[ShelfLifeWarningConfig] = None,
) -> str:
    return analyze_offer_shelf_life_warning(item, offer, config).severity


__all__ = [
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
