"""Unit Price - canonical unit conversion and price normalization

Public API for converting purchase amounts to canonical units, comparing
offers by price per canonical unit, and flagging large purchases of
perishable items.

Usage:
    from unitprice import get_conversion_factor, validate_and_convert
    from unitprice import compute_price_metrics, analyze_shelf_life_warning

    # Conversion factors
    factor = get_conversion_factor("kg", "g")  # Returns: 1000.0

    # Normalize an amount for an item's dimension
    result = validate_and_convert(1, "kg", "mass")  # canonical_amount=1000.0, canonical_unit='g'

    # Per-canonical-unit prices for an offer
    metrics = compute_price_metrics(offer, item)  # price_per_canonical_incl_shipping=0.025

    # Shelf-life warnings
    warning = analyze_shelf_life_warning(item, 15)  # severity='high'
"""

__version__ = "0.0.1"

# ============================================================================
# Records
# ============================================================================

from .models import InventoryItem, Offer

# ============================================================================
# Unit Conversion API
# ============================================================================
# Primary interface: unitprice.units.unitapi
# Implementation: unitprice.units.unitresolver (internal)

from .units.unitapi import (
    load_resolver,                       # Shared resolver over the packaged table
    get_canonical_unit,                  # Canonical unit of a dimension
    get_unit_dimension,                  # Dimension of a unit symbol
    is_supported_unit,
    are_units_compatible,
    get_conversion_factor,               # Direct or composed via canonical unit
    get_supported_units_for_dimension,
    get_supported_dimensions,
    list_units,                          # DataFrame of units and factors
    clear_cache,                         # Drop cached table and resolver
    match_unit,                          # Fuzzy suggestions for typed units
)
from .units.unitresolver import UnitResolver, UnknownDimensionError

# ============================================================================
# Price Normalization API
# ============================================================================

from .pricing.pricenormalize import (
    validate_and_convert,        # Amount + unit -> canonical amount
    convert_amount,
    calculate_normalized_price,
    batch_convert_to_canonical,
    batch_convert_frame,
)
from .pricing.pricemetrics import (
    compute_price_metrics,          # Four stored per-canonical prices
    calculate_price_per_canonical,  # Comparison price with confidence and flags
    compare_price_results,
)

# ============================================================================
# Shelf-Life API
# ============================================================================

from .shelflife import (
    ShelfLifeWarningConfig,
    make_shelf_life_config,
    load_shelf_life_config,
    analyze_shelf_life_warning,
    get_warning_threshold,
)


__all__ = [
    "__version__",
    "InventoryItem",
    "Offer",
    "load_resolver",
    "get_canonical_unit",
    "get_unit_dimension",
    "is_supported_unit",
    "are_units_compatible",
    "get_conversion_factor",
    "get_supported_units_for_dimension",
    "get_supported_dimensions",
    "list_units",
    "match_unit",
    "UnitResolver",
    "UnknownDimensionError",
    "validate_and_convert",
    "convert_amount",
    "calculate_normalized_price",
    "batch_convert_to_canonical",
    "batch_convert_frame",
    "compute_price_metrics",
    "calculate_price_per_canonical",
    "compare_price_results",
    "ShelfLifeWarningConfig",
    "make_shelf_life_config",
    "load_shelf_life_config",
    "analyze_shelf_life_warning",
    "get_warning_threshold",
    "clear_cache",
]
