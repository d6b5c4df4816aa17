"""Pricing module: canonical amounts and comparable prices.

Public API:
    validate_and_convert(amount, unit, expected_dimension) -> NormalizationResult
    convert_amount(amount, from_unit, to_unit) -> float | None
    calculate_normalized_price(total_price, amount, unit, dimension) -> float | None
    batch_convert_to_canonical(requests) -> list[ConversionResult]
    compute_price_metrics(offer, item) -> PriceMetrics
    calculate_price_per_canonical(offer, item) -> PriceCalculationResult

Examples:
    >>> from unitprice.pricing import validate_and_convert
    >>> validate_and_convert(1, "kg", "mass").canonical_amount
    1000.0
"""

from .pricenormalize import (
    NormalizationResult,
    ConversionRequest,
    ConversionResult,
    convert_amount,
    convert_to_canonical,
    validate_and_convert,
    calculate_normalized_price,
    batch_convert_to_canonical,
    batch_convert_frame,
    format_amount,
)
from .pricemetrics import (
    PriceMetrics,
    total_with_shipping,
    compute_price_metrics,
    PriceBreakdown,
    PriceCalculationResult,
    PriceValidation,
    validate_price_inputs,
    calculate_price_per_canonical,
    calculate_prices_for_offers,
    filter_offers_by_calculation,
    compare_price_results,
    format_price_result,
)

__all__ = [
    "NormalizationResult",
    "ConversionRequest",
    "ConversionResult",
    "convert_amount",
    "convert_to_canonical",
    "validate_and_convert",
    "calculate_normalized_price",
    "batch_convert_to_canonical",
    "batch_convert_frame",
    "format_amount",
    "PriceMetrics",
    "total_with_shipping",
    "compute_price_metrics",
    "PriceBreakdown",
    "PriceCalculationResult",
    "PriceValidation",
    "validate_price_inputs",
    "calculate_price_per_canonical",
    "calculate_prices_for_offers",
    "filter_offers_by_calculation",
    "compare_price_results",
    "format_price_result",
]
