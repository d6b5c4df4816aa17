"""Per-canonical-unit price metrics for offers.

Two layers:

  - compute_price_metrics: the four figures stored with every offer
    (excluding shipping, total with shipping, including shipping, effective)
  - calculate_price_per_canonical: a single comparison figure with a cost
    breakdown, a confidence score and flags, used to rank offers

All figures are recomputed from the offer on every call. Effective price is
the price including shipping; taxes and quality ratings do not weight it.
"""

import logging
import math
import numbers
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from unitprice.models import InventoryItem, Offer
from unitprice.pricing.pricenormalize import validate_and_convert
from unitprice.units.unitresolver import UnitResolver

logger = logging.getLogger(__name__)

HIGH_QUALITY_RATING = 4
UNKNOWN_SHIPPING_PENALTY = 0.2
EXCLUDED_SHIPPING_PENALTY = 0.1


def _is_finite_number(value: Any) -> bool:
    return (
        not isinstance(value, bool)
        and isinstance(value, numbers.Real)
        and math.isfinite(value)
    )


def _known_shipping(offer: Offer) -> bool:
    return _is_finite_number(offer.shipping_cost) and offer.shipping_cost >= 0


# ============================================================================
# Offer price metrics
# ============================================================================

@dataclass(frozen=True)
class PriceMetrics:
    """Comparable price figures for one offer."""

    is_valid: bool
    canonical_amount: Optional[float] = None
    canonical_unit: Optional[str] = None
    price_per_canonical_excl_shipping: Optional[float] = None
    total_with_shipping: Optional[float] = None
    price_per_canonical_incl_shipping: Optional[float] = None
    effective_price_per_canonical: Optional[float] = None
    error_message: Optional[str] = None


def total_with_shipping(offer: Offer) -> float:
    """Total price plus shipping, unless shipping is already included.

    A missing, negative or non-finite shipping cost counts as 0.
    """
    if offer.shipping_included or not _known_shipping(offer):
        return offer.total_price
    return offer.total_price + offer.shipping_cost


def compute_price_metrics(
    offer: Offer,
    item: InventoryItem,
    *,
    resolver: Optional[UnitResolver] = None,
) -> PriceMetrics:
    """Compute the per-canonical-unit prices of an offer for its item.

    Examples:
        >>> item = InventoryItem("rice", "Rice", "mass", "g")
        >>> offer = Offer(amount=1, amount_unit="kg", total_price=20.0, shipping_cost=5.0)
        >>> m = compute_price_metrics(offer, item)
        >>> m.price_per_canonical_excl_shipping, m.price_per_canonical_incl_shipping
        (0.02, 0.025)
    """
    validation = validate_and_convert(
        offer.amount, offer.amount_unit, item.canonical_dimension, resolver=resolver
    )
    if not validation.is_valid:
        return PriceMetrics(is_valid=False, error_message=validation.error_message)

    if not _is_finite_number(offer.total_price):
        return PriceMetrics(is_valid=False, error_message="Offer total price must be a finite number")

    canonical_amount = validation.canonical_amount
    if canonical_amount == 0:
        return PriceMetrics(
            is_valid=False,
            canonical_amount=canonical_amount,
            canonical_unit=validation.canonical_unit,
            error_message="Amount must be greater than zero to compute a price per unit",
        )

    if validation.canonical_unit != item.canonical_unit:
        logger.debug(
            f"Item {item.id} canonical unit {item.canonical_unit} differs from "
            f"resolved canonical unit {validation.canonical_unit}"
        )

    with_shipping = total_with_shipping(offer)
    excl = offer.total_price / canonical_amount
    incl = with_shipping / canonical_amount

    return PriceMetrics(
        is_valid=True,
        canonical_amount=canonical_amount,
        canonical_unit=validation.canonical_unit,
        price_per_canonical_excl_shipping=excl,
        total_with_shipping=with_shipping,
        price_per_canonical_incl_shipping=incl,
        effective_price_per_canonical=incl,
    )


# ============================================================================
# Comparison calculations
# ============================================================================

@dataclass(frozen=True)
class PriceBreakdown:
    base_price: float
    shipping_cost: float
    total_cost: float
    canonical_amount: float
    price_per_canonical: float


@dataclass(frozen=True)
class PriceCalculationResult:
    """A single comparable price with its provenance."""

    success: bool
    price_per_canonical: Optional[float] = None
    error_message: Optional[str] = None
    confidence: float = 0.0
    breakdown: Optional[PriceBreakdown] = None
    flags: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PriceValidation:
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def validate_price_inputs(
    offer: Optional[Offer],
    item: Optional[InventoryItem],
    *,
    resolver: Optional[UnitResolver] = None,
) -> PriceValidation:
    """Check an offer/item pair before computing a comparison price.

    Errors make the calculation fail; warnings (e.g. a malformed shipping
    cost, which is then ignored) do not.
    """
    errors: List[str] = []
    warnings: List[str] = []

    if offer is None:
        return PriceValidation(False, ["Offer is required"], warnings)

    if not _is_finite_number(offer.total_price) or offer.total_price <= 0:
        errors.append("Offer total price must be a positive finite number")

    if not _is_finite_number(offer.amount) or offer.amount <= 0:
        errors.append("Offer amount must be a positive finite number")

    if not isinstance(offer.amount_unit, str) or not offer.amount_unit.strip():
        errors.append("Offer amount unit is required")

    if item is None:
        errors.append("Inventory item is required")
        return PriceValidation(False, errors, warnings)

    if not item.canonical_dimension:
        errors.append("Inventory item canonical dimension is required")

    if not errors:
        conversion = validate_and_convert(
            offer.amount, offer.amount_unit, item.canonical_dimension, resolver=resolver
        )
        if not conversion.is_valid:
            errors.append(f"Unit conversion failed: {conversion.error_message}")

    if offer.shipping_cost is not None and (
        not _is_finite_number(offer.shipping_cost) or offer.shipping_cost < 0
    ):
        warnings.append("Shipping cost is not a valid positive number")

    return PriceValidation(not errors, errors, warnings)


def _failure(message: str, flag: str) -> PriceCalculationResult:
    return PriceCalculationResult(success=False, error_message=message, flags=(flag,))


def calculate_price_per_canonical(
    offer: Offer,
    item: InventoryItem,
    *,
    include_shipping: bool = True,
    apply_equivalence_factor: bool = True,
    resolver: Optional[UnitResolver] = None,
) -> PriceCalculationResult:
    """Comparable price per canonical unit with breakdown and confidence.

    Confidence starts at 1.0. With shipping included in the calculation, an
    offer whose shipping is neither included nor known loses 0.2 and is
    flagged ``shipping-unknown``. Without shipping, a missing shipping cost
    costs 0.1. An item equivalence factor scales the final price.

    Flags: shipping-included, shipping-excluded, shipping-unknown,
    high-quality, validation-failed, conversion-failed.
    """
    validation = validate_price_inputs(offer, item, resolver=resolver)
    if not validation.is_valid:
        return _failure("; ".join(validation.errors), "validation-failed")

    conversion = validate_and_convert(
        offer.amount, offer.amount_unit, item.canonical_dimension, resolver=resolver
    )
    if not conversion.is_valid or not conversion.canonical_amount:
        return _failure(f"Unit conversion failed: {conversion.error_message}", "conversion-failed")

    canonical_amount = conversion.canonical_amount
    base_price = offer.total_price
    shipping_known = _known_shipping(offer)

    shipping_cost = 0.0
    if include_shipping and not offer.shipping_included and shipping_known:
        shipping_cost = float(offer.shipping_cost)

    total_cost = base_price + shipping_cost
    price = total_cost / canonical_amount

    if apply_equivalence_factor and item.equivalence_factor:
        price = price * item.equivalence_factor

    confidence = 1.0
    flags: List[str] = []

    if include_shipping:
        if offer.shipping_included:
            flags.append("shipping-included")
        elif not shipping_known:
            confidence -= UNKNOWN_SHIPPING_PENALTY
            flags.append("shipping-unknown")
    else:
        if not offer.shipping_included:
            flags.append("shipping-excluded")
        if offer.shipping_cost is None:
            confidence -= EXCLUDED_SHIPPING_PENALTY

    if offer.quality_rating is not None and offer.quality_rating >= HIGH_QUALITY_RATING:
        flags.append("high-quality")

    return PriceCalculationResult(
        success=True,
        price_per_canonical=price,
        confidence=max(0.0, confidence),
        breakdown=PriceBreakdown(
            base_price=base_price,
            shipping_cost=shipping_cost,
            total_cost=total_cost,
            canonical_amount=canonical_amount,
            price_per_canonical=price,
        ),
        flags=tuple(flags),
    )


def _offer_key(offer: Offer, index: int) -> str:
    return offer.id if offer.id is not None else str(index)


def calculate_prices_for_offers(
    offers: Iterable[Offer],
    item: InventoryItem,
    **options,
) -> Dict[str, PriceCalculationResult]:
    """Comparison prices keyed by offer id (position when an offer has none)."""
    return {
        _offer_key(offer, i): calculate_price_per_canonical(offer, item, **options)
        for i, offer in enumerate(offers)
    }


def filter_offers_by_calculation(
    offers: Iterable[Offer],
    item: InventoryItem,
    *,
    min_confidence: float = 0.5,
    **options,
) -> Tuple[List[Offer], List[Tuple[Offer, PriceCalculationResult]]]:
    """Split offers into comparable ones and (offer, failed result) pairs."""
    valid: List[Offer] = []
    invalid: List[Tuple[Offer, PriceCalculationResult]] = []

    for offer in offers:
        result = calculate_price_per_canonical(offer, item, **options)
        if result.success and result.confidence >= min_confidence:
            valid.append(offer)
        else:
            invalid.append((offer, result))

    return valid, invalid


def compare_price_results(
    first: PriceCalculationResult,
    second: PriceCalculationResult,
) -> dict:
    """Pick the cheaper of two successful results.

    Returns:
        Dict with better, worse, difference and percentage_difference
        (relative to the cheaper price; inf when that price is 0).

    Raises:
        ValueError: If either result is unsuccessful.
    """
    if not (first.success and second.success):
        raise ValueError("Only successful price calculations can be compared")

    if first.price_per_canonical < second.price_per_canonical:
        better, worse = first, second
    else:
        better, worse = second, first

    difference = worse.price_per_canonical - better.price_per_canonical
    if better.price_per_canonical == 0:
        percentage = math.inf if difference > 0 else 0.0
    else:
        percentage = difference / better.price_per_canonical * 100

    return {
        "better": better,
        "worse": worse,
        "difference": difference,
        "percentage_difference": percentage,
    }


def format_price_result(result: PriceCalculationResult) -> str:
    """One-line rendering, e.g. '0.0250 (confidence: 100.0%, shipping-included)'."""
    if not result.success:
        return f"Error: {result.error_message}"

    flags = f", {', '.join(result.flags)}" if result.flags else ""
    return f"{result.price_per_canonical:.4f} (confidence: {result.confidence * 100:.1f}%{flags})"


__all__ = [
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
