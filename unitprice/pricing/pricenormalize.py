"""Amount normalization to canonical units.

Turns a raw (amount, unit, expected dimension) triple into an amount in the
dimension's canonical unit, and offers into comparable per-canonical-unit
prices.

Key Principles:
1. Failures are returned as results, never raised
2. Validation stops at the first failure; no partial results
3. A missing conversion path is a failure, never a guess
"""

import logging
import math
import numbers
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Tuple

import pandas as pd

from unitprice.units.unitapi import load_resolver
from unitprice.units.unitdata import validate_unit_symbol
from unitprice.units.unitresolver import UnitResolver, UnknownDimensionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NormalizationResult:
    """Outcome of validate_and_convert."""

    is_valid: bool
    canonical_amount: Optional[float] = None
    canonical_unit: Optional[str] = None
    error_message: Optional[str] = None


@dataclass(frozen=True)
class ConversionRequest:
    amount: Any
    unit: str
    dimension: str
    id: Optional[str] = None


@dataclass(frozen=True)
class ConversionResult:
    id: Optional[str]
    success: bool
    canonical_amount: Optional[float] = None
    canonical_unit: Optional[str] = None
    error_message: Optional[str] = None


def _resolver(resolver: Optional[UnitResolver]) -> UnitResolver:
    return resolver if resolver is not None else load_resolver()


def _is_finite_non_negative(amount: Any) -> bool:
    if isinstance(amount, bool) or not isinstance(amount, numbers.Real):
        return False
    return math.isfinite(amount) and amount >= 0


def convert_amount(
    amount: float,
    from_unit: str,
    to_unit: str,
    *,
    resolver: Optional[UnitResolver] = None,
) -> Optional[float]:
    """Convert an amount between units, or None if no conversion path exists.

    Examples:
        >>> convert_amount(2, "lb", "g")
        907.184
        >>> convert_amount(1, "kg", "ml") is None
        True
    """
    factor = _resolver(resolver).get_conversion_factor(from_unit, to_unit)
    if factor is None:
        return None
    return amount * factor


def convert_to_canonical(
    amount: float,
    unit: str,
    dimension: str,
    *,
    resolver: Optional[UnitResolver] = None,
) -> Optional[Tuple[float, str]]:
    """Convert an amount to its dimension's canonical unit.

    Returns:
        (canonical_amount, canonical_unit), or None when the unit does not
        belong to ``dimension`` or no conversion path exists.
    """
    r = _resolver(resolver)
    if r.get_unit_dimension(unit) != dimension:
        return None

    try:
        canonical_unit = r.get_canonical_unit(dimension)
    except UnknownDimensionError:
        return None

    canonical_amount = convert_amount(amount, unit, canonical_unit, resolver=r)
    if canonical_amount is None:
        return None
    return canonical_amount, canonical_unit


def validate_and_convert(
    amount: Any,
    unit: Any,
    expected_dimension: str,
    *,
    resolver: Optional[UnitResolver] = None,
) -> NormalizationResult:
    """Validate an amount/unit pair and convert it to the canonical unit.

    Checks, in order (first failure wins):
      1. amount is a finite number >= 0
      2. unit is a non-empty symbol of at most 20 characters
      3. unit is supported by the conversion table
      4. unit's dimension equals ``expected_dimension``
      5. a conversion path to the canonical unit exists

    A zero amount passes; callers dividing by the canonical amount must
    guard against it.

    Examples:
        >>> validate_and_convert(1, "kg", "mass")
        NormalizationResult(is_valid=True, canonical_amount=1000.0,
                            canonical_unit='g', error_message=None)

        >>> validate_and_convert(1, "xyz", "mass").error_message
        'Unsupported unit: xyz'
    """
    if not _is_finite_non_negative(amount):
        return NormalizationResult(
            is_valid=False,
            error_message="Amount must be a positive finite number",
        )

    if validate_unit_symbol(unit) is not None:
        return NormalizationResult(
            is_valid=False,
            error_message="Unit must be a non-empty string of at most 20 characters",
        )

    r = _resolver(resolver)
    if not r.is_supported_unit(unit):
        return NormalizationResult(
            is_valid=False,
            error_message=f"Unsupported unit: {unit}",
        )

    unit_dimension = r.get_unit_dimension(unit)
    if unit_dimension != expected_dimension:
        return NormalizationResult(
            is_valid=False,
            error_message=(
                f"Unit {unit} ({unit_dimension}) does not match "
                f"expected dimension {expected_dimension}"
            ),
        )

    canonical = convert_to_canonical(amount, unit, expected_dimension, resolver=r)
    if canonical is None:
        logger.debug(f"No conversion path from {unit} to canonical {expected_dimension} unit")
        return NormalizationResult(
            is_valid=False,
            error_message=f"Failed to convert {amount} {unit} to canonical unit",
        )

    canonical_amount, canonical_unit = canonical
    return NormalizationResult(
        is_valid=True,
        canonical_amount=canonical_amount,
        canonical_unit=canonical_unit,
    )


def calculate_normalized_price(
    total_price: float,
    amount: Any,
    unit: Any,
    dimension: str,
    *,
    resolver: Optional[UnitResolver] = None,
) -> Optional[float]:
    """Price per canonical unit, or None if the amount cannot be normalized.

    A zero canonical amount also yields None rather than dividing by zero.

    Examples:
        >>> calculate_normalized_price(20.0, 1, "kg", "mass")
        0.02
    """
    result = validate_and_convert(amount, unit, dimension, resolver=resolver)
    if not result.is_valid or not result.canonical_amount:
        return None
    return total_price / result.canonical_amount


def batch_convert_to_canonical(
    requests: Iterable[ConversionRequest],
    *,
    resolver: Optional[UnitResolver] = None,
) -> List[ConversionResult]:
    """Normalize many requests; each fails or succeeds independently.

    Results are returned in request order and carry the request ``id``.
    """
    r = _resolver(resolver)
    results = []
    for request in requests:
        validation = validate_and_convert(request.amount, request.unit, request.dimension, resolver=r)
        results.append(ConversionResult(
            id=request.id,
            success=validation.is_valid,
            canonical_amount=validation.canonical_amount,
            canonical_unit=validation.canonical_unit,
            error_message=validation.error_message,
        ))
    return results


def batch_convert_frame(
    df: pd.DataFrame,
    *,
    amount_col: str = "amount",
    unit_col: str = "unit",
    dimension_col: str = "dimension",
    resolver: Optional[UnitResolver] = None,
) -> pd.DataFrame:
    """Tabular batch mode over a DataFrame of requests.

    Returns:
        Copy of ``df`` with success, canonical_amount, canonical_unit and
        error_message columns appended (row order and index preserved).

    Raises:
        ValueError: If a required column is missing.
    """
    missing = [col for col in (amount_col, unit_col, dimension_col) if col not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")

    requests = [
        ConversionRequest(amount=amount, unit=unit, dimension=dimension)
        for amount, unit, dimension in zip(df[amount_col], df[unit_col], df[dimension_col])
    ]
    results = batch_convert_to_canonical(requests, resolver=resolver)

    out = df.copy()
    out["success"] = [res.success for res in results]
    out["canonical_amount"] = [res.canonical_amount for res in results]
    out["canonical_unit"] = [res.canonical_unit for res in results]
    out["error_message"] = [res.error_message for res in results]
    return out


def format_amount(amount: float, unit: str, decimals: int = 2) -> str:
    """Render an amount for display.

    Examples:
        >>> format_amount(1000, "g")
        '1000.00 g'
    """
    return f"{amount:.{decimals}f} {unit}"


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
]
