"""Public API for unit lookups and conversion factors.

Module-level functions bound to a default UnitResolver built from the
packaged conversion table. Every function accepts an optional ``resolver``
keyword so callers (and tests) can inject a resolver built from another
table instead of relying on the shared default.
"""

import logging
import threading
from pathlib import Path
from typing import List, Optional, Union

import pandas as pd

from unitprice.units import unitdata
from unitprice.units.unitdata import load_conversion_table
from unitprice.units.unitresolver import UnitResolver
from unitprice.utils.normalize import normalize_unit_text
from unitprice.utils.resolver import topk_matches

logger = logging.getLogger(__name__)

_RESOLVER_LOCK = threading.Lock()
_default_resolver: Optional[UnitResolver] = None


def load_resolver(path: Optional[Union[str, Path]] = None) -> UnitResolver:
    """Return the shared resolver, building it on first use.

    The one-time build is serialized by a lock; once built, reads take no
    lock. Passing ``path`` builds a fresh resolver from that table without
    touching the shared one.

    Examples:
        >>> load_resolver().get_canonical_unit("volume")
        'ml'
    """
    global _default_resolver

    if path is not None:
        return UnitResolver.from_edges(load_conversion_table(path))

    resolver = _default_resolver
    if resolver is not None:
        return resolver

    with _RESOLVER_LOCK:
        if _default_resolver is None:
            _default_resolver = UnitResolver.from_edges(load_conversion_table())
            logger.info(
                f"Built unit resolver for dimensions: "
                f"{', '.join(_default_resolver.get_supported_dimensions())}"
            )
        return _default_resolver


def clear_cache():
    """Drop the shared resolver and the cached conversion table."""
    global _default_resolver

    with _RESOLVER_LOCK:
        _default_resolver = None
    unitdata.clear_cache()
    logger.info("Cleared unit resolver cache")


def _resolver(resolver: Optional[UnitResolver]) -> UnitResolver:
    return resolver if resolver is not None else load_resolver()


def get_canonical_unit(dimension: str, *, resolver: Optional[UnitResolver] = None) -> str:
    """Canonical unit for a dimension.

    Raises:
        UnknownDimensionError: If the table never nominated one.

    Examples:
        >>> get_canonical_unit("mass")
        'g'
    """
    return _resolver(resolver).get_canonical_unit(dimension)


def get_unit_dimension(unit: str, *, resolver: Optional[UnitResolver] = None) -> Optional[str]:
    """Dimension of a unit, or None if the unit is unknown.

    Examples:
        >>> get_unit_dimension("dozen")
        'count'
    """
    return _resolver(resolver).get_unit_dimension(unit)


def is_supported_unit(unit: str, *, resolver: Optional[UnitResolver] = None) -> bool:
    return _resolver(resolver).is_supported_unit(unit)


def are_units_compatible(
    from_unit: str,
    to_unit: str,
    *,
    resolver: Optional[UnitResolver] = None,
) -> bool:
    return _resolver(resolver).are_units_compatible(from_unit, to_unit)


def get_conversion_factor(
    from_unit: str,
    to_unit: str,
    *,
    resolver: Optional[UnitResolver] = None,
) -> Optional[float]:
    """Factor f such that 1 from_unit = f to_unit, or None when no path exists.

    Examples:
        >>> get_conversion_factor("kg", "g")
        1000.0
        >>> get_conversion_factor("kg", "ml") is None
        True
    """
    return _resolver(resolver).get_conversion_factor(from_unit, to_unit)


def get_supported_units_for_dimension(
    dimension: str,
    *,
    resolver: Optional[UnitResolver] = None,
) -> List[str]:
    return _resolver(resolver).get_supported_units_for_dimension(dimension)


def get_supported_dimensions(*, resolver: Optional[UnitResolver] = None) -> List[str]:
    return _resolver(resolver).get_supported_dimensions()


def list_units(
    dimension: Optional[str] = None,
    *,
    resolver: Optional[UnitResolver] = None,
) -> pd.DataFrame:
    """List supported units with their canonical conversion.

    Args:
        dimension: Optional dimension filter (e.g., "mass")

    Returns:
        DataFrame with columns unit, dimension, factor_to_canonical,
        canonical_unit, is_canonical; sorted by dimension then unit.
        factor_to_canonical is NaN where the table has no path.

    Examples:
        >>> list_units("count")[["unit", "factor_to_canonical"]].head(2).values
        array([['box', 1.0], ['cap', 1.0]], dtype=object)
    """
    r = _resolver(resolver)

    rows = []
    for unit, unit_dim in r.unit_dimension.items():
        if dimension is not None and unit_dim != dimension:
            continue
        canonical = r.canonical_units.get(unit_dim)
        factor = r.get_conversion_factor(unit, canonical) if canonical is not None else None
        rows.append({
            "unit": unit,
            "dimension": unit_dim,
            "factor_to_canonical": float("nan") if factor is None else factor,
            "canonical_unit": canonical,
            "is_canonical": unit == canonical,
        })

    df = pd.DataFrame(
        rows,
        columns=["unit", "dimension", "factor_to_canonical", "canonical_unit", "is_canonical"],
    )
    return df.sort_values(["dimension", "unit"]).reset_index(drop=True)


def match_unit(
    text: str,
    *,
    k: int = 5,
    dimension: Optional[str] = None,
    resolver: Optional[UnitResolver] = None,
) -> List[dict]:
    """Top-K supported units resembling ``text`` (for review UIs).

    Scores come from RapidFuzz WRatio on case-folded symbols. This is a
    suggestion list only: nothing is converted, and the caller must choose a
    unit explicitly.

    Args:
        text: Unit text as typed by the user
        k: Number of candidates to return. Default 5.
        dimension: Optional dimension filter

    Returns:
        List of dicts with unit, dimension, canonical_unit and score (0-100),
        ordered by descending score.

    Examples:
        >>> match_unit("litres", k=1)[0]["dimension"]
        'volume'
    """
    r = _resolver(resolver)
    query_norm = normalize_unit_text(text)
    if not query_norm:
        return []

    candidates = [
        unit for unit, unit_dim in r.unit_dimension.items()
        if dimension is None or unit_dim == dimension
    ]
    results = topk_matches(candidates, query_norm, normalize_unit_text, k=k)

    return [
        {
            "unit": unit,
            "dimension": r.unit_dimension[unit],
            "canonical_unit": r.canonical_units.get(r.unit_dimension[unit]),
            "score": score,
        }
        for unit, score in results
    ]


__all__ = [
    "load_resolver",
    "clear_cache",
    "get_canonical_unit",
    "get_unit_dimension",
    "is_supported_unit",
    "are_units_compatible",
    "get_conversion_factor",
    "get_supported_units_for_dimension",
    "get_supported_dimensions",
    "list_units",
    "match_unit",
]
