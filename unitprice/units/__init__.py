"""Units module: conversion table, canonical units and conversion factors.

Public API:
    get_canonical_unit(dimension) -> str
        Canonical unit of a dimension (raises UnknownDimensionError)

    get_unit_dimension(unit) -> str | None
    is_supported_unit(unit) -> bool
    are_units_compatible(a, b) -> bool

    get_conversion_factor(from_unit, to_unit) -> float | None
        Direct factor, or composed via the dimension's canonical unit

    list_units(dimension=None) -> DataFrame
    match_unit(text, k=5) -> list[dict]

Key Principles:
1. The conversion table is static data, loaded once and never mutated
2. Canonical units are derived from the table, with a deterministic tie-break
3. A missing conversion path is reported as None, never guessed

Examples:
    >>> from unitprice.units import get_canonical_unit, get_conversion_factor
    >>> get_canonical_unit("mass")
    'g'
    >>> get_conversion_factor("dozen", "unit")
    12.0
"""

from .unitdata import (
    DIMENSIONS,
    ConversionEdge,
    load_conversion_table,
)
from .unitresolver import (
    UnknownDimensionError,
    CanonicalConflict,
    ResolutionReport,
    UnitResolver,
)
from .unitapi import (
    load_resolver,
    clear_cache,
    get_canonical_unit,
    get_unit_dimension,
    is_supported_unit,
    are_units_compatible,
    get_conversion_factor,
    get_supported_units_for_dimension,
    get_supported_dimensions,
    list_units,
    match_unit,
)

__all__ = [
    "DIMENSIONS",
    "ConversionEdge",
    "load_conversion_table",
    "UnknownDimensionError",
    "CanonicalConflict",
    "ResolutionReport",
    "UnitResolver",
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
