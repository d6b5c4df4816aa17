"""Unit resolution over a conversion table.

Builds three lookup structures from the conversion edges, once, and then
freezes them:

  - unit -> dimension (last edge touching a from_unit wins)
  - (from_unit, to_unit) -> direct factor
  - dimension -> canonical unit

Canonical units are derived from edge targets. When a dimension's edges
nominate more than one target, the lexicographically smallest symbol wins.
The outcome depends only on the set of targets, never on edge order, and each
conflict is recorded in the resolver's ResolutionReport as well as logged.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from unitprice.units.unitdata import ConversionEdge

logger = logging.getLogger(__name__)


class UnknownDimensionError(LookupError):
    """No conversion edge ever nominated a canonical unit for the dimension."""

    def __init__(self, dimension):
        self.dimension = dimension
        super().__init__(f"No canonical unit defined for dimension: {dimension}")


@dataclass(frozen=True)
class CanonicalConflict:
    """Two edges of one dimension nominated different canonical units."""

    dimension: str
    existing_unit: str
    candidate_unit: str
    chosen_unit: str

    def describe(self) -> str:
        return (
            f"Canonical unit conflict for dimension '{self.dimension}': "
            f"choosing '{self.chosen_unit}' between '{self.existing_unit}' "
            f"and '{self.candidate_unit}'"
        )


@dataclass(frozen=True)
class ResolutionReport:
    """Outcome of canonical unit resolution for a table."""

    canonical_units: Mapping[str, str] = field(default_factory=dict)
    conflicts: Tuple[CanonicalConflict, ...] = ()

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)

    def conflicts_for(self, dimension: str) -> List[CanonicalConflict]:
        return [c for c in self.conflicts if c.dimension == dimension]


class UnitResolver:
    """Frozen lookup tables for unit dimensions, factors and canonical units.

    Instances are immutable after construction and safe to share between
    threads. Build one with ``UnitResolver.from_edges``.

    Examples:
        >>> resolver = UnitResolver.from_edges(load_conversion_table())
        >>> resolver.get_canonical_unit("mass")
        'g'
        >>> resolver.get_conversion_factor("kg", "lb")
        2.2046244201...
    """

    def __init__(
        self,
        unit_dimension: Mapping[str, str],
        conversion_factors: Mapping[Tuple[str, str], float],
        canonical_units: Mapping[str, str],
        report: Optional[ResolutionReport] = None,
    ):
        self._unit_dimension = MappingProxyType(dict(unit_dimension))
        self._conversion_factors = MappingProxyType(dict(conversion_factors))
        self._canonical_units = MappingProxyType(dict(canonical_units))
        self._report = report or ResolutionReport(canonical_units=self._canonical_units)

    @classmethod
    def from_edges(cls, edges: Iterable[ConversionEdge]) -> "UnitResolver":
        """Scan the edges once and build the lookup structures."""
        unit_dimension: Dict[str, str] = {}
        conversion_factors: Dict[Tuple[str, str], float] = {}
        canonical_units: Dict[str, str] = {}
        conflicts: List[CanonicalConflict] = []

        for edge in edges:
            conversion_factors[(edge.from_unit, edge.to_unit)] = edge.factor
            unit_dimension[edge.from_unit] = edge.dimension

            existing = canonical_units.get(edge.dimension)
            if existing is None:
                canonical_units[edge.dimension] = edge.to_unit
            elif existing != edge.to_unit:
                chosen = min(existing, edge.to_unit)
                conflict = CanonicalConflict(
                    dimension=edge.dimension,
                    existing_unit=existing,
                    candidate_unit=edge.to_unit,
                    chosen_unit=chosen,
                )
                conflicts.append(conflict)
                logger.warning(conflict.describe())
                canonical_units[edge.dimension] = chosen

        report = ResolutionReport(
            canonical_units=MappingProxyType(dict(canonical_units)),
            conflicts=tuple(conflicts),
        )
        return cls(unit_dimension, conversion_factors, canonical_units, report)

    # ---- Read-only views ----

    @property
    def unit_dimension(self) -> Mapping[str, str]:
        return self._unit_dimension

    @property
    def conversion_factors(self) -> Mapping[Tuple[str, str], float]:
        return self._conversion_factors

    @property
    def canonical_units(self) -> Mapping[str, str]:
        return self._canonical_units

    @property
    def report(self) -> ResolutionReport:
        return self._report

    # ---- Lookups ----

    def get_canonical_unit(self, dimension: str) -> str:
        """Canonical unit of a dimension.

        Raises:
            UnknownDimensionError: If no edge nominated a canonical unit.
        """
        canonical = self._canonical_units.get(dimension)
        if canonical is None:
            raise UnknownDimensionError(dimension)
        return canonical

    def get_unit_dimension(self, unit: str) -> Optional[str]:
        return self._unit_dimension.get(unit)

    def is_supported_unit(self, unit: str) -> bool:
        return unit in self._unit_dimension

    def are_units_compatible(self, from_unit: str, to_unit: str) -> bool:
        """True iff both units are known and share a dimension."""
        from_dimension = self._unit_dimension.get(from_unit)
        to_dimension = self._unit_dimension.get(to_unit)
        return from_dimension is not None and from_dimension == to_dimension

    def get_conversion_factor(self, from_unit: str, to_unit: str) -> Optional[float]:
        """Factor f such that 1 from_unit = f to_unit, or None if no path exists.

        Resolution order:
          1. Same unit -> 1.0
          2. Direct edge (from_unit, to_unit)
          3. Via the shared canonical unit: factor(from -> canonical) times
             factor(canonical -> to), where the second leg falls back to the
             reciprocal of factor(to -> canonical)
        Units of different (or unknown) dimensions never convert.
        """
        if from_unit == to_unit:
            return 1.0

        direct = self._conversion_factors.get((from_unit, to_unit))
        if direct is not None:
            return direct

        from_dimension = self._unit_dimension.get(from_unit)
        to_dimension = self._unit_dimension.get(to_unit)
        if from_dimension is None or from_dimension != to_dimension:
            return None

        canonical = self._canonical_units.get(from_dimension)
        if canonical is None:
            return None

        to_canonical = self._conversion_factors.get((from_unit, canonical))
        from_canonical = self._conversion_factors.get((canonical, to_unit))
        if from_canonical is None:
            reverse = self._conversion_factors.get((to_unit, canonical))
            if reverse is not None and reverse != 0:
                from_canonical = 1.0 / reverse

        if to_canonical is None or from_canonical is None:
            return None

        return to_canonical * from_canonical

    def get_supported_units_for_dimension(self, dimension: str) -> List[str]:
        """Sorted unit symbols belonging to a dimension."""
        return sorted(unit for unit, dim in self._unit_dimension.items() if dim == dimension)

    def get_supported_dimensions(self) -> List[str]:
        """Dimensions that have a canonical unit, in first-seen order."""
        return list(self._canonical_units)


__all__ = [
    "UnknownDimensionError",
    "CanonicalConflict",
    "ResolutionReport",
    "UnitResolver",
]
