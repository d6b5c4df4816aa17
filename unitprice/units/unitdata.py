"""Static conversion table for canonical units.

The table is an ordered list of directed conversion edges
``(from_unit, to_unit, factor, dimension)`` meaning ``1 from_unit = factor
to_unit``. It is loaded once per source and never mutated; the unit resolver
derives its lookup structures from it.

Loading priority:
    1. Explicit path argument
    2. UNITPRICE_CONVERSIONS_PATH environment variable
    3. Compiled units/data/conversions.parquet (see data/build_units.py)
    4. Authored units/data/conversions.yaml (shipped with the package)
"""

import logging
import math
import numbers
import os
from dataclasses import asdict, dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterable, List, Optional, Tuple, Union

import pandas as pd

from unitprice.utils.dataloader import (
    find_data_file,
    format_not_found_error,
    load_frame,
    load_yaml_file,
)

logger = logging.getLogger(__name__)

DIMENSIONS: Tuple[str, ...] = ("mass", "volume", "count", "length", "area")
MAX_UNIT_LENGTH = 20
CONVERSIONS_PATH_ENV = "UNITPRICE_CONVERSIONS_PATH"
EDGE_COLUMNS = ["from_unit", "to_unit", "factor", "dimension"]


@dataclass(frozen=True)
class ConversionEdge:
    """One directed conversion: 1 ``from_unit`` = ``factor`` ``to_unit``."""

    from_unit: str
    to_unit: str
    factor: float
    dimension: str

    def validate(self) -> List[str]:
        """Return a list of problems with this edge (empty when valid)."""
        issues = []
        for name in ("from_unit", "to_unit"):
            issue = validate_unit_symbol(getattr(self, name))
            if issue:
                issues.append(f"{name} {issue}")

        factor = self.factor
        if (
            isinstance(factor, bool)
            or not isinstance(factor, numbers.Real)
            or not math.isfinite(factor)
            or factor <= 0
        ):
            issues.append(f"factor must be a strictly positive finite number, got {factor!r}")

        if self.dimension not in DIMENSIONS:
            issues.append(f"dimension must be one of {', '.join(DIMENSIONS)}, got {self.dimension!r}")

        return issues

    def to_dict(self) -> dict:
        return asdict(self)


def validate_unit_symbol(unit: Any) -> Optional[str]:
    """Check a unit symbol's shape; return a problem description or None."""
    if not isinstance(unit, str) or not unit.strip():
        return "must be a non-empty string"
    if len(unit) > MAX_UNIT_LENGTH:
        return f"must be at most {MAX_UNIT_LENGTH} characters, got {len(unit)}"
    return None


def _coerce_factor(value: Any) -> float:
    # Unparseable factors become NaN so validation reports them with context.
    if isinstance(value, bool):
        return float("nan")
    try:
        return float(value)
    except (TypeError, ValueError):
        return float("nan")


def _edge_from_record(record: dict) -> ConversionEdge:
    return ConversionEdge(
        from_unit=record.get("from_unit"),
        to_unit=record.get("to_unit"),
        factor=_coerce_factor(record.get("factor")),
        dimension=record.get("dimension"),
    )


def edges_from_records(records: Iterable[dict]) -> Tuple[ConversionEdge, ...]:
    """Build edges from flat records or grouped YAML entries.

    A grouped entry carries ``dimension``, ``to_unit`` and a ``factors``
    mapping of from_unit -> factor; it expands to one edge per mapping item,
    in mapping order. Any other entry is read as a flat edge record.

    Examples:
        >>> edges_from_records([
        ...     {"dimension": "mass", "to_unit": "g", "factors": {"g": 1, "kg": 1000}},
        ... ])
        (ConversionEdge(from_unit='g', to_unit='g', factor=1.0, dimension='mass'),
         ConversionEdge(from_unit='kg', to_unit='g', factor=1000.0, dimension='mass'))
    """
    edges = []
    for record in records:
        if "factors" in record:
            for from_unit, factor in (record.get("factors") or {}).items():
                edges.append(_edge_from_record({
                    "from_unit": from_unit,
                    "to_unit": record.get("to_unit"),
                    "factor": factor,
                    "dimension": record.get("dimension"),
                }))
        else:
            edges.append(_edge_from_record(record))
    return tuple(edges)


def edges_from_frame(df: pd.DataFrame) -> Tuple[ConversionEdge, ...]:
    """Build edges from a DataFrame with from_unit/to_unit/factor/dimension columns."""
    missing = [col for col in EDGE_COLUMNS if col not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")
    return edges_from_records(df[EDGE_COLUMNS].to_dict("records"))


def edges_to_frame(edges: Iterable[ConversionEdge]) -> pd.DataFrame:
    """Tabular view of the edges, one row per edge in table order."""
    return pd.DataFrame([edge.to_dict() for edge in edges], columns=EDGE_COLUMNS)


def validate_edges(edges: Iterable[ConversionEdge]) -> List[str]:
    """Validate every edge; issues are prefixed with the edge position."""
    issues = []
    for i, edge in enumerate(edges):
        for issue in edge.validate():
            issues.append(f"edge {i} ({edge.from_unit!r} -> {edge.to_unit!r}): {issue}")
    return issues


def read_conversion_file(path: Union[str, Path]) -> Tuple[ConversionEdge, ...]:
    """Read edges from a .yaml/.yml, .parquet or .csv file without validating."""
    path = Path(path)
    if path.suffix in (".yaml", ".yml"):
        data = load_yaml_file(path)
        return edges_from_records(data.get("conversions", []))
    return edges_from_frame(load_frame(path))


def _locate_conversion_file(path: Optional[Union[str, Path]]) -> Path:
    if path is not None:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Required file not found: {path}")
        return path

    env_path = os.environ.get(CONVERSIONS_PATH_ENV)
    if env_path and Path(env_path).exists():
        return Path(env_path)
    if env_path:
        logger.warning(f"{CONVERSIONS_PATH_ENV}={env_path} does not exist, using package data")

    found_path = find_data_file(__file__, ["conversions.parquet", "conversions.yaml"])
    if found_path is None:
        error_msg = format_not_found_error(
            table="conversion",
            searched_locations=[
                ("Environment variable", os.environ.get(CONVERSIONS_PATH_ENV, "Not set")),
                ("Module-local data", Path(__file__).parent / "data"),
            ],
            fix_instructions=[
                f"Set {CONVERSIONS_PATH_ENV} to a conversions .yaml/.parquet/.csv file",
                "Or restore unitprice/units/data/conversions.yaml",
            ],
        )
        raise FileNotFoundError(error_msg)
    return found_path


@lru_cache(maxsize=1)
def load_conversion_table(path: Optional[Union[str, Path]] = None) -> Tuple[ConversionEdge, ...]:
    """Load and validate the conversion table, once per source.

    Args:
        path: Optional explicit path to a .yaml, .parquet or .csv table.

    Returns:
        Tuple of ConversionEdge in table order.

    Raises:
        FileNotFoundError: If no table can be found.
        ValueError: If any edge is malformed (bad factor, unit or dimension).

    Examples:
        >>> edges = load_conversion_table()
        >>> edges[1]
        ConversionEdge(from_unit='kg', to_unit='g', factor=1000.0, dimension='mass')
    """
    source = _locate_conversion_file(path)
    edges = read_conversion_file(source)

    issues = validate_edges(edges)
    if issues:
        details = "\n".join(f"  - {issue}" for issue in issues)
        raise ValueError(f"Invalid conversion table {source}:\n{details}")

    logger.info(f"Loaded {len(edges)} conversion edges from {source}")
    return edges


def clear_cache():
    """Clear the LRU cache for load_conversion_table."""
    load_conversion_table.cache_clear()
    logger.info("Cleared conversion table cache")


__all__ = [
    "DIMENSIONS",
    "MAX_UNIT_LENGTH",
    "CONVERSIONS_PATH_ENV",
    "ConversionEdge",
    "validate_unit_symbol",
    "edges_from_records",
    "edges_from_frame",
    "edges_to_frame",
    "validate_edges",
    "read_conversion_file",
    "load_conversion_table",
    "clear_cache",
]
