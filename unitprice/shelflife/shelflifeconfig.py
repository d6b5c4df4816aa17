"""Shelf-life warning configuration.

A plain data structure, not environment variables. Callers override any
subset of fields; unspecified fields keep the defaults (multiplier 3.0,
minimum quantity 10, no category or item overrides).
"""

import math
import numbers
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from unitprice.utils.dataloader import load_yaml_file


@dataclass(frozen=True)
class ShelfLifeWarningConfig:
    """Thresholds for shelf-life warnings.

    Attributes:
        default_threshold_multiplier: Quantity above which a sensitive item
            warns, when no override applies.
        minimum_quantity_threshold: Quantities below this never warn.
        category_thresholds: Per-category threshold overrides.
        item_thresholds: Per-item threshold overrides, keyed by item id.
    """

    default_threshold_multiplier: float = 3.0
    minimum_quantity_threshold: float = 10.0
    category_thresholds: Dict[str, float] = field(default_factory=dict)
    item_thresholds: Dict[str, float] = field(default_factory=dict)


DEFAULT_SHELF_LIFE_CONFIG = ShelfLifeWarningConfig()

_FIELD_NAMES = {f.name for f in fields(ShelfLifeWarningConfig)}


def _positive_finite(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real) or not math.isfinite(value) or value <= 0:
        raise ValueError(f"{name} must be a positive finite number, got {value!r}")
    return float(value)


def _threshold_map(name: str, value: Any) -> Dict[str, float]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValueError(f"{name} must be a mapping of key -> threshold, got {type(value).__name__}")
    return {str(k): _positive_finite(f"{name}[{k!r}]", v) for k, v in value.items()}


def make_shelf_life_config(
    overrides: Optional[Mapping[str, Any]] = None,
    base: Optional[ShelfLifeWarningConfig] = None,
) -> ShelfLifeWarningConfig:
    """Build a config from ``base`` with some fields overridden.

    Map fields are replaced as a whole, not merged.

    Raises:
        ValueError: On unknown fields or out-of-range values.

    Examples:
        >>> make_shelf_life_config({"minimum_quantity_threshold": 5})
        ShelfLifeWarningConfig(default_threshold_multiplier=3.0,
                               minimum_quantity_threshold=5.0, ...)
    """
    base = base or DEFAULT_SHELF_LIFE_CONFIG
    overrides = dict(overrides or {})

    unknown = sorted(set(overrides) - _FIELD_NAMES)
    if unknown:
        raise ValueError(f"Unknown shelf-life config fields: {unknown}")

    values = {}
    if "default_threshold_multiplier" in overrides:
        values["default_threshold_multiplier"] = _positive_finite(
            "default_threshold_multiplier", overrides["default_threshold_multiplier"]
        )
    if "minimum_quantity_threshold" in overrides:
        minimum = overrides["minimum_quantity_threshold"]
        if minimum is None:
            minimum = 0.0
        if isinstance(minimum, bool) or not isinstance(minimum, numbers.Real) or not math.isfinite(minimum) or minimum < 0:
            raise ValueError(f"minimum_quantity_threshold must be a finite number >= 0, got {minimum!r}")
        values["minimum_quantity_threshold"] = float(minimum)
    for name in ("category_thresholds", "item_thresholds"):
        if name in overrides:
            values[name] = _threshold_map(name, overrides[name])

    return replace(base, **values)


def load_shelf_life_config(
    path: Union[str, Path],
    base: Optional[ShelfLifeWarningConfig] = None,
) -> ShelfLifeWarningConfig:
    """Load config overrides from a YAML file.

    The file holds the override fields at top level or under a
    ``shelf_life`` key:

        shelf_life:
          minimum_quantity_threshold: 6
          category_thresholds:
            Dairy: 2.5
    """
    data = load_yaml_file(Path(path))
    if not isinstance(data, Mapping):
        raise ValueError(f"Shelf-life config {path} must contain a mapping")
    if "shelf_life" in data:
        data = data["shelf_life"] or {}
    return make_shelf_life_config(data, base=base)


__all__ = [
    "ShelfLifeWarningConfig",
    "DEFAULT_SHELF_LIFE_CONFIG",
    "make_shelf_life_config",
    "load_shelf_life_config",
]
