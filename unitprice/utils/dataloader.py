"""Shared data loading utilities for the units and shelf-life modules.

Tables ship inside the package, in a data/ directory beside the module that
reads them. These helpers find and read them and describe what was searched
when nothing is found.
"""

from pathlib import Path
from typing import List, Optional, Tuple

import pandas as pd


def find_data_file(module_file: str, filenames: List[str]) -> Optional[Path]:
    """Locate a table shipped next to a module, in its data/ directory.

    Filenames are tried in order, so callers list the compiled format before
    the authored one (e.g. conversions.parquet, then conversions.yaml).

    Returns:
        Path to the first existing file, or None

    Examples:
        >>> find_data_file(unitdata.__file__, ["conversions.parquet", "conversions.yaml"]).name
        'conversions.yaml'
    """
    data_dir = Path(module_file).parent / "data"
    return next(
        (data_dir / name for name in filenames if (data_dir / name).exists()),
        None,
    )


def load_yaml_file(path: Path) -> dict:
    """Load and parse a UTF-8 YAML file.

    Raises:
        FileNotFoundError: If file does not exist
    """
    import yaml

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Required file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


_FRAME_READERS = {
    ".parquet": pd.read_parquet,
    # Symbols such as "NA" are units, not missing values.
    ".csv": lambda path: pd.read_csv(path, keep_default_na=False),
}


def load_frame(path: Path) -> pd.DataFrame:
    """Read a .parquet or .csv table into a DataFrame.

    Raises:
        ValueError: If the extension is neither .parquet nor .csv
    """
    path = Path(path)
    reader = _FRAME_READERS.get(path.suffix)
    if reader is None:
        raise ValueError(f"Unsupported file format: {path.suffix}. Use .parquet or .csv")
    return reader(path)


def format_not_found_error(
    table: str,
    searched_locations: List[Tuple[str, object]],
    fix_instructions: List[str],
) -> str:
    """Message for a FileNotFoundError raised when a table cannot be located.

    Examples:
        >>> print(format_not_found_error("conversion", [("Package data", "units/data")], ["Rebuild"]))
        No conversion table found.
        <BLANKLINE>
        Searched:
          1. Package data: units/data
        <BLANKLINE>
        To fix:
          • Rebuild
    """
    searched = [f"  {i}. {desc}: {path}" for i, (desc, path) in enumerate(searched_locations, 1)]
    fixes = [f"  • {instruction}" for instruction in fix_instructions]
    return "\n".join([f"No {table} table found.", "", "Searched:", *searched, "", "To fix:", *fixes])



__all__ = [
    "find_data_file",
    "load_yaml_file",
    "load_frame",
    "format_not_found_error",
]
