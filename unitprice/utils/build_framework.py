"""
Shared framework for compiling authored YAML tables into parquet.

Used by units/data/build_units.py. Row order is preserved end to end because
the conversion table is order sensitive (the last edge touching a unit decides
its dimension).
"""

from pathlib import Path
from typing import Callable, List, Optional
from dataclasses import dataclass

import pandas as pd


@dataclass
class BuildConfig:
    """Configuration for building a table."""

    # Input rows (required)
    input_data: List[dict] = None

    # Output file (required)
    output_parquet: Path = None

    # Table-specific callbacks (required)
    process_row: Callable[[dict], dict] = None  # Convert source record to DataFrame row
    validate_data: Callable[[pd.DataFrame], List[str]] = None  # Return validation issues

    # Table metadata (required)
    table_name: str = None  # "conversions", ...

    # Optional fields
    columns: Optional[List[str]] = None  # Column order of the output file


def build_table(config: BuildConfig) -> int:
    """
    Generic build process for a parquet table.

    Rows are validated before writing; the file is not written when
    validation finds issues.

    Returns:
        0 on success, 1 if validation issues found
    """
    if config.input_data is None:
        raise ValueError("input_data must be provided")

    print(f"Processing {len(config.input_data)} {config.table_name} rows...")
    rows = [config.process_row(record) for record in config.input_data]
    df = pd.DataFrame(rows, columns=config.columns)

    print("\nValidating data...")
    issues = config.validate_data(df)

    if issues:
        print("\n⚠️  Validation issues found:")
        for issue in issues:
            print(f"  - {issue}")
        print(f"\n⚠️  Build aborted with {len(issues)} validation issues")
        return 1

    print("✅ All validations passed")

    output = Path(config.output_parquet)
    output.parent.mkdir(parents=True, exist_ok=True)
    print(f"\nWriting {len(df)} {config.table_name} rows to {output}")
    df.to_parquet(output, index=False, engine="pyarrow")

    print("\n" + "=" * 60)
    print("BUILD SUMMARY")
    print("=" * 60)
    print(f"Total rows: {len(df)}")
    print(f"Output file: {output}")
    print(f"File size: {output.stat().st_size / 1024:.1f} KB")
    print("\n✅ Build completed successfully")
    return 0


def validate_duplicate_keys(df: pd.DataFrame, key_fields: List[str]) -> List[str]:
    """Check for rows sharing the same key."""
    issues = []
    duplicates = df[df.duplicated(subset=key_fields, keep=False)]
    if not duplicates.empty:
        dup_keys = sorted({tuple(row) for row in duplicates[key_fields].itertuples(index=False)})
        issues.append(f"Duplicate {'/'.join(key_fields)} keys found: {dup_keys}")
    return issues


def validate_required_fields(df: pd.DataFrame, required_fields: List[str]) -> List[str]:
    """Check for missing required fields."""
    issues = []
    for field in required_fields:
        if field not in df.columns:
            issues.append(f"Missing column: {field}")
            continue
        missing = df[df[field].isna() | (df[field].astype(str).str.strip() == "")]
        if not missing.empty:
            issues.append(f"Missing {field} in rows: {missing.index.tolist()}")
    return issues


__all__ = [
    "BuildConfig",
    "build_table",
    "validate_duplicate_keys",
    "validate_required_fields",
]
