#!/usr/bin/env python3
"""
Build conversions.parquet from the authored conversions.yaml.

This script:
1. Loads the grouped conversion edges from conversions.yaml
2. Flattens them into one row per edge, preserving table order
3. Validates factors, unit symbols, dimensions and duplicate edges
4. Reports canonical unit conflicts per dimension
5. Writes conversions.parquet (picked up before the YAML by the loader)
"""

import sys
from pathlib import Path
from typing import List, Optional

import pandas as pd

from unitprice.units.unitdata import EDGE_COLUMNS, edges_from_frame, read_conversion_file, validate_edges
from unitprice.units.unitresolver import UnitResolver
from unitprice.utils.build_framework import (
    BuildConfig,
    build_table,
    validate_duplicate_keys,
    validate_required_fields,
)


def process_edge(record: dict) -> dict:
    """Project a flattened edge record onto the output columns."""
    return {col: record.get(col) for col in EDGE_COLUMNS}


def validate_conversions(df: pd.DataFrame) -> List[str]:
    """Validation issues for a conversions DataFrame."""
    issues = validate_required_fields(df, ["from_unit", "to_unit", "dimension"])
    if issues:
        return issues

    issues.extend(validate_duplicate_keys(df, ["from_unit", "to_unit"]))

    edges = edges_from_frame(df)
    issues.extend(validate_edges(edges))

    if not issues:
        report = UnitResolver.from_edges(edges).report
        for conflict in report.conflicts:
            # Conflicts resolve deterministically; surface them, don't fail.
            print(f"  note: {conflict.describe()}")

    return issues


def build_conversions(source: Optional[Path] = None, output: Optional[Path] = None) -> int:
    """Compile the YAML table into parquet. Returns a process exit code."""
    data_dir = Path(__file__).parent
    source = source or data_dir / "conversions.yaml"
    output = output or data_dir / "conversions.parquet"

    print(f"Building conversions table from {source}")
    edges = read_conversion_file(source)

    config = BuildConfig(
        input_data=[edge.to_dict() for edge in edges],
        output_parquet=output,
        process_row=process_edge,
        validate_data=validate_conversions,
        table_name="conversion",
        columns=EDGE_COLUMNS,
    )
    return build_table(config)


if __name__ == "__main__":
    sys.exit(build_conversions())
