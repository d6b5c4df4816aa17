"""Tests for compiling the conversion table to parquet."""

import pandas as pd
import pytest

from unitprice.units.data.build_units import build_conversions, process_edge, validate_conversions
from unitprice.units.unitdata import load_conversion_table
from unitprice.utils.build_framework import validate_duplicate_keys, validate_required_fields


class TestBuildConversions:
    """Test the YAML to parquet build"""

    def test_build_matches_yaml(self, tmp_path):
        """The compiled table loads to the same edges as the authored one"""
        output = tmp_path / "conversions.parquet"

        assert build_conversions(output=output) == 0
        assert output.exists()

        authored = load_conversion_table()
        compiled = load_conversion_table(output)
        assert compiled == authored

    def test_build_preserves_order(self, tmp_path):
        output = tmp_path / "conversions.parquet"
        build_conversions(output=output)

        df = pd.read_parquet(output)
        assert list(df.columns) == ["from_unit", "to_unit", "factor", "dimension"]
        assert list(df["from_unit"][:2]) == ["g", "kg"]

    def test_duplicate_edges_abort(self, tmp_path):
        source = tmp_path / "dup.yaml"
        source.write_text(
            "conversions:\n"
            "  - dimension: mass\n"
            "    to_unit: g\n"
            "    factors:\n"
            "      \"kg\": 1000\n"
            "  - dimension: mass\n"
            "    to_unit: g\n"
            "    factors:\n"
            "      \"kg\": 1000\n",
            encoding="utf-8",
        )
        output = tmp_path / "out.parquet"

        assert build_conversions(source=source, output=output) == 1
        assert not output.exists()

    def test_invalid_factor_aborts(self, tmp_path):
        source = tmp_path / "bad.yaml"
        source.write_text(
            "conversions:\n"
            "  - dimension: mass\n"
            "    to_unit: g\n"
            "    factors:\n"
            "      \"kg\": -5\n",
            encoding="utf-8",
        )
        output = tmp_path / "out.parquet"

        assert build_conversions(source=source, output=output) == 1
        assert not output.exists()

    def test_conflicts_reported_not_fatal(self, tmp_path, capsys):
        source = tmp_path / "conflict.yaml"
        source.write_text(
            "conversions:\n"
            "  - dimension: mass\n"
            "    to_unit: g\n"
            "    factors:\n"
            "      \"kg\": 1000\n"
            "  - dimension: mass\n"
            "    to_unit: kg\n"
            "    factors:\n"
            "      \"t\": 1000\n",
            encoding="utf-8",
        )
        output = tmp_path / "out.parquet"

        assert build_conversions(source=source, output=output) == 0
        assert "Canonical unit conflict" in capsys.readouterr().out


class TestBuildValidators:
    """Test row-level build helpers"""

    def test_process_edge_projects_columns(self):
        row = process_edge({"from_unit": "kg", "to_unit": "g", "factor": 1000.0, "dimension": "mass", "note": "x"})
        assert row == {"from_unit": "kg", "to_unit": "g", "factor": 1000.0, "dimension": "mass"}

    def test_missing_required_field(self):
        df = pd.DataFrame({"from_unit": ["kg", ""], "to_unit": ["g", "g"], "factor": [1000.0, 1.0], "dimension": ["mass", "mass"]})
        issues = validate_conversions(df)
        assert issues == ["Missing from_unit in rows: [1]"]

    def test_missing_column(self):
        df = pd.DataFrame({"from_unit": ["kg"], "to_unit": ["g"]})
        assert validate_required_fields(df, ["dimension"]) == ["Missing column: dimension"]

    def test_duplicate_keys(self):
        df = pd.DataFrame({"from_unit": ["kg", "kg"], "to_unit": ["g", "g"]})
        issues = validate_duplicate_keys(df, ["from_unit", "to_unit"])
        assert len(issues) == 1
        assert "('kg', 'g')" in issues[0]

    def test_valid_frame(self):
        df = pd.DataFrame({"from_unit": ["g", "kg"], "to_unit": ["g", "g"], "factor": [1.0, 1000.0], "dimension": ["mass", "mass"]})
        assert validate_conversions(df) == []
