"""Shared utilities for the unitprice package."""

from unitprice.utils.dataloader import (
    find_data_file,
    load_yaml_file,
    load_frame,
    format_not_found_error,
)
from unitprice.utils.normalize import normalize_unit_text
from unitprice.utils.resolver import (
    score_candidate,
    topk_matches,
)
from unitprice.utils.build_framework import (
    BuildConfig,
    build_table,
    validate_duplicate_keys,
    validate_required_fields,
)

__all__ = [
    # Data loading
    "find_data_file",
    "load_yaml_file",
    "load_frame",
    "format_not_found_error",
    # Normalization
    "normalize_unit_text",
    # Candidate ranking
    "score_candidate",
    "topk_matches",
    # Build utilities
    "BuildConfig",
    "build_table",
    "validate_duplicate_keys",
    "validate_required_fields",
]
