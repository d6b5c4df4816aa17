"""Shared text normalization for unit symbols.

Symbols are compared exactly everywhere in the engine ("Kg" and "kg" are two
distinct table entries). The helpers here only serve fuzzy candidate ranking
for review UIs.
"""

import re
import unicodedata


def normalize_unit_text(s: str) -> str:
    """Fold a unit symbol for fuzzy matching.

    Transformations:
      1. Unicode compatibility normalization (NFKC), so "m²" becomes "m2"
      2. Case folding
      3. Drop dots ("fl. oz." -> "fl oz")
      4. Collapse whitespace

    Examples:
        >>> normalize_unit_text("  Fl. Oz ")
        'fl oz'

        >>> normalize_unit_text("km²")
        'km2'
    """
    if not s:
        return ""

    s = unicodedata.normalize("NFKC", s)
    s = s.casefold()
    s = s.replace(".", " ")
    s = re.sub(r"\s+", " ", s).strip()

    return s


__all__ = ["normalize_unit_text"]
