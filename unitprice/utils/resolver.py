"""Fuzzy candidate ranking shared by lookup helpers.

Used to offer "did you mean" candidates for unit symbols the conversion table
does not know. Ranking never feeds a conversion by itself.
"""

from __future__ import annotations
from typing import Callable, Iterable

try:
    from rapidfuzz import fuzz
except ImportError as e:
    raise ImportError("rapidfuzz not installed. pip install rapidfuzz") from e


def score_candidate(
    candidate: str,
    query_norm: str,
    normalize_fn: Callable[[str], str],
) -> float:
    """Score one candidate against a normalized query with RapidFuzz WRatio.

    Examples:
        >>> score_candidate("kg", "kg", str.lower)
        100.0
    """
    candidate_norm = normalize_fn(candidate)
    if not candidate_norm or not query_norm:
        return 0.0
    return float(fuzz.WRatio(query_norm, candidate_norm))


def topk_matches(
    candidates: Iterable[str],
    query_norm: str,
    normalize_fn: Callable[[str], str],
    k: int = 5,
) -> list[tuple[str, float]]:
    """Return top-K candidates with scores, best first.

    Ties are broken by candidate string so the ranking is reproducible.

    Args:
        candidates: Candidate strings (e.g., supported unit symbols)
        query_norm: Normalized query string
        normalize_fn: Function applied to each candidate before scoring
        k: Number of top candidates to return (default: 5)

    Returns:
        List of (candidate, score) tuples, ordered by descending score

    Examples:
        >>> [c for c, _ in topk_matches(["lb", "kg", "oz"], "kg", str.lower, k=1)]
        ['kg']
    """
    if k <= 0:
        return []

    scored = [
        (candidate, score_candidate(candidate, query_norm, normalize_fn))
        for candidate in candidates
    ]
    scored.sort(key=lambda x: (-x[1], x[0]))
    return scored[:k]


__all__ = [
    "score_candidate",
    "topk_matches",
]
