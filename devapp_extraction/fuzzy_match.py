"""
Fuzzy Match - Bounded edit-distance lookup against a small vocabulary

Used for the per-record marker word and for suburb names. Matching is
case-insensitive and ignores surrounding whitespace.
"""

from typing import Iterable, Optional, Sequence

from rapidfuzz import process
from rapidfuzz.distance import Levenshtein

# Thresholds tried when looking for the record marker word, strictest first.
MARKER_THRESHOLDS = (0, 1, 2)


def _normalize(text: str) -> str:
    return str(text or "").strip().lower()


def closest_match(query: str, choices: Sequence[str], threshold: int) -> Optional[str]:
    """
    Return the choice closest to query within `threshold` edits, or None.

    Ties on edit distance prefer the choice whose length is closest to the
    query's length, then the earliest choice.
    """
    if not choices:
        return None

    matches = process.extract(
        query,
        choices,
        scorer=Levenshtein.distance,
        processor=_normalize,
        score_cutoff=int(threshold),
        limit=None,
    )
    if not matches:
        return None

    target_len = len(_normalize(query))
    best = min(
        matches,
        key=lambda m: (m[1], abs(len(_normalize(m[0])) - target_len), m[2]),
    )
    return best[0]


def matches_word(text: str, word: str, threshold: int) -> bool:
    return closest_match(text, [word], threshold) is not None


def match_threshold(text: str, word: str,
                    thresholds: Iterable[int] = MARKER_THRESHOLDS) -> Optional[int]:
    """Lowest threshold at which text matches word, or None."""
    for threshold in thresholds:
        if matches_word(text, word, threshold):
            return int(threshold)
    return None
