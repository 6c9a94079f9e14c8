"""Typed-answer comparison tolerant of one slip.

Only edit distance 0 or 1 matters, so instead of a full Levenshtein table we
check the two single-edit shapes directly in one pass:

* same length, exactly one differing character (substitution);
* lengths differ by one and the longer string is the shorter with one extra
  character (insertion/deletion).

Anything else, transpositions included, is ``"no-match"``.
"""
from __future__ import annotations

import unicodedata

from .types import MatchKind

__all__ = ["normalize", "within_one_edit", "compare", "is_accepted"]


def normalize(text: str) -> str:
    """Trim, case-fold, and strip combining diacritics."""

    folded = unicodedata.normalize("NFD", (text or "").strip().casefold())
    return "".join(ch for ch in folded if not unicodedata.combining(ch))


def within_one_edit(a: str, b: str) -> bool:
    la, lb = len(a), len(b)
    if abs(la - lb) > 1:
        return False
    if la == lb:
        return sum(1 for x, y in zip(a, b) if x != y) <= 1
    short, long_ = (a, b) if la < lb else (b, a)
    i = j = 0
    skipped = False
    while i < len(short) and j < len(long_):
        if short[i] == long_[j]:
            i += 1
            j += 1
            continue
        if skipped:
            return False
        skipped = True
        j += 1
    return True


def compare(typed: str, expected: str) -> MatchKind:
    a = normalize(typed)
    b = normalize(expected)
    if a == b:
        return "exact"
    if within_one_edit(a, b):
        return "fuzzy"
    return "no-match"


def is_accepted(kind: MatchKind) -> bool:
    return kind in ("exact", "fuzzy")
