"""Randomness helpers shared by pool building and distractor selection.

Everything random in the core goes through a ``RandomSource``: any object
with a ``random()`` method returning a float in ``[0, 1)``. ``random.Random``
qualifies, and tests pass a scripted source to pin exact outcomes.
"""
from __future__ import annotations

import random as _random
from typing import List, Optional, Protocol, Sequence, TypeVar

T = TypeVar("T")

__all__ = ["RandomSource", "default_rng", "randbelow", "shuffle", "sample", "choice"]


class RandomSource(Protocol):
    def random(self) -> float: ...


_DEFAULT = _random.Random()


def default_rng(rng: Optional[RandomSource] = None) -> RandomSource:
    return rng if rng is not None else _DEFAULT


def randbelow(n: int, rng: Optional[RandomSource] = None) -> int:
    """Uniform integer in ``[0, n)``."""

    if n <= 0:
        raise ValueError("randbelow() needs a positive bound")
    idx = int(default_rng(rng).random() * n)
    return min(idx, n - 1)


def shuffle(seq: Sequence[T], rng: Optional[RandomSource] = None) -> List[T]:
    """Return a Fisher-Yates permuted copy of ``seq``."""

    out = list(seq)
    for i in range(len(out) - 1, 0, -1):
        j = randbelow(i + 1, rng)
        out[i], out[j] = out[j], out[i]
    return out


def sample(seq: Sequence[T], k: int, rng: Optional[RandomSource] = None) -> List[T]:
    """Sample without replacement; returns everything when ``k >= len(seq)``."""

    if k <= 0:
        return []
    return shuffle(seq, rng)[:k]


def choice(seq: Sequence[T], rng: Optional[RandomSource] = None) -> T:
    if not seq:
        raise IndexError("choice() from an empty sequence")
    return seq[randbelow(len(seq), rng)]
