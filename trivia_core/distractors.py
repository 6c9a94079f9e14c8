"""Answer-option selection.

``pick`` is the one sampling rule: drop the right answer from the candidates,
sample up to ``count - 1`` of the rest, add the right answer back, shuffle.
A small category can therefore yield fewer than ``count`` options.
"""
from __future__ import annotations

from typing import List, Optional, Sequence

from .config import MAX_OPTIONS
from .rng import RandomSource, randbelow, sample, shuffle
from .types import Category, Option, Question

__all__ = [
    "pick",
    "name_pool",
    "value_pool",
    "imaged_name_pool",
    "image_options",
    "options_for",
]


def pick(correct: str, candidates: Sequence[str], count: int = MAX_OPTIONS,
         rng: Optional[RandomSource] = None) -> List[str]:
    others = list(dict.fromkeys(c for c in candidates if c != correct))
    picks = sample(others, max(0, count - 1), rng)
    picks.append(correct)
    return shuffle(picks, rng)


def name_pool(category: Category) -> List[str]:
    return [it.name for it in category.items]


def value_pool(category: Category, prop: str) -> List[str]:
    """Distinct non-null labels of ``prop``, first appearance first."""

    labels: List[str] = []
    seen = set()
    for it in category.items:
        val = it.get(prop)
        if val is None or val in seen:
            continue
        seen.add(val)
        if val.label not in labels:
            labels.append(val.label)
    return labels


def imaged_name_pool(category: Category) -> List[str]:
    return [it.name for it in category.items if it.has_image]


def image_options(category: Category, subject: str, correct_image: str,
                  count: int = MAX_OPTIONS, rng: Optional[RandomSource] = None) -> List[Option]:
    """Image options for a name->image question, always including ``subject``."""

    candidates = [it for it in category.items if it.has_image]
    chosen = [
        Option(label=it.name, image=(correct_image if it.name == subject else it.images[0]))
        for it in shuffle(candidates, rng)[:count]
    ]
    if not any(o.label == subject for o in chosen):
        forced = Option(label=subject, image=correct_image)
        if len(chosen) < count:
            chosen.append(forced)
        else:
            chosen[randbelow(len(chosen), rng)] = forced
    return shuffle(chosen, rng)


def options_for(question: Question, category: Category, count: int = MAX_OPTIONS,
                rng: Optional[RandomSource] = None) -> List[Option]:
    if question.pool == "images":
        return image_options(category, question.subject, question.correct, count, rng)
    if question.pool == "values":
        pool = value_pool(category, question.property or "")
    elif question.pool == "imaged_names":
        pool = imaged_name_pool(category)
    else:
        pool = name_pool(category)
    return [Option(label=label) for label in pick(question.correct, pool, count, rng)]
