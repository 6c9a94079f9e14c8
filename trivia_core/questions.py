from __future__ import annotations

import logging
from collections import Counter
from typing import Dict, Hashable, Iterable, List, Optional, Sequence, Tuple

from .config import POOL_TRACE
from .rng import RandomSource, shuffle
from .types import Category, Dataset, Question
from .uniqueness import CategoryAnalysis, analyze_category

log = logging.getLogger(__name__)


def questions_for_category(category: Category, rng: Optional[RandomSource] = None,
                           analysis: Optional[CategoryAnalysis] = None) -> List[Question]:
    """Turn a category's uniqueness facts into question records."""

    facts = analysis or analyze_category(category, rng)
    cat = category.name
    out: List[Question] = []

    for f in facts.singles:
        out.append(Question(
            category=cat, type="property->name", subject=f.item.name, correct=f.item.name,
            pool="names", property=f.property, value=f.value,
        ))

    for it in category.items:
        for p in category.properties:
            val = it.get(p)
            if facts.is_unique(p, val):
                out.append(Question(
                    category=cat, type="name->property", subject=it.name, correct=val.label,  # type: ignore[union-attr]
                    pool="values", property=p,
                ))

    for c in facts.combos:
        out.append(Question(
            category=cat, type="properties->name", subject=c.item.name, correct=c.item.name,
            pool="names", properties=c.properties, values=c.values,
        ))

    for f in facts.images:
        out.append(Question(
            category=cat, type="name->image", subject=f.item.name, correct=f.image,
            pool="images", image=f.image,
        ))
    for f in facts.images:
        out.append(Question(
            category=cat, type="image->name", subject=f.item.name, correct=f.item.name,
            pool="imaged_names", image=f.image,
        ))
    return out


def question_signature(q: Question) -> Tuple[Hashable, ...]:
    if q.property is not None:
        defining: Hashable = q.property
    elif q.properties:
        defining = q.properties
    else:
        defining = q.subject
    if q.value is not None:
        answer: Hashable = q.value
    elif q.values:
        answer = q.values
    else:
        answer = q.correct
    return (q.type, q.category, defining, answer)


def dedupe_questions(questions: Iterable[Question]) -> List[Question]:
    seen = set()
    out: List[Question] = []
    for q in questions:
        sig = question_signature(q)
        if sig in seen:
            continue
        seen.add(sig)
        out.append(q)
    return out


def pool_composition(questions: Iterable[Question]) -> Dict[str, int]:
    return dict(Counter(q.type for q in questions))


def build_question_pool(dataset: Dataset, categories: Sequence[str],
                        rng: Optional[RandomSource] = None) -> List[Question]:
    """Questions for the selected categories, deduplicated then shuffled.

    Categories are walked in dataset order; an empty selection yields an
    empty pool.
    """

    selected = set(categories)
    raw: List[Question] = []
    for name, category in dataset.categories.items():
        if name not in selected:
            continue
        if not category.items:
            continue
        raw.extend(questions_for_category(category, rng))

    pool = shuffle(dedupe_questions(raw), rng)
    counts = pool_composition(pool)
    if POOL_TRACE:
        log.info("question pool built: %s", counts)
    else:
        log.debug("question pool built: %s", counts)
    return pool
