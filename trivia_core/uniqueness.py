"""Uniqueness analysis over one category's items.

Finds the facts that identify exactly one item: single attribute values,
small attribute combinations, and images. Only these facts become questions,
so every question generated from them has exactly one right answer at the
time the pool is built.

Combination search is bounded to 2- and 3-property subsets and is
greedy: the first subset size that works wins, and within that
size the first subset in index order wins. The tie-break decides
which questions a dataset produces.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Set, Tuple

from .config import MAX_COMBO, MIN_COMBO, MIN_IMAGED_ITEMS, POOL_TRACE
from .rng import RandomSource, choice
from .types import AttrValue, Category, ComboFact, ImageFact, Item, SingleFact

log = logging.getLogger(__name__)

ValueIndex = Dict[str, Dict[AttrValue, List[Item]]]

__all__ = [
    "CategoryAnalysis",
    "build_value_index",
    "shared_labels",
    "single_facts",
    "combinations",
    "find_unique_combo",
    "imaged_items",
    "image_facts",
    "analyze_category",
]


@dataclass
class CategoryAnalysis:
    category: str
    index: ValueIndex = field(default_factory=dict)
    singles: List[SingleFact] = field(default_factory=list)
    combos: List[ComboFact] = field(default_factory=list)
    images: List[ImageFact] = field(default_factory=list)
    shared: Dict[str, Set[str]] = field(default_factory=dict)

    def is_unique(self, prop: str, value: Optional[AttrValue]) -> bool:
        if value is None or value.label in self.shared.get(prop, ()):
            return False
        return len(self.index.get(prop, {}).get(value, ())) == 1


def build_value_index(items: Sequence[Item], properties: Sequence[str]) -> ValueIndex:
    """Map each property to ``value -> items holding it``; nulls are left out."""

    index: ValueIndex = {}
    for p in properties:
        bucket: Dict[AttrValue, List[Item]] = {}
        for it in items:
            val = it.get(p)
            if val is None:
                continue
            bucket.setdefault(val, []).append(it)
        index[p] = bucket
    return index


def shared_labels(index: ValueIndex) -> Dict[str, Set[str]]:
    """Labels that several distinct values of one property display as, e.g. ``1`` and ``"1"``."""

    out: Dict[str, Set[str]] = {}
    for p, bucket in index.items():
        seen: Set[str] = set()
        dup: Set[str] = set()
        for val in bucket:
            if val.label in seen:
                dup.add(val.label)
            seen.add(val.label)
        if dup:
            out[p] = dup
    return out


def single_facts(index: ValueIndex) -> List[SingleFact]:
    out: List[SingleFact] = []
    for p, bucket in index.items():
        for val, holders in bucket.items():
            if len(holders) == 1:
                out.append(SingleFact(property=p, value=val, item=holders[0]))
    return out


def combinations(seq: Sequence[str], k: int) -> Iterator[Tuple[str, ...]]:
    """Yield k-subsets of ``seq`` in lexicographic index order."""

    n = len(seq)
    if k <= 0 or k > n:
        return
    idx = list(range(k))
    while True:
        yield tuple(seq[i] for i in idx)
        pos = k - 1
        while pos >= 0 and idx[pos] == pos + n - k:
            pos -= 1
        if pos < 0:
            return
        idx[pos] += 1
        for j in range(pos + 1, k):
            idx[j] = idx[j - 1] + 1


def _count_matches(items: Sequence[Item], props: Tuple[str, ...], values: Tuple[AttrValue, ...]) -> int:
    count = 0
    for it in items:
        if all(it.get(p) == v for p, v in zip(props, values)):
            count += 1
            if count > 1:
                break
    return count


def find_unique_combo(
    item: Item,
    items: Sequence[Item],
    properties: Sequence[str],
    max_combo: int = MAX_COMBO,
    start_k: int = MIN_COMBO,
    unique_props: Optional[Set[str]] = None,
    shared: Optional[Dict[str, Set[str]]] = None,
) -> Optional[ComboFact]:
    """Smallest-k, first-in-order property subset that matches only ``item``.

    ``unique_props`` names properties whose value is already unique for this
    item on its own; subsets containing them are skipped so a combination
    never hides a smaller fact. Subsets showing a label listed in ``shared``
    for that property are skipped too.
    """

    start_k = max(start_k, MIN_COMBO)
    max_k = min(max_combo, MAX_COMBO, len(properties))
    skip_props = unique_props or set()
    shared = shared or {}
    for k in range(start_k, max_k + 1):
        for combo in combinations(properties, k):
            if any(p in skip_props for p in combo):
                continue
            values = tuple(item.get(p) for p in combo)
            if any(v is None for v in values):
                continue
            if any(v.label in shared.get(p, ()) for p, v in zip(combo, values)):  # type: ignore[union-attr]
                continue
            if _count_matches(items, combo, values) == 1:  # type: ignore[arg-type]
                return ComboFact(properties=combo, values=values, item=item)  # type: ignore[arg-type]
    return None


def imaged_items(items: Sequence[Item]) -> List[Item]:
    return [it for it in items if it.has_image]


def image_facts(items: Sequence[Item], rng: Optional[RandomSource] = None) -> List[ImageFact]:
    """One fact per imaged item, but only when there is a distractor to show."""

    with_images = imaged_items(items)
    if len(with_images) < MIN_IMAGED_ITEMS:
        return []
    return [ImageFact(item=it, image=choice(it.images, rng)) for it in with_images]


def analyze_category(category: Category, rng: Optional[RandomSource] = None) -> CategoryAnalysis:
    items = category.items
    out = CategoryAnalysis(category=category.name)
    if not items:
        return out

    out.index = build_value_index(items, category.properties)
    out.shared = shared_labels(out.index)
    out.singles = [f for f in single_facts(out.index) if out.is_unique(f.property, f.value)]
    for it in items:
        unique_props = {p for p in category.properties if out.is_unique(p, it.get(p))}
        combo = find_unique_combo(
            it, items, category.properties, unique_props=unique_props, shared=out.shared,
        )
        if combo is not None:
            out.combos.append(combo)
    out.images = image_facts(items, rng)

    if POOL_TRACE:
        log.info(
            "analyze category=%s items=%d props=%d singles=%d combos=%d images=%d",
            category.name, len(items), len(category.properties),
            len(out.singles), len(out.combos), len(out.images),
        )
    return out
