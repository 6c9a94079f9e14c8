from __future__ import annotations
from typing import Dict, List, Optional

from .config import MAX_OPTIONS
from .distractors import options_for
from .fuzzy import compare, is_accepted
from .rng import RandomSource, default_rng
from .types import NAME_ANSWER_TYPES, AttrValue, Category, Question, QuestionView, Verdict


def prop_label(prop: str) -> str:
    return prop.replace("_", " ")


def prompt_fields(q: Question) -> Dict[str, object]:
    """Plain fields a view needs to phrase the prompt; the template id is ``q.type``."""

    fields: Dict[str, object] = {"category": q.category}
    if q.type == "property->name":
        fields["property"] = prop_label(q.property or "")
        fields["value"] = q.value.label if q.value is not None else ""
    elif q.type == "name->property":
        fields["property"] = prop_label(q.property or "")
        fields["name"] = q.subject
    elif q.type == "properties->name":
        fields["pairs"] = [
            {"property": prop_label(p), "value": v.label} for p, v in zip(q.properties, q.values)
        ]
    elif q.type == "name->image":
        fields["name"] = q.subject
    return fields


def is_typed(q: Question, category: Category, rng: Optional[RandomSource] = None) -> bool:
    if q.type not in NAME_ANSWER_TYPES:
        return False
    p = category.config.effective_probability
    if p <= 0.0:
        return False
    if p >= 1.0:
        return True
    return default_rng(rng).random() < p


def build_view(q: Question, category: Category, index: int, total: int,
               rng: Optional[RandomSource] = None, max_options: int = MAX_OPTIONS,
               typed_enabled: bool = True) -> QuestionView:
    typed = typed_enabled and is_typed(q, category, rng)
    view = QuestionView(
        index=index,
        total=total,
        category=q.category,
        type=q.type,
        template=q.type,
        fields=prompt_fields(q),
        typed=typed,
        image=q.image if q.type == "image->name" else None,
    )
    if not typed:
        view.options = options_for(q, category, max_options, rng)
    return view


def judge(q: Question, view: QuestionView, value: object) -> Verdict:
    """Score one submission. Typed answers may be a single slip off."""

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        # 2.0 is offered as "2"
        submitted = AttrValue.from_raw(value).label  # type: ignore[union-attr]
    else:
        submitted = "" if value is None else str(value)
    if view.typed:
        kind = compare(submitted, q.correct)
        ok = is_accepted(kind)
        return Verdict(
            correct=ok,
            match=kind,
            submitted=submitted,
            expected=q.correct,
            canonical=q.correct if kind == "fuzzy" else None,
        )
    # name->image options carry names as labels
    expected = q.subject if q.type == "name->image" else q.correct
    ok = submitted == expected
    return Verdict(correct=ok, match=None, submitted=submitted, expected=expected)


def option_labels(view: QuestionView) -> List[str]:
    return [o.label for o in view.options]
