from __future__ import annotations

from trivia_core.presenter import build_view, is_typed, judge, prompt_fields, prop_label
from trivia_core.questions import questions_for_category

from tests.conftest import ScriptedRandom, build_synthetic_dataset


def _by_type(category, qtype):
    return next(q for q in questions_for_category(category) if q.type == qtype)


def test_prompt_fields_per_type():
    ds = build_synthetic_dataset()
    tiny = ds["tiny"]
    assert prompt_fields(_by_type(tiny, "property->name")) == {
        "category": "tiny", "property": "color", "value": "blue",
    }
    assert prompt_fields(_by_type(tiny, "properties->name"))["pairs"] == [
        {"property": "color", "value": "red"},
        {"property": "size", "value": "small"},
    ]
    assert prompt_fields(_by_type(ds["birds"], "name->property"))["property"] == "wingspan cm"
    assert prop_label("wingspan_cm") == "wingspan cm"


def test_typed_draw_uses_category_probability():
    ds = build_synthetic_dataset(config={"tiny": {"typed": True, "typedProbability": 40}})
    tiny = ds["tiny"]
    q = _by_type(tiny, "property->name")
    assert is_typed(q, tiny, ScriptedRandom([0.3]))
    assert not is_typed(q, tiny, ScriptedRandom([0.5]))
    assert not is_typed(_by_type(tiny, "name->property"), tiny, ScriptedRandom([0.0]))
    assert not is_typed(q, build_synthetic_dataset()["tiny"], ScriptedRandom([0.0]))


def test_judge_name_to_image_expects_the_subject():
    mammals = build_synthetic_dataset()["mammals"]
    q = _by_type(mammals, "name->image")
    view = build_view(q, mammals, 1, 1, ScriptedRandom([0.1, 0.7, 0.4]))
    assert not view.typed
    assert q.subject in [o.label for o in view.options]
    verdict = judge(q, view, q.subject)
    assert verdict.correct
    assert verdict.expected == q.subject
    assert not judge(q, view, q.correct).correct


def test_numeric_submissions_match_value_labels():
    from tests.conftest import make_category

    cat = make_category("weights", [
        {"name": "A", "kg": 2.5},
        {"name": "B", "kg": 3},
    ])
    for q in questions_for_category(cat):
        if q.type != "name->property":
            continue
        view = build_view(q, cat, 1, 1, ScriptedRandom([0.2]))
        assert judge(q, view, float(q.correct)).correct
    q = next(q for q in questions_for_category(cat) if q.subject == "B" and q.type == "name->property")
    view = build_view(q, cat, 1, 1, ScriptedRandom([0.2]))
    assert judge(q, view, 3.0).submitted == "3"
    assert not judge(q, view, True).correct
