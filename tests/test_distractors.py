from __future__ import annotations

import random

from trivia_core.distractors import (
    image_options,
    imaged_name_pool,
    options_for,
    pick,
    value_pool,
)
from trivia_core.questions import questions_for_category

from tests.conftest import make_category

NAMES = ["Zebra", "Lion", "Tiger", "Kangaroo", "Okapi"]


def test_pick_always_contains_correct_once():
    for seed in range(40):
        opts = pick("Lion", NAMES, 4, random.Random(seed))
        assert len(opts) == 4
        assert opts.count("Lion") == 1
        assert len(set(opts)) == 4
        assert set(opts) <= set(NAMES)


def test_pick_on_small_pool_returns_fewer_options():
    assert sorted(pick("A", ["A", "B"], 4, random.Random(1))) == ["A", "B"]
    assert pick("A", ["A"], 4, random.Random(1)) == ["A"]


def test_pick_ignores_duplicate_candidates():
    opts = pick("A", ["A", "B", "B", "C"], 4, random.Random(5))
    assert sorted(opts) == ["A", "B", "C"]


def test_pick_order_varies_with_seed():
    orders = {tuple(pick("Lion", NAMES, 4, random.Random(seed))) for seed in range(30)}
    assert len(orders) > 1


def test_value_pool_distinct_labels(synthetic_dataset):
    birds = synthetic_dataset["birds"]
    assert value_pool(birds, "wingspan_cm") == ["130", "310"]
    assert value_pool(birds, "flightless") == ["true", "false"]


def test_value_pool_collapses_equal_labels():
    cat = make_category("codes", [
        {"name": "A", "code": 1},
        {"name": "B", "code": "1"},
        {"name": "C", "code": 2.0},
    ])
    assert value_pool(cat, "code") == ["1", "2"]


def test_image_options_always_include_subject(synthetic_dataset):
    mammals = synthetic_dataset["mammals"]
    assert imaged_name_pool(mammals) == ["Zebra", "Lion", "Tiger"]
    for seed in range(40):
        opts = image_options(mammals, "Tiger", "tiger_2.jpg", 2, random.Random(seed))
        assert len(opts) == 2
        tiger = [o for o in opts if o.label == "Tiger"]
        assert len(tiger) == 1
        assert tiger[0].image == "tiger_2.jpg"
        assert all(o.image for o in opts)


def test_image_options_uses_every_imaged_item_when_room(synthetic_dataset):
    mammals = synthetic_dataset["mammals"]
    opts = image_options(mammals, "Zebra", "zebra.jpg", 4, random.Random(0))
    assert sorted(o.label for o in opts) == ["Lion", "Tiger", "Zebra"]


def test_options_for_uses_the_question_pool(synthetic_dataset):
    mammals = synthetic_dataset["mammals"]
    rng = random.Random(2)
    for q in questions_for_category(mammals, rng):
        opts = options_for(q, mammals, 4, rng)
        labels = [o.label for o in opts]
        assert len(labels) == len(set(labels))
        assert 1 < len(labels) <= 4
        if q.type == "name->image":
            assert q.subject in labels
        else:
            assert q.correct in labels
        if q.type == "image->name":
            assert set(labels) <= {"Zebra", "Lion", "Tiger"}
        if q.type == "name->property":
            assert set(labels) <= set(value_pool(mammals, q.property))
