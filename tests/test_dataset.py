from __future__ import annotations

import json

import pytest

from trivia_core.dataset import (
    load_dataset,
    normalize_probability,
    parse_category,
    parse_config,
    parse_dataset,
)
from trivia_core.errors import DatasetLoadError


@pytest.mark.parametrize(
    "raw, expected",
    [
        (0.25, 0.25),
        (40, 0.4),
        (1, 1.0),
        (150, 1.0),
        (-3, 0.0),
        (None, 1.0),
        ("abc", 1.0),
        (True, 1.0),
    ],
)
def test_normalize_probability(raw, expected):
    assert normalize_probability(raw) == pytest.approx(expected)


def test_parse_config_defaults_and_typed_flag():
    cfg = parse_config({
        "birds": {"typed": True},
        "fish": {"typed": False, "typedProbability": 50},
        "odd": "yes",
    })
    assert cfg["birds"].typed_probability == 1.0
    assert cfg["birds"].effective_probability == 1.0
    assert cfg["fish"].typed is False
    assert cfg["fish"].effective_probability == 0.0
    assert "odd" not in cfg


def test_reserved_config_key_is_not_a_category():
    ds = parse_dataset({
        "_config": {"a": {"typed": True, "typedProbability": 0.5}},
        "a": [{"name": "X", "v": 1}],
        "b": "not a list",
    })
    assert ds.names() == ["a"]
    assert ds["a"].config.effective_probability == 0.5


def test_images_are_merged_and_excluded_from_properties():
    cat = parse_category("c", [
        {"name": "A", "size": 1, "image": "a.jpg", "images": ["a.jpg", "a2.jpg"]},
        {"name": "B", "size": 2},
    ])
    assert cat.properties == ["size"]
    assert cat.items[0].images == ("a.jpg", "a2.jpg")
    assert not cat.items[1].has_image


def test_schema_comes_from_first_item():
    cat = parse_category("c", [
        {"name": "A", "x": 1},
        {"name": "B", "y": 2},
        {"x": 3},
    ])
    assert cat.properties == ["x"]
    assert [it.name for it in cat.items] == ["A", "B"]
    assert cat.find("B").get("x") is None
    assert cat.find("B").get("y") is None
    assert len(cat.schema_warnings) == 3


def test_load_errors(tmp_path):
    with pytest.raises(DatasetLoadError):
        load_dataset(tmp_path / "missing.json")

    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(DatasetLoadError):
        load_dataset(bad)

    wrong_root = tmp_path / "list.json"
    wrong_root.write_text(json.dumps([1, 2]), encoding="utf-8")
    with pytest.raises(DatasetLoadError):
        load_dataset(wrong_root)


def test_packaged_sample_dataset_loads():
    ds = load_dataset()
    assert {"mammals", "birds", "reptiles"} <= set(ds.names())
    assert ds["birds"].config.effective_probability == pytest.approx(0.4)
    assert ds["reptiles"].config.effective_probability == pytest.approx(0.25)
    assert ds["mammals"].config.effective_probability == 0.0
    assert ds["mammals"].find("Tiger").images == ("images/tiger.jpg", "images/tiger_2.jpg")


def test_nested_values_are_treated_as_missing():
    from trivia_core.uniqueness import analyze_category

    cat = parse_category("c", [
        {"name": "A", "tags": ["a", "b"], "v": 1},
        {"name": "B", "tags": {"x": 1}, "v": 2},
        {"name": "C", "tags": "plain", "v": 3},
    ])
    assert cat.find("A").get("tags") is None
    assert cat.find("B").get("tags") is None
    assert [w for w in cat.schema_warnings if "non-scalar" in w] == [
        "c/A has non-scalar values for: tags; treated as missing",
        "c/B has non-scalar values for: tags; treated as missing",
    ]
    tag_facts = [(f.value.label, f.item.name) for f in analyze_category(cat).singles if f.property == "tags"]
    assert tag_facts == [("plain", "C")]
