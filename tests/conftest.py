from __future__ import annotations

import copy

import pytest

from trivia_core.dataset import parse_category, parse_dataset
from trivia_core.types import Category, Dataset


SYNTHETIC_RAW: dict[str, object] = {
    "mammals": [
        {"name": "Zebra", "diet": "herbivore", "continent": "Africa", "legs": 4, "image": "zebra.jpg"},
        {"name": "Lion", "diet": "carnivore", "continent": "Africa", "legs": 4, "image": "lion.jpg"},
        {"name": "Tiger", "diet": "carnivore", "continent": "Asia", "legs": 4, "images": ["tiger.jpg", "tiger_2.jpg"]},
        {"name": "Kangaroo", "diet": "herbivore", "continent": "Oceania", "legs": 2},
        {"name": "Okapi", "diet": "herbivore", "continent": "Africa", "legs": 4},
    ],
    "birds": [
        {"name": "Emu", "flightless": True, "wingspan_cm": 130, "image": "emu.jpg"},
        {"name": "Kiwi", "flightless": True, "wingspan_cm": None},
        {"name": "Condor", "flightless": False, "wingspan_cm": 310},
    ],
    # yields exactly three questions: two for Delta's colour, one combo for Gamma
    "tiny": [
        {"name": "Alpha", "color": "red", "size": "big"},
        {"name": "Beta", "color": "red", "size": "big"},
        {"name": "Gamma", "color": "red", "size": "small"},
        {"name": "Delta", "color": "blue", "size": "small"},
    ],
    "blank": [
        {"name": "Same A", "color": "grey"},
        {"name": "Same B", "color": "grey"},
    ],
}


def build_synthetic_dataset(
    *,
    categories: list[str] | None = None,
    config: dict[str, dict[str, object]] | None = None,
) -> Dataset:
    """Create a deterministic synthetic dataset for tests."""

    raw = copy.deepcopy(SYNTHETIC_RAW)
    if categories is not None:
        raw = {k: v for k, v in raw.items() if k in categories}
    if config:
        raw["_config"] = config
    return parse_dataset(raw)


def make_category(name: str, rows: list[dict[str, object]]) -> Category:
    return parse_category(name, rows)


class ScriptedRandom:
    """Random source replaying fixed values, cycling when exhausted."""

    def __init__(self, values: list[float]):
        self.values = list(values) or [0.0]
        self.calls = 0

    def random(self) -> float:
        val = self.values[self.calls % len(self.values)]
        self.calls += 1
        return val


@pytest.fixture
def synthetic_dataset() -> Dataset:
    return build_synthetic_dataset()
