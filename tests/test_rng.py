from __future__ import annotations

import random

import pytest

from trivia_core.rng import choice, randbelow, sample, shuffle

from tests.conftest import ScriptedRandom


def test_shuffle_with_zero_draws_rotates_left():
    assert shuffle(["a", "b", "c", "d"], ScriptedRandom([0.0])) == ["b", "c", "d", "a"]


def test_shuffle_with_top_draws_keeps_order():
    rng = ScriptedRandom([0.999])
    assert shuffle(["a", "b", "c", "d"], rng) == ["a", "b", "c", "d"]
    assert rng.calls == 3


def test_shuffle_returns_a_copy():
    src = [1, 2, 3]
    out = shuffle(src, random.Random(3))
    assert sorted(out) == src
    assert out is not src


def test_randbelow_bounds():
    assert randbelow(5, ScriptedRandom([0.5])) == 2
    assert randbelow(3, ScriptedRandom([0.0])) == 0
    assert randbelow(3, ScriptedRandom([0.99999])) == 2
    with pytest.raises(ValueError):
        randbelow(0)


def test_sample_and_choice():
    rng = random.Random(11)
    assert sample([1, 2, 3], 0, rng) == []
    assert sorted(sample([1, 2, 3], 10, rng)) == [1, 2, 3]
    assert len(set(sample(list(range(20)), 5, rng))) == 5
    assert choice(["x", "y"], ScriptedRandom([0.6])) == "y"
    with pytest.raises(IndexError):
        choice([])
