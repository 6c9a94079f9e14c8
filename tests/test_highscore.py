from __future__ import annotations

import json

from trivia_core.highscore import JsonFileStreakStore, MemoryStreakStore, _coerce


def test_coerce_rejects_junk():
    assert _coerce(3) == 3
    assert _coerce("4") == 4
    assert _coerce(2.9) == 2
    assert _coerce(-1) == 0
    assert _coerce(None) == 0
    assert _coerce("many") == 0
    assert _coerce(True) == 0


def test_memory_store_round_trip():
    store = MemoryStreakStore(2)
    assert store.load() == 2
    store.save(7)
    assert store.load() == 7


def test_file_store_missing_or_corrupt_starts_at_zero(tmp_path):
    path = tmp_path / "hs.json"
    assert JsonFileStreakStore(path).load() == 0
    path.write_text("][", encoding="utf-8")
    assert JsonFileStreakStore(path).load() == 0
    path.write_text(json.dumps({"quiz_highscore": "lots"}), encoding="utf-8")
    assert JsonFileStreakStore(path).load() == 0


def test_file_store_keeps_other_keys(tmp_path):
    path = tmp_path / "nested" / "hs.json"
    path.parent.mkdir()
    path.write_text(json.dumps({"theme": "dark"}), encoding="utf-8")

    store = JsonFileStreakStore(path)
    store.save(4)

    assert json.loads(path.read_text(encoding="utf-8")) == {"theme": "dark", "quiz_highscore": 4}
    assert not path.with_suffix(".json.tmp").exists()
    assert JsonFileStreakStore(path).load() == 4


def test_saving_never_lowers_the_best(tmp_path):
    mem = MemoryStreakStore(5)
    mem.save(2)
    assert mem.load() == 5

    path = tmp_path / "hs.json"
    first = JsonFileStreakStore(path)
    second = JsonFileStreakStore(path)
    first.save(3)
    second.save(1)
    assert json.loads(path.read_text(encoding="utf-8"))["quiz_highscore"] == 3
