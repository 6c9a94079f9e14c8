"""Best-streak persistence.

The best streak is a single integer kept under a fixed key in a small JSON
key-value file. It is read once when a store is created and written every
time a new best is reached. Saving never lowers the stored value.
"""
from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict

from .config import HIGHSCORE_KEY

log = logging.getLogger(__name__)

_LOCK = threading.Lock()


def _coerce(raw: Any) -> int:
    if isinstance(raw, bool):
        return 0
    try:
        val = int(float(raw))
    except (TypeError, ValueError):
        return 0
    return max(0, val)


class MemoryStreakStore:
    def __init__(self, initial: int = 0):
        self._value = _coerce(initial)

    def load(self) -> int:
        return self._value

    def save(self, value: int) -> None:
        self._value = max(self._value, _coerce(value))


class JsonFileStreakStore:
    def __init__(self, path: str | Path, key: str = HIGHSCORE_KEY):
        self.path = Path(path)
        self.key = key

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            log.warning("highscore file %s unreadable; starting from 0", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def load(self) -> int:
        return _coerce(self._read().get(self.key))

    def save(self, value: int) -> None:
        with _LOCK:
            data = self._read()
            data[self.key] = max(_coerce(data.get(self.key)), _coerce(value))
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
            tmp.replace(self.path)
