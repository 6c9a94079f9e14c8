"""Utility helpers for persisting session reports and the best streak.

Simple JSON files stored on disk keep finished-session reports and the
best-streak counter across restarts.
"""

from __future__ import annotations

import json
import os
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from trivia_core.highscore import JsonFileStreakStore


DATA_ROOT = Path(os.getenv("DATA_DIR", "data")).resolve()
REPORTS_DIR = DATA_ROOT / "reports"
REPORT_INDEX_PATH = DATA_ROOT / "reports_index.json"
HIGHSCORE_PATH = DATA_ROOT / "highscore.json"

_LOCK = threading.Lock()


def _ensure_dirs() -> None:
    REPORTS_DIR.mkdir(parents=True, exist_ok=True)
    DATA_ROOT.mkdir(parents=True, exist_ok=True)


def _read_json(path: Path, default: Any) -> Any:
    if not path.exists():
        return default
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return default


def _write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
    tmp.replace(path)


def utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def streak_store() -> JsonFileStreakStore:
    return JsonFileStreakStore(HIGHSCORE_PATH)


def save_report(report_id: str, report: Dict[str, Any], metadata: Dict[str, Any]) -> None:
    """Persist the rendered report JSON and its index metadata."""

    _ensure_dirs()
    report_path = REPORTS_DIR / f"{report_id}.json"

    with _LOCK:
        index: Dict[str, Dict[str, Any]] = _read_json(REPORT_INDEX_PATH, {})
        index[report_id] = metadata
        _write_json(REPORT_INDEX_PATH, index)

    _write_json(report_path, report)


def load_report(report_id: str) -> Optional[Dict[str, Any]]:
    path = REPORTS_DIR / f"{report_id}.json"
    if not path.exists():
        return None
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None


def delete_report(report_id: str) -> bool:
    removed = False
    with _LOCK:
        index: Dict[str, Dict[str, Any]] = _read_json(REPORT_INDEX_PATH, {})
        if report_id in index:
            index.pop(report_id, None)
            _write_json(REPORT_INDEX_PATH, index)
            removed = True
    report_path = REPORTS_DIR / f"{report_id}.json"
    if report_path.exists():
        report_path.unlink()
    return removed


def list_reports() -> List[Dict[str, Any]]:
    index: Dict[str, Dict[str, Any]] = _read_json(REPORT_INDEX_PATH, {})
    out: List[Dict[str, Any]] = []
    for rid, meta in index.items():
        item = {"id": rid}
        item.update({k: v for k, v in meta.items() if k != "id"})
        out.append(item)
    out.sort(key=lambda r: r.get("createdAt", ""), reverse=True)
    return out


def find_report_by_session(session_id: str) -> Optional[Dict[str, Any]]:
    index: Dict[str, Dict[str, Any]] = _read_json(REPORT_INDEX_PATH, {})
    for rid, meta in index.items():
        if meta.get("sessionId") == session_id:
            report = load_report(rid)
            if report:
                return report
    return None
