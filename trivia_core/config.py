from __future__ import annotations
import os, json, pathlib, random


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


MAX_OPTIONS: int = 4
MIN_COMBO: int = 2
MAX_COMBO: int = 3
MIN_IMAGED_ITEMS: int = 2

DEFAULT_QUESTION_COUNT: int = 20

DATASET_CONFIG_KEY: str = "_config"
EXCLUDED_KEYS: frozenset[str] = frozenset({"name", "image", "images"})
TYPED_PROBABILITY_DEFAULT: float = 1.0

HIGHSCORE_KEY: str = "quiz_highscore"

AUDIT_EXPORT_ENABLED: bool = True
POOL_TRACE: bool = False
DEBUG_SEED: int | None = None

# // env overrides for staging/ops; combo bounds are fixed.
MAX_OPTIONS = max(2, _env_int("MAX_OPTIONS", MAX_OPTIONS))
DEFAULT_QUESTION_COUNT = max(1, _env_int("DEFAULT_QUESTION_COUNT", DEFAULT_QUESTION_COUNT))
TYPED_PROBABILITY_DEFAULT = _env_float("TYPED_PROBABILITY_DEFAULT", TYPED_PROBABILITY_DEFAULT)
AUDIT_EXPORT_ENABLED = _env_bool("AUDIT_EXPORT_ENABLED", AUDIT_EXPORT_ENABLED)
POOL_TRACE = _env_bool("POOL_TRACE", False)
DEBUG_SEED = _env_int("DEBUG_SEED", -1)
if DEBUG_SEED < 0:
    DEBUG_SEED = None


def load_config() -> dict:
    cfg = {}
    p = pathlib.Path("config.json")
    if p.exists():
        try: cfg = json.loads(p.read_text(encoding="utf-8"))
        except (OSError, ValueError): cfg = {}
    e = os.environ
    if e.get("QUIZ_DATASET"): cfg["QUIZ_DATASET"] = e.get("QUIZ_DATASET")
    if e.get("HIGHSCORE_PATH"): cfg["HIGHSCORE_PATH"] = e.get("HIGHSCORE_PATH")
    if e.get("TYPED_ENABLED"): cfg["TYPED_ENABLED"] = _env_bool("TYPED_ENABLED", True)
    if e.get("SEED"): cfg["SEED"] = int(e.get("SEED"))
    return cfg
def dataset_path(cfg: dict) -> str|None:
    p = (cfg.get("QUIZ_DATASET") or "").strip()
    return p or None
def make_rng(cfg: dict | None = None) -> random.Random:
    s = (cfg or {}).get("SEED")
    if s is None:
        s = DEBUG_SEED
    if s is not None:
        return random.Random(int(s))
    return random.Random()
