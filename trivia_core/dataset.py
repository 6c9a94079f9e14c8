from __future__ import annotations
import json, logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .config import DATASET_CONFIG_KEY, EXCLUDED_KEYS, TYPED_PROBABILITY_DEFAULT
from .errors import DatasetLoadError
from .types import AttrValue, Category, CategoryConfig, Dataset, Item

log = logging.getLogger(__name__)

DEFAULT_DATASET = Path(__file__).with_name("data") / "dataset.json"


def normalize_probability(raw: object, default: float = TYPED_PROBABILITY_DEFAULT) -> float:
    """Accept a 0..1 fraction or a 0..100 percentage and clamp to [0, 1]."""

    if isinstance(raw, bool) or raw is None:
        return max(0.0, min(1.0, float(default)))
    try:
        p = float(raw)
    except (TypeError, ValueError):
        return max(0.0, min(1.0, float(default)))
    if p != p:  # NaN
        return max(0.0, min(1.0, float(default)))
    if p > 1.0:
        p = p / 100.0
    return max(0.0, min(1.0, p))


def parse_config(raw: object) -> Dict[str, CategoryConfig]:
    if not isinstance(raw, dict):
        return {}
    out: Dict[str, CategoryConfig] = {}
    for cat, entry in raw.items():
        if not isinstance(entry, dict):
            log.warning("dataset config for %r is not an object; ignored", cat)
            continue
        typed = bool(entry.get("typed", False))
        prob_raw = entry.get("typedProbability", entry.get("typed_probability"))
        prob = normalize_probability(prob_raw) if typed else normalize_probability(prob_raw, 0.0)
        out[str(cat)] = CategoryConfig(typed=typed, typed_probability=prob)
    return out


def _images_of(raw: dict) -> Tuple[str, ...]:
    refs: List[str] = []
    for key in ("image", "images"):
        val = raw.get(key)
        if isinstance(val, str):
            val = [val]
        if isinstance(val, (list, tuple)):
            for ref in val:
                if isinstance(ref, str) and ref.strip() and ref not in refs:
                    refs.append(ref)
    return tuple(refs)


def parse_item(raw: object, properties: List[str]) -> Optional[Item]:
    if not isinstance(raw, dict):
        return None
    name = raw.get("name")
    if not isinstance(name, str) or not name.strip():
        return None
    attrs = {p: AttrValue.from_raw(raw.get(p)) for p in properties}
    return Item(name=name, attributes=attrs, images=_images_of(raw))


def parse_category(name: str, raw_items: object, config: Optional[CategoryConfig] = None) -> Category:
    """Build a category; the schema comes from the first item.

    Later items are read against that schema: keys they lack become null and
    keys the first item lacks are ignored. Both cases are recorded in
    ``schema_warnings``.
    """

    cfg = config or CategoryConfig()
    rows = [r for r in raw_items if isinstance(r, dict)] if isinstance(raw_items, list) else []
    if not rows:
        return Category(name=name, items=[], properties=[], config=cfg)

    schema_keys = list(dict.fromkeys(rows[0].keys()))
    properties = [k for k in schema_keys if k not in EXCLUDED_KEYS]
    warnings: List[str] = []
    items: List[Item] = []
    for idx, row in enumerate(rows):
        it = parse_item(row, properties)
        if it is None:
            warnings.append(f"{name}[{idx}] has no usable name; skipped")
            continue
        if idx > 0:
            extra = [k for k in row if k not in schema_keys and k not in EXCLUDED_KEYS]
            missing = [k for k in properties if k not in row]
            if extra:
                warnings.append(f"{name}/{it.name} has keys outside the schema: {', '.join(extra)}")
            if missing:
                warnings.append(f"{name}/{it.name} is missing keys: {', '.join(missing)}")
        nested = [k for k in properties if isinstance(row.get(k), (list, dict))]
        if nested:
            warnings.append(f"{name}/{it.name} has non-scalar values for: {', '.join(nested)}; treated as missing")
        items.append(it)

    for msg in warnings:
        log.warning("dataset: %s", msg)
    return Category(name=name, items=items, properties=properties, config=cfg, schema_warnings=warnings)


def parse_dataset(raw: object) -> Dataset:
    if not isinstance(raw, dict):
        raise DatasetLoadError("dataset root must be a JSON object of category -> items")
    configs = parse_config(raw.get(DATASET_CONFIG_KEY))
    ds = Dataset()
    for cat, rows in raw.items():
        if cat == DATASET_CONFIG_KEY:
            continue
        if not isinstance(rows, list):
            log.warning("dataset: category %r is not a list; skipped", cat)
            continue
        ds.categories[str(cat)] = parse_category(str(cat), rows, configs.get(str(cat)))
    for cat in configs:
        if cat not in ds.categories:
            log.warning("dataset: config given for unknown category %r", cat)
    log.debug("dataset: loaded %d categories", len(ds.categories))
    return ds


def load_dataset(path: str | Path | None = None) -> Dataset:
    """Load from ``path`` or, when omitted, the packaged sample dataset."""

    try:
        if path is None:
            text = DEFAULT_DATASET.read_text(encoding="utf-8")
        else:
            text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise DatasetLoadError(f"could not read dataset {path or 'data/dataset.json'}: {e}") from e
    try:
        raw = json.loads(text)
    except ValueError as e:
        raise DatasetLoadError(f"dataset is not valid JSON: {e}") from e
    return parse_dataset(raw)
