from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from . import config
from .dataset import load_dataset
from .errors import DatasetLoadError
from .questions import dedupe_questions, pool_composition, questions_for_category
from .rng import RandomSource
from .types import Dataset
from .uniqueness import analyze_category, imaged_items

QUESTION_TYPES: tuple[str, ...] = (
    "property->name",
    "name->property",
    "properties->name",
    "name->image",
    "image->name",
)


def _blank_category() -> dict[str, object]:
    return {
        "items": 0,
        "properties": 0,
        "imaged_items": 0,
        "questions": {t: 0 for t in QUESTION_TYPES},
        "items_without_facts": [],
        "schema_warnings": [],
    }


def audit_dataset(dataset: Dataset, rng: RandomSource | None = None) -> dict[str, object]:
    """Per-category question composition plus coverage warnings."""

    coverage: dict[str, dict[str, object]] = {}
    totals = {t: 0 for t in QUESTION_TYPES}

    for name, category in dataset.categories.items():
        data = coverage.setdefault(name, _blank_category())
        data["items"] = len(category.items)
        data["properties"] = len(category.properties)
        data["imaged_items"] = len(imaged_items(category.items))
        data["schema_warnings"] = list(category.schema_warnings)

        analysis = analyze_category(category, rng)
        questions = dedupe_questions(questions_for_category(category, rng, analysis=analysis))
        counts = pool_composition(questions)
        bucket: dict[str, int] = data["questions"]  # type: ignore[assignment]
        for qtype, n in counts.items():
            bucket[qtype] = bucket.get(qtype, 0) + n
            totals[qtype] = totals.get(qtype, 0) + n

        subjects = {q.subject for q in questions}
        data["items_without_facts"] = [it.name for it in category.items if it.name not in subjects]

    warnings: list[str] = []
    for name, data in coverage.items():
        if not data["items"]:
            warnings.append(f"{name} has no items")
            continue
        if data["imaged_items"] == 1:
            warnings.append(f"{name} has a single imaged item (<{config.MIN_IMAGED_ITEMS}); no image questions")
        missing: list[str] = data["items_without_facts"]  # type: ignore[assignment]
        if missing:
            warnings.append(f"{name} has {len(missing)} items that are never a question subject")
        for msg in data["schema_warnings"]:  # type: ignore[union-attr]
            warnings.append(f"schema: {msg}")

    return {"coverage": coverage, "warnings": warnings, "totals": totals}


def _format_row(label: str, data: dict[str, int]) -> str:
    parts = [label]
    for qtype in QUESTION_TYPES:
        parts.append(f"{qtype}:{data.get(qtype, 0):3d}")
    return "  ".join(parts)


def print_report(summary: dict[str, object]) -> None:
    coverage: dict[str, dict[str, object]] = summary["coverage"]  # type: ignore[assignment]
    print("=== Dataset Coverage ===")
    for name in coverage:
        data = coverage[name]
        print(f"\nCategory: {name}  items={data['items']} props={data['properties']} imaged={data['imaged_items']}")
        print("  " + _format_row("Q", data["questions"]))  # type: ignore[arg-type]
        missing = data["items_without_facts"]
        if missing:
            print(f"    without facts: {', '.join(missing)}")  # type: ignore[arg-type]

    warnings: list[str] = summary["warnings"]  # type: ignore[assignment]
    if warnings:
        print("\nWarnings:")
        for msg in warnings:
            print(f" - {msg}")
    else:
        print("\nNo warnings.")

    totals = summary["totals"]
    print("\nTotals:", totals)


def write_summary(summary: dict[str, object], path: Path = Path("/tmp/dataset_audit.json")) -> str:
    text = json.dumps(summary, indent=2, sort_keys=True)
    path.write_text(text + "\n", encoding="utf-8")
    print(text)
    return text


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Report which questions a dataset yields.")
    ap.add_argument("dataset", nargs="?", help="path to dataset JSON (default: packaged sample)")
    ap.add_argument("--out", default="/tmp/dataset_audit.json")
    a = ap.parse_args(argv)
    logging.basicConfig(level=logging.WARNING, format="[%(levelname)s] %(message)s")

    try:
        dataset = load_dataset(a.dataset)
    except DatasetLoadError as e:
        print(f"error: {e}")
        return 1
    summary = audit_dataset(dataset, config.make_rng(config.load_config()))
    print_report(summary)
    write_summary(summary, Path(a.out))
    return 2 if summary["warnings"] else 0


if __name__ == "__main__":
    raise SystemExit(main())
