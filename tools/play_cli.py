# tools/play_cli.py
from __future__ import annotations
import argparse, logging, os
from typing import List, Optional
from trivia_core.config import DEFAULT_QUESTION_COUNT, load_config, dataset_path, make_rng
from trivia_core.dataset import load_dataset
from trivia_core.engine import QuizSession
from trivia_core.errors import AnswerRejected, DatasetLoadError, QuizError
from trivia_core.highscore import JsonFileStreakStore
from trivia_core.types import QuestionView, Verdict

def _prompt(v: QuestionView) -> str:
    f = v.fields
    cat = str(f.get("category", v.category))
    if v.template == "property->name":
        return f'Which {cat} has {f["property"]} = "{f["value"]}"?'
    if v.template == "name->property":
        return f'Which {f["property"]} belongs to {f["name"]}?'
    if v.template == "properties->name":
        pairs = " ; ".join(f'{p["property"]}: "{p["value"]}"' for p in f.get("pairs", []))
        return f"Which {cat} matches: {pairs}?"
    if v.template == "name->image":
        return f'Which image shows {f["name"]}?'
    if v.template == "image->name":
        return f"Which {cat} is shown? [{v.image}]"
    return "Unknown question type"

def _ask(v: QuestionView) -> Optional[str]:
    print(f"\n--- Question {v.index}/{v.total} | {v.category.capitalize()} ---")
    print(_prompt(v))
    if v.typed:
        return input("Type your answer: ").strip()
    for i, opt in enumerate(v.options):
        extra = f"  [{opt.image}]" if opt.image else ""
        label = f"option {i}" if v.template == "name->image" else opt.label
        print(f"  {i}: {label}{extra}")
    raw = input("Choose index: ").strip()
    try:
        return v.options[int(raw)].label
    except (ValueError, IndexError):
        return None

def _feedback(v: QuestionView, verdict: Verdict) -> str:
    if verdict.correct and verdict.canonical:
        return f"Correct! (spelled: {verdict.canonical})  Streak: {verdict.streak}"
    if verdict.correct:
        return f"Correct! Streak: {verdict.streak}"
    return f"Wrong. Correct: {verdict.expected}."

def _pick_categories(names: List[str]) -> List[str]:
    print("Categories:")
    for i, n in enumerate(names): print(f"  {i}: {n.capitalize()}")
    raw = input("Pick categories (comma separated indices): ").strip()
    out: List[str] = []
    for tok in raw.split(","):
        tok = tok.strip()
        if tok.isdigit() and int(tok) < len(names):
            out.append(names[int(tok)])
    return out

def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Play the trivia quiz in a terminal.")
    ap.add_argument("--dataset", default=None)
    ap.add_argument("--categories", default="", help="comma separated; prompts when empty")
    ap.add_argument("-n", "--num-questions", type=int, default=DEFAULT_QUESTION_COUNT)
    ap.add_argument("--highscore", default=os.path.join("data", "highscore.json"))
    ap.add_argument("--no-typed", action="store_true")
    ap.add_argument("-v", "--verbose", action="store_true")
    a = ap.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if a.verbose else logging.WARNING,
                        format="[%(levelname)s] %(message)s")

    cfg = load_config()
    try:
        ds = load_dataset(a.dataset or dataset_path(cfg))
    except DatasetLoadError as e:
        print(f"Could not load dataset: {e}")
        return 1

    sess = QuizSession(ds, rng=make_rng(cfg), streak_store=JsonFileStreakStore(a.highscore),
                       typed_enabled=not a.no_typed)
    print(f"Best streak so far: {sess.best_streak}")
    while True:
        cats = [c.strip() for c in a.categories.split(",") if c.strip()] or _pick_categories(ds.names())
        try:
            view = sess.start(cats, a.num_questions)
            break
        except QuizError as e:
            print(str(e))
            if a.categories:
                return 2
    try:
        while view is not None:
            while True:
                ans = _ask(view)
                try:
                    verdict = sess.submit_answer(ans)
                    break
                except AnswerRejected as e:
                    print(str(e))
            print(_feedback(view, verdict))
            view = sess.advance()
    except KeyboardInterrupt:
        print("\nStopped by user.")

    s = sess.summary()
    print(f"\nSession finished. Score {s.score}/{s.total}. Best streak: {s.best_streak}")
    sess.end()
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
