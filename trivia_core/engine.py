# trivia_core/engine.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence
from datetime import datetime, timezone
import logging

from .types import Dataset, Question, QuestionView, SessionPhase, SessionSummary, Verdict
from .config import DEFAULT_QUESTION_COUNT, MAX_OPTIONS, load_config, make_rng
from .errors import AnswerRejected, EmptyPoolError, SelectionError, SessionStateError
from .highscore import MemoryStreakStore
from .presenter import build_view, judge
from .questions import build_question_pool
from .rng import RandomSource, shuffle


log = logging.getLogger(__name__)


@dataclass
class SessionState:
    categories: List[str] = field(default_factory=list)
    questions: List[Question] = field(default_factory=list)
    index: int = -1
    score: int = 0
    streak: int = 0
    attempted: int = 0
    answered: bool = False
    view: Optional[QuestionView] = None
    events: List[Dict[str, object]] = field(default_factory=list)


class QuizSession:
    """Owns one run: the question subset, position, score and streaks.

    Phases: ``setup`` -> ``in_progress`` -> ``finished``. ``end()`` returns to
    ``setup`` from anywhere. The best streak outlives sessions and never
    goes down.
    """

    def __init__(self, dataset: Dataset, rng: Optional[RandomSource] = None,
                 streak_store=None, max_options: int = MAX_OPTIONS,
                 typed_enabled: Optional[bool] = None):
        self.cfg = load_config()
        self.dataset = dataset
        self.rng: RandomSource = rng if rng is not None else make_rng(self.cfg)
        self.store = streak_store if streak_store is not None else MemoryStreakStore()
        self.max_options = max_options
        if typed_enabled is None:
            typed_enabled = bool(self.cfg.get("TYPED_ENABLED", True))
        self.typed_enabled = typed_enabled
        self.best_streak: int = int(self.store.load())
        self.phase: SessionPhase = "setup"
        self.state = SessionState()

    # ---- lifecycle ----
    def start(self, categories: Sequence[str], count: Optional[int] = DEFAULT_QUESTION_COUNT) -> QuestionView:
        selected = [c for c in dict.fromkeys(categories or [])]
        if not selected:
            raise SelectionError("Please select at least one category.")
        unknown = [c for c in selected if c not in self.dataset]
        if unknown:
            raise SelectionError(f"Unknown categories: {', '.join(unknown)}")

        try:
            n = int(count) if count is not None else DEFAULT_QUESTION_COUNT
        except (TypeError, ValueError):
            n = DEFAULT_QUESTION_COUNT
        n = max(1, n)

        pool = build_question_pool(self.dataset, selected, self.rng)
        subset = shuffle(pool, self.rng)[:n]
        if not subset:
            raise EmptyPoolError(
                "No valid questions available for the chosen categories. "
                "Add more data or choose other categories."
            )

        self.state = SessionState(categories=selected, questions=subset)
        self.phase = "in_progress"
        log.debug("session start categories=%s pool=%d questions=%d", selected, len(pool), len(subset))
        view = self.advance()
        if view is None:
            raise SessionStateError("session has no question to show")
        return view

    def end(self) -> None:
        self.phase = "setup"
        self.state = SessionState()

    reset = end

    # ---- per question ----
    @property
    def total(self) -> int:
        return len(self.state.questions)

    @property
    def current_question(self) -> Optional[Question]:
        if self.phase != "in_progress":
            return None
        return self.state.questions[self.state.index]

    @property
    def current(self) -> Optional[QuestionView]:
        return self.state.view if self.phase == "in_progress" else None

    def advance(self) -> Optional[QuestionView]:
        if self.phase != "in_progress":
            raise SessionStateError(f"cannot advance while {self.phase}")
        st = self.state
        if st.index >= 0 and not st.answered:
            raise AnswerRejected("Pick an answer first.")

        st.index += 1
        st.answered = False
        if st.index >= len(st.questions):
            st.index = len(st.questions)
            st.view = None
            self.phase = "finished"
            log.debug("session finished score=%d/%d best=%d", st.score, len(st.questions), self.best_streak)
            return None

        q = st.questions[st.index]
        category = self.dataset[q.category]
        st.view = build_view(
            q, category, st.index + 1, len(st.questions),
            rng=self.rng, max_options=self.max_options, typed_enabled=self.typed_enabled,
        )
        return st.view

    def submit_answer(self, value: object) -> Verdict:
        if self.phase != "in_progress":
            raise SessionStateError(f"cannot answer while {self.phase}")
        st = self.state
        if st.answered:
            raise AnswerRejected("This question was already answered.")
        if value is None or (isinstance(value, str) and not value.strip()):
            raise AnswerRejected("Pick an answer first.")

        q = st.questions[st.index]
        view = st.view
        if view is None:
            raise SessionStateError("no question on display")
        verdict = judge(q, view, value)

        st.answered = True
        st.attempted += 1
        if verdict.correct:
            st.score += 1
            st.streak += 1
        else:
            st.streak = 0
        # other sessions may have raised the stored best meanwhile
        self.best_streak = max(self.best_streak, int(self.store.load()))
        if st.streak > self.best_streak:
            self.best_streak = st.streak
            verdict.new_best = True
            self.store.save(self.best_streak)

        verdict.score = st.score
        verdict.streak = st.streak
        verdict.best_streak = self.best_streak

        st.events.append({
            "t": datetime.now(timezone.utc).isoformat(),
            "index": st.index + 1,
            "category": q.category,
            "type": q.type,
            "subject": q.subject,
            "typed": view.typed,
            "submitted": verdict.submitted,
            "expected": verdict.expected,
            "match": verdict.match or ("exact" if verdict.correct else "no-match"),
            "correct": verdict.correct,
            "score_after": st.score,
            "streak_after": st.streak,
        })
        log.debug(
            "answer q=%d type=%s correct=%s match=%s score=%d streak=%d",
            st.index + 1, q.type, verdict.correct, verdict.match, st.score, st.streak,
        )
        return verdict

    # ---- reporting ----
    def summary(self) -> SessionSummary:
        st = self.state
        return SessionSummary(
            score=st.score,
            attempted=st.attempted,
            total=len(st.questions),
            best_streak=self.best_streak,
            finished=self.phase == "finished",
            categories=list(st.categories),
            events=list(st.events),
        )
