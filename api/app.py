from __future__ import annotations
from fastapi import FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
import uuid, os, json, logging, typing as t

# ---- Engine imports ----
from trivia_core.engine import QuizSession
from trivia_core.config import load_config, dataset_path, make_rng, AUDIT_EXPORT_ENABLED, DEFAULT_QUESTION_COUNT
from trivia_core.dataset import load_dataset
from trivia_core.errors import (
    AnswerRejected,
    DatasetLoadError,
    EmptyPoolError,
    QuizError,
    SelectionError,
    SessionStateError,
)
from trivia_core.types import Dataset
from trivia_core.audit_export import to_json as events_to_json, to_csv as events_to_csv
from .storage import (
    delete_report,
    find_report_by_session,
    list_reports,
    load_report,
    save_report,
    streak_store,
    utcnow_iso,
)

log = logging.getLogger(__name__)

SESS: dict[str, QuizSession] = {}
DATASET: Dataset | None = None
DATASET_ERROR: str | None = None


def _load() -> None:
    global DATASET, DATASET_ERROR
    cfg = load_config()
    try:
        ds = load_dataset(dataset_path(cfg))
    except DatasetLoadError as e:
        log.error("dataset load failed: %s", e)
        DATASET_ERROR = str(e)
        return
    DATASET, DATASET_ERROR = ds, None


_load()

app = FastAPI(title="Trivia Quiz API")


@app.get("/")
def root():
    return {"status": "ok", "service": "trivia-quiz-api"}


ALLOWED_ORIGINS = [
    o.strip() for o in os.getenv("ALLOWED_ORIGINS", "http://localhost:3000").split(",") if o.strip()
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=False,
)

# ---- Schemas ----
class StartReq(BaseModel):
    categories: list[str] = []
    count: int | None = DEFAULT_QUESTION_COUNT

class AnswerReq(BaseModel):
    value: int | float | str | None = None

# ---- Helpers ----
def _serialize(obj: t.Any) -> t.Any:
    return json.loads(json.dumps(obj, default=lambda o: getattr(o, "__dict__", str(o))))


def _dataset() -> Dataset:
    if DATASET is None:
        raise HTTPException(503, f"dataset unavailable: {DATASET_ERROR or 'not loaded'}")
    return DATASET


def _session(sid: str) -> QuizSession:
    sess = SESS.get(sid)
    if not sess:
        raise HTTPException(404, "session not found")
    return sess


def _http_error(e: QuizError) -> HTTPException:
    if isinstance(e, (SelectionError, EmptyPoolError)):
        return HTTPException(400, str(e))
    if isinstance(e, (AnswerRejected, SessionStateError)):
        return HTTPException(409, str(e))
    return HTTPException(500, str(e))


def _finish_report(sid: str, sess: QuizSession) -> dict[str, t.Any]:
    stored = find_report_by_session(sid)
    if stored:
        return stored
    rid = str(uuid.uuid4())
    created = utcnow_iso()
    summary = _serialize(sess.summary())
    report = {
        "id": rid,
        "created_at": created,
        "meta": {"sessionId": sid, "createdAt": created, "reportId": rid},
        "summary": {k: v for k, v in summary.items() if k != "events"},
        "events": summary.get("events", []),
    }
    save_report(rid, report, {
        "sessionId": sid,
        "createdAt": created,
        "score": summary["score"],
        "total": summary["total"],
        "categories": summary["categories"],
    })
    return report

# ---- Health ----
@app.get("/health")
def health():
    return {
        "dataset_loaded": DATASET is not None,
        "dataset_error": DATASET_ERROR,
        "categories": len(DATASET.categories) if DATASET is not None else 0,
        "sessions": len(SESS),
    }


@app.post("/dataset/reload")
def reload_dataset():
    _load()
    if DATASET is None:
        raise HTTPException(503, f"dataset unavailable: {DATASET_ERROR}")
    return {"ok": True, "categories": DATASET.names()}


@app.get("/categories")
def categories():
    ds = _dataset()
    out = []
    for name, cat in ds.categories.items():
        out.append({
            "name": name,
            "items": len(cat.items),
            "properties": list(cat.properties),
            "typed": cat.config.typed,
            "typed_probability": cat.config.effective_probability,
        })
    return {"categories": out}


@app.get("/highscore")
def highscore():
    return {"best_streak": streak_store().load()}

# ---- Session endpoints ----
@app.post("/session/start")
def start(req: StartReq):
    ds = _dataset()
    sess = QuizSession(ds, rng=make_rng(load_config()), streak_store=streak_store())
    try:
        view = sess.start(req.categories, req.count)
    except QuizError as e:
        raise _http_error(e) from e
    sid = str(uuid.uuid4())
    SESS[sid] = sess
    return {"session_id": sid, "total": sess.total, "question": _serialize(view)}


@app.get("/session/{sid}/question")
def question(sid: str):
    sess = _session(sid)
    return {"phase": sess.phase, "question": _serialize(sess.current)}


@app.post("/session/{sid}/answer")
def answer(sid: str, req: AnswerReq):
    sess = _session(sid)
    try:
        verdict = sess.submit_answer(req.value)
    except QuizError as e:
        raise _http_error(e) from e
    return {"verdict": _serialize(verdict)}


@app.post("/session/{sid}/next")
def next_question(sid: str):
    sess = _session(sid)
    try:
        view = sess.advance()
    except QuizError as e:
        raise _http_error(e) from e
    if view is None:
        report = _finish_report(sid, sess)
        return {"done": True, "question": None, "summary": report["summary"], "report_id": report["id"]}
    return {"done": False, "question": _serialize(view)}


@app.get("/session/{sid}/summary")
def summary(sid: str):
    sess = _session(sid)
    return _serialize(sess.summary())


@app.post("/session/{sid}/end")
def end(sid: str):
    sess = _session(sid)
    sess.end()
    SESS.pop(sid, None)
    return {"ok": True, "best_streak": sess.best_streak}

# ---- Reports ----
@app.get("/reports")
def reports():
    return {"reports": list_reports()}


@app.get("/reports/{report_id}")
def get_report(report_id: str):
    report = load_report(report_id)
    if not report:
        raise HTTPException(404, "report not found")
    return report


@app.get("/reports/{report_id}/events.json")
def get_events_json(report_id: str):
    if not AUDIT_EXPORT_ENABLED:
        raise HTTPException(404, "event export disabled")
    report = load_report(report_id)
    if not report:
        raise HTTPException(404, "report not found")
    payload = events_to_json(report.get("events") or [])
    return {"report_id": report_id, **payload}


@app.get("/reports/{report_id}/events.csv")
def get_events_csv(report_id: str):
    if not AUDIT_EXPORT_ENABLED:
        raise HTTPException(404, "event export disabled")
    report = load_report(report_id)
    if not report:
        raise HTTPException(404, "report not found")
    body = events_to_csv(report.get("events") or [])
    filename = f"{report_id}_events.csv"
    return Response(
        content=body,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename=\"{filename}\""},
    )


@app.delete("/reports/{report_id}")
def delete_report_endpoint(report_id: str):
    ok = delete_report(report_id)
    if not ok:
        raise HTTPException(404, "report not found")
    return {"ok": True}
