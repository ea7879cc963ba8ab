"""FastAPI application with all routes."""
from __future__ import annotations

import logging
import uuid

logging.basicConfig(level=logging.INFO, format="%(name)s | %(message)s")

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from kanji_quiz.config import Settings, load_settings, save_settings
from kanji_quiz.errors import GenerationFailed, GenerationInProgress
from kanji_quiz.models import GenerationRequest, KanjiEntry
from kanji_quiz.parsers.kanji_parser import parse_kanji_file
from kanji_quiz.pool import LEVELS, pool_sizes
from kanji_quiz.providers.registry import BACKENDS, build_backend
from kanji_quiz.question_generator import DEFAULT_TASK_TYPE, TASK_TYPES, request_output
from kanji_quiz.session import QuizSession

app = FastAPI(title="Kanji Quiz")

# Global state (initialized in startup)
_kanji_data: dict[str, KanjiEntry] | None = None
_settings: Settings | None = None
_sessions: dict[str, QuizSession] = {}

# Oldest sessions are dropped past this many
MAX_SESSIONS = 256

_log = logging.getLogger("kanji_quiz.app")


def get_kanji_data() -> dict[str, KanjiEntry]:
    assert _kanji_data is not None
    return _kanji_data


def get_settings() -> Settings:
    assert _settings is not None
    return _settings


def _get_backend():
    return build_backend(get_settings(), get_kanji_data())


def _check_level(level) -> str:
    level = str(level)
    if level not in LEVELS:
        raise HTTPException(400, f"Unknown level: {level!r} (expected one of {', '.join(LEVELS)})")
    return level


def _check_positive(key: str, value, number_types: tuple[type, ...]):
    # bool is an int subclass, reject it explicitly
    if isinstance(value, bool) or not isinstance(value, number_types) or value <= 0:
        raise HTTPException(400, f"{key} must be a positive number, got {value!r}")
    return value


def _check_setting(key: str, value):
    if key == "default_level":
        return _check_level(value)
    if key == "backend" and value not in BACKENDS:
        raise HTTPException(400, f"Unknown backend: {value!r} (expected one of {', '.join(BACKENDS)})")
    if key == "max_new_tokens":
        return _check_positive(key, value, (int,))
    if key == "request_timeout":
        return float(_check_positive(key, value, (int, float)))
    if not isinstance(value, str):
        raise HTTPException(400, f"{key} must be a string")
    return value


def _get_session(session_id: str) -> QuizSession:
    session = _sessions.get(session_id)
    if session is None:
        raise HTTPException(404, "Session not found")
    return session


def _get_idle_session(session_id: str) -> QuizSession:
    session = _get_session(session_id)
    if session.state.loading:
        raise HTTPException(409, GenerationInProgress.user_message)
    return session


@app.on_event("startup")
async def startup():
    global _kanji_data, _settings
    if _kanji_data is not None:
        return  # Already initialized (e.g. by tests)
    _settings = load_settings()
    _kanji_data = parse_kanji_file(_settings.kanji_data_path)
    _log.info("Loaded %d kanji from %s", len(_kanji_data), _settings.kanji_data_path)


# ── API: Levels ───────────────────────────────────────────────────────────

@app.get("/api/levels")
async def api_levels():
    sizes = pool_sizes(get_kanji_data())
    return {"levels": [{"level": lvl, "pool_size": sizes[lvl]} for lvl in LEVELS]}


# ── API: Raw generation ───────────────────────────────────────────────────

@app.post("/api/generate")
async def api_generate(request: Request):
    """Pass a generation request straight to the backend and return its text."""
    body = await request.json()
    if not body.get("kanji") or body.get("level") is None:
        raise HTTPException(400, "kanji and level are required")

    task_type = body.get("taskType") or DEFAULT_TASK_TYPE
    if task_type not in TASK_TYPES:
        raise HTTPException(400, f"Unknown task type: {task_type}")

    defaults = GenerationRequest(kanji="", level="", task_type=task_type)
    gen_request = GenerationRequest(
        kanji=body["kanji"],
        level=str(body["level"]),
        task_type=task_type,
        max_new_tokens=body.get("maxNewTokens", defaults.max_new_tokens),
        do_sample=body.get("doSample", defaults.do_sample),
        temperature=body.get("temperature", defaults.temperature),
        top_p=body.get("topP", defaults.top_p),
        top_k=body.get("topK", defaults.top_k),
        repetition_penalty=body.get("repetitionPenalty", defaults.repetition_penalty),
        seed=body.get("seed", defaults.seed),
    )

    try:
        backend = _get_backend()
    except ValueError as e:
        _log.error("Backend unavailable: %s", e)
        return JSONResponse({"error": "Failed to generate question"}, status_code=500)

    try:
        raw = await request_output(backend, gen_request, get_settings().request_timeout)
    except GenerationFailed as e:
        _log.warning("Raw generation failed: %s", e)
        return JSONResponse({"error": "Failed to generate question"}, status_code=500)
    return {"output": raw}


# ── API: Quiz sessions ────────────────────────────────────────────────────

@app.post("/api/session/start")
async def api_session_start(request: Request):
    body = await request.json() if await request.body() else {}
    s = get_settings()
    level = _check_level(body.get("level", s.default_level))

    try:
        backend = _get_backend()
    except ValueError as e:
        raise HTTPException(500, f"Backend unavailable: {e}")

    while len(_sessions) >= MAX_SESSIONS:
        oldest = next(iter(_sessions))
        _log.info("Session limit reached, dropping %s", oldest)
        del _sessions[oldest]

    session_id = uuid.uuid4().hex
    _sessions[session_id] = QuizSession(
        backend,
        get_kanji_data(),
        level=level,
        max_new_tokens=s.max_new_tokens,
        timeout=s.request_timeout,
    )
    session = _sessions[session_id]
    return {"session_id": session_id, "level": level, "pool_size": session.pool_size}


@app.get("/api/session/{session_id}")
async def api_session_state(session_id: str):
    return _get_session(session_id).snapshot()


@app.post("/api/session/{session_id}/level")
async def api_session_level(session_id: str, request: Request):
    body = await request.json()
    session = _get_idle_session(session_id)
    session.level = _check_level(body.get("level"))
    session.reset()
    return {"level": session.level, "pool_size": session.pool_size}


@app.post("/api/session/{session_id}/generate")
async def api_session_generate(session_id: str):
    session = _get_idle_session(session_id)
    await session.generate_one()
    return session.snapshot()


@app.post("/api/session/{session_id}/select")
async def api_session_select(session_id: str, request: Request):
    body = await request.json()
    choice = body.get("choice")
    if not isinstance(choice, str):
        raise HTTPException(400, "choice must be a string")

    session = _get_session(session_id)
    result = session.select(choice)
    if result is None:
        raise HTTPException(409, "No open question to answer")
    return session.snapshot()


@app.post("/api/session/{session_id}/reset")
async def api_session_reset(session_id: str):
    session = _get_idle_session(session_id)
    session.reset()
    return session.snapshot()


@app.delete("/api/session/{session_id}")
async def api_session_end(session_id: str):
    _get_session(session_id)
    del _sessions[session_id]
    return {"ok": True}


# ── API: Settings ─────────────────────────────────────────────────────────

@app.get("/api/settings")
async def api_get_settings():
    return get_settings().to_dict()


@app.put("/api/settings")
async def api_update_settings(request: Request):
    body = await request.json()
    s = get_settings()
    known = {f.name for f in Settings.__dataclass_fields__.values()}
    # Check every value before applying any
    updates = {k: _check_setting(k, v) for k, v in body.items() if k in known}
    for k, v in updates.items():
        setattr(s, k, v)
    save_settings(s)
    return s.to_dict()
