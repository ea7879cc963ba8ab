"""Pick a kanji and a task type, ask the backend, parse what comes back."""
from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Mapping
from typing import TYPE_CHECKING

from kanji_quiz.errors import GenerationFailed
from kanji_quiz.models import GeneratedQuestion, GenerationRequest, KanjiEntry, KanjiPick
from kanji_quiz.parsers.mcq_parser import parse_mcq_output
from kanji_quiz.pool import get_kanji_pool_for_level, pick_one

if TYPE_CHECKING:
    from kanji_quiz.providers.base import GenerationBackend

_log = logging.getLogger("kanji_quiz.qgen")

TASK_TYPES = (
    "mcq_compound_meaning",
    "mcq_base_meaning",
    "mcq_reading",
)

DEFAULT_TASK_TYPE = "mcq_compound_meaning"


def pick_task_type(rng: random.Random | None = None) -> str:
    return (rng or random).choice(TASK_TYPES)


def build_request(pick: KanjiPick, level: str, task_type: str, max_new_tokens: int = 220) -> GenerationRequest:
    return GenerationRequest(
        kanji=pick.kanji,
        level=level,
        task_type=task_type,
        max_new_tokens=max_new_tokens,
        do_sample=False,
    )


async def request_output(
    backend: GenerationBackend,
    request: GenerationRequest,
    timeout: float | None = None,
) -> str:
    """Call the backend, raising GenerationFailed on no output or timeout."""
    try:
        raw = await asyncio.wait_for(backend.generate(request), timeout=timeout)
    except asyncio.TimeoutError:
        raise GenerationFailed(f"{backend.name()} timed out after {timeout}s") from None
    if not raw:
        raise GenerationFailed(f"{backend.name()} returned no output")
    return raw


async def generate_question(
    backend: GenerationBackend,
    data: Mapping[str, KanjiEntry],
    level: str,
    rng: random.Random | None = None,
    max_new_tokens: int = 220,
    timeout: float | None = None,
) -> GeneratedQuestion:
    """Generate one question for *level*.

    Raises NoEligibleKanji before the backend is touched when the level has
    no kanji, GenerationFailed when the backend gives nothing usable, and an
    UnparsableOutput subclass when the text does not parse.
    """
    pool = get_kanji_pool_for_level(data, level)
    picked = pick_one(pool, rng)
    task_type = pick_task_type(rng)
    _log.info("Generate %s for %s (N%s, pool %d)", task_type, picked.kanji, level, len(pool))

    request = build_request(picked, level, task_type, max_new_tokens)
    raw = await request_output(backend, request, timeout)
    question = parse_mcq_output(picked.kanji, raw)
    _log.info("  OK: %s", question.prompt)
    return question
