"""Parse free-text model output into a GeneratedQuestion.

The backend is expected to answer in this shape:

  Which meaning fits 水?
  A. water
  B. fire
  C. wood
  D. metal
  Ans: A
  ---
  anything after the sentinel is ignored

The rules below are the wire contract with the backend, so they are kept
literal: no case-folding of choices, no de-duplication, no reordering.
"""
from __future__ import annotations

import logging
import re

from kanji_quiz.errors import (
    EmptyOutput,
    InvalidAnswerLetter,
    MissingAnswerMarker,
    WrongChoiceCount,
)
from kanji_quiz.models import GeneratedQuestion

_log = logging.getLogger("kanji_quiz.parser")

SENTINEL = "\n---"
DEFAULT_PROMPT = "Question"

_ANSWER_LABEL = re.compile(r"^Ans:\s*", re.IGNORECASE)
_CHOICE_LABEL = re.compile(r"^[A-D]\.\s+")

ANSWER_INDEX = {"A": 0, "B": 1, "C": 2, "D": 3}


def _is_answer_line(line: str) -> bool:
    return _ANSWER_LABEL.match(line) is not None


def _is_choice_line(line: str) -> bool:
    return _CHOICE_LABEL.match(line) is not None


def _non_blank_lines(text: str) -> list[str]:
    return [line for line in (raw.strip() for raw in text.split("\n")) if line]


def parse_mcq_output(kanji: str, raw: str) -> GeneratedQuestion:
    """Turn *raw* backend text into a question about *kanji*.

    Raises a subclass of ``UnparsableOutput`` naming the first rule the
    text breaks.
    """
    body = raw.split(SENTINEL, 1)[0].strip()
    if not body:
        raise EmptyOutput("output is empty before the sentinel")

    lines = _non_blank_lines(body)

    ans_idx = next((i for i, line in enumerate(lines) if _is_answer_line(line)), None)
    if ans_idx is None:
        raise MissingAnswerMarker("no 'Ans:' line in output")

    letter = _ANSWER_LABEL.sub("", lines[ans_idx], count=1).strip().upper()
    index = ANSWER_INDEX.get(letter)
    if index is None:
        raise InvalidAnswerLetter(letter)

    content = lines[:ans_idx]
    prompt = content[0] if content else DEFAULT_PROMPT

    choices = tuple(
        _CHOICE_LABEL.sub("", line, count=1).strip()
        for line in content[1:]
        if _is_choice_line(line)
    )
    if len(choices) != 4:
        raise WrongChoiceCount(len(choices))

    if len(set(choices)) != len(choices):
        _log.warning("Duplicate choice text for %s: %s", kanji, list(choices))

    return GeneratedQuestion(
        kanji=kanji,
        prompt=prompt,
        choices=choices,
        answer=choices[index],
    )
