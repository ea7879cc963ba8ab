"""One learner's quiz round: generate a question, take one answer."""
from __future__ import annotations

import logging
import random
from collections.abc import Mapping
from typing import TYPE_CHECKING

from kanji_quiz.errors import QuizError, UnparsableOutput
from kanji_quiz.models import GeneratedQuestion, KanjiEntry, QuizRoundState
from kanji_quiz.pool import get_kanji_pool_for_level
from kanji_quiz.question_generator import generate_question

if TYPE_CHECKING:
    from kanji_quiz.providers.base import GenerationBackend

_log = logging.getLogger("kanji_quiz.session")

CORRECT = "correct"
WRONG = "wrong"


class QuizSession:
    def __init__(
        self,
        backend: GenerationBackend,
        kanji_data: Mapping[str, KanjiEntry],
        level: str = "5",
        rng: random.Random | None = None,
        max_new_tokens: int = 220,
        timeout: float | None = 120.0,
    ):
        self.backend = backend
        self.kanji_data = kanji_data
        self.level = level
        self.rng = rng
        self.max_new_tokens = max_new_tokens
        self.timeout = timeout
        self.state = QuizRoundState()

    @property
    def pool_size(self) -> int:
        return len(get_kanji_pool_for_level(self.kanji_data, self.level))

    def reset(self) -> None:
        self.state.question = None
        self.state.selection = None
        self.state.result = None
        self.state.error = None

    async def generate_one(self) -> GeneratedQuestion | None:
        """Replace the current round with a freshly generated question.

        Returns the question, or None with ``state.error`` set.  A call made
        while another is in flight is ignored and returns None.
        """
        if self.state.loading:
            _log.info("Generation already in flight for N%s, ignoring", self.level)
            return None

        self.reset()
        self.state.loading = True
        try:
            question = await generate_question(
                self.backend,
                self.kanji_data,
                self.level,
                rng=self.rng,
                max_new_tokens=self.max_new_tokens,
                timeout=self.timeout,
            )
        except UnparsableOutput as e:
            _log.warning("Unparsable output (%s): %s", type(e).__name__, e)
            self.state.error = e.user_message
            return None
        except QuizError as e:
            _log.warning("%s: %s", type(e).__name__, e)
            self.state.error = e.user_message
            return None
        finally:
            self.state.loading = False

        self.state.question = question
        return question

    def select(self, choice: str) -> str | None:
        """Grade *choice*; None when there is nothing to answer."""
        question = self.state.question
        if question is None or self.state.result is not None:
            _log.debug("Selection %r ignored", choice)
            return None
        self.state.selection = choice
        self.state.result = CORRECT if choice == question.answer else WRONG
        return self.state.result

    def snapshot(self) -> dict:
        s = self.state
        question = s.question.to_dict() if s.question else None
        if question is not None and s.result is None:
            del question["answer"]
        return {
            "level": self.level,
            "question": question,
            "selection": s.selection,
            "result": s.result,
            "error": s.error,
            "loading": s.loading,
        }
