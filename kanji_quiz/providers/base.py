from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod

import httpx

from kanji_quiz.models import GenerationRequest

log = logging.getLogger("kanji_quiz.backend")


class GenerationBackend(ABC):
    """A text-generation service that writes MCQ text for one kanji.

    ``generate`` never raises for transport or envelope problems: every
    failure is logged and reported as ``None``.
    """

    async def generate(self, request: GenerationRequest) -> str | None:
        t0 = time.monotonic()
        try:
            text = await self._generate(request)
        except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError) as e:
            log.warning("%s failed for %s: %s: %s", self.name(), request.kanji, type(e).__name__, e)
            return None
        elapsed = time.monotonic() - t0
        if not text:
            log.warning("%s returned empty output for %s (%.1fs)", self.name(), request.kanji, elapsed)
            return None
        log.info("── RESPONSE (%s, %.1fs) ──\n%s", self.name(), elapsed, text)
        return text

    @abstractmethod
    async def _generate(self, request: GenerationRequest) -> str:
        ...

    @abstractmethod
    def name(self) -> str:
        ...
