from __future__ import annotations

from collections.abc import Mapping

import httpx

from kanji_quiz.models import GenerationRequest, KanjiEntry
from kanji_quiz.prompts import format_prompt
from kanji_quiz.providers.base import GenerationBackend, log


class OllamaBackend(GenerationBackend):
    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model: str = "qwen3:8b",
        kanji_data: Mapping[str, KanjiEntry] | None = None,
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.kanji_data = kanji_data or {}
        self.timeout = timeout
        self._transport = transport

    @staticmethod
    def options(request: GenerationRequest) -> dict:
        opts: dict = {
            "num_predict": request.max_new_tokens,
            # Greedy decoding when sampling is off
            "temperature": request.temperature if request.do_sample else 0.0,
            "top_p": request.top_p,
            "repeat_penalty": request.repetition_penalty,
        }
        if request.top_k > 0:
            opts["top_k"] = request.top_k
        if request.seed >= 0:
            opts["seed"] = request.seed
        return opts

    async def _generate(self, request: GenerationRequest) -> str:
        prompt = format_prompt(
            request.task_type,
            request.kanji,
            request.level,
            self.kanji_data.get(request.kanji),
        )
        log.info("── PROMPT (%s) ──\n%s", self.model, prompt)
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            resp = await client.post(
                f"{self.base_url}/api/generate",
                json={
                    "model": self.model,
                    "prompt": prompt,
                    "stream": False,
                    "think": False,
                    "options": self.options(request),
                },
            )
            resp.raise_for_status()
            data = resp.json()
        return data["response"]

    def name(self) -> str:
        return f"ollama/{self.model}"
