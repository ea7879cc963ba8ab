from __future__ import annotations

import json
import os

import httpx

from kanji_quiz.models import GenerationRequest
from kanji_quiz.providers.base import GenerationBackend, log


def space_url(space: str) -> str:
    """Resolve ``owner/name`` to the Space's host; full URLs pass through."""
    space = space.strip()
    if space.startswith(("http://", "https://")):
        return space.rstrip("/")
    host = space.lower().replace("/", "-").replace("_", "-").replace(".", "-")
    return f"https://{host}.hf.space"


class GradioBackend(GenerationBackend):
    """Calls a Gradio app's generation endpoint through its HTTP API.

    A call is two requests: POST the positional inputs to
    ``<prefix>/call/<api_name>`` to get an event id, then read the event
    stream for that id until the ``complete`` (or ``error``) event.
    """

    def __init__(
        self,
        space: str = "",
        api_name: str = "generate_one",
        api_prefix: str = "/gradio_api",
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        space = space or os.environ.get("GRADIO_SPACE", "")
        if not space:
            raise ValueError("No Gradio space configured (set gradio_space or GRADIO_SPACE)")
        self.base_url = space_url(space)
        self.api_name = api_name.strip("/")
        self.api_prefix = "/" + api_prefix.strip("/") if api_prefix.strip("/") else ""
        self.timeout = timeout
        self._transport = transport
        token = os.environ.get("HF_TOKEN", "")
        self._headers = {"Authorization": f"Bearer {token}"} if token else {}

    @property
    def call_url(self) -> str:
        return f"{self.base_url}{self.api_prefix}/call/{self.api_name}"

    @staticmethod
    def payload(request: GenerationRequest) -> dict:
        return {
            "data": [
                request.kanji,
                str(request.level),
                request.task_type,
                request.max_new_tokens,
                request.do_sample,
                request.temperature,
                request.top_p,
                request.top_k,
                request.repetition_penalty,
                request.seed,
            ]
        }

    async def _generate(self, request: GenerationRequest) -> str:
        log.info("── REQUEST (%s) ── %s N%s %s", self.name(), request.kanji, request.level, request.task_type)
        async with httpx.AsyncClient(
            timeout=self.timeout,
            headers=self._headers,
            transport=self._transport,
        ) as client:
            resp = await client.post(self.call_url, json=self.payload(request))
            resp.raise_for_status()
            event_id = resp.json()["event_id"]

            event = None
            async with client.stream("GET", f"{self.call_url}/{event_id}") as resp:
                resp.raise_for_status()
                async for line in resp.aiter_lines():
                    if line.startswith("event:"):
                        event = line[len("event:"):].strip()
                    elif line.startswith("data:"):
                        body = line[len("data:"):].strip()
                        if event == "complete":
                            return _first_output(json.loads(body))
                        if event == "error":
                            raise ValueError(f"backend reported error: {body}")
        raise ValueError("event stream ended without a result")

    def name(self) -> str:
        return f"gradio/{self.base_url.removeprefix('https://')}"


def _first_output(data) -> str:
    raw = data[0] if isinstance(data, list) else data
    return "" if raw is None else str(raw)
