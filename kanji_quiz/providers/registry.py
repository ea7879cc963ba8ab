from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from kanji_quiz.models import KanjiEntry

if TYPE_CHECKING:
    from kanji_quiz.config import Settings
    from kanji_quiz.providers.base import GenerationBackend

BACKENDS = ("gradio", "ollama")


def build_backend(settings: Settings, kanji_data: Mapping[str, KanjiEntry] | None = None) -> GenerationBackend:
    if settings.backend == "gradio":
        from kanji_quiz.providers.gradio_space import GradioBackend
        return GradioBackend(
            space=settings.gradio_space,
            api_name=settings.gradio_api_name,
            api_prefix=settings.gradio_api_prefix,
            timeout=settings.request_timeout,
        )
    elif settings.backend == "ollama":
        from kanji_quiz.providers.llm_ollama import OllamaBackend
        return OllamaBackend(
            base_url=settings.ollama_url,
            model=settings.ollama_model,
            kanji_data=kanji_data,
            timeout=settings.request_timeout,
        )
    raise ValueError(f"Unknown backend: {settings.backend}")
