from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path

from kanji_quiz.parsers.kanji_parser import BUNDLED_DATA

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.json"

DEFAULTS = {
    "backend": "gradio",
    "gradio_space": "",
    "gradio_api_name": "generate_one",
    "gradio_api_prefix": "/gradio_api",
    "ollama_url": "http://localhost:11434",
    "ollama_model": "qwen3:8b",
    "kanji_data_file": "",
    "default_level": "5",
    "max_new_tokens": 220,
    "request_timeout": 120.0,
}


@dataclass
class Settings:
    backend: str = DEFAULTS["backend"]
    gradio_space: str = DEFAULTS["gradio_space"]
    gradio_api_name: str = DEFAULTS["gradio_api_name"]
    gradio_api_prefix: str = DEFAULTS["gradio_api_prefix"]
    ollama_url: str = DEFAULTS["ollama_url"]
    ollama_model: str = DEFAULTS["ollama_model"]
    kanji_data_file: str = DEFAULTS["kanji_data_file"]
    default_level: str = DEFAULTS["default_level"]
    max_new_tokens: int = DEFAULTS["max_new_tokens"]
    request_timeout: float = DEFAULTS["request_timeout"]

    @property
    def project_root(self) -> Path:
        return Path(__file__).resolve().parent.parent

    @property
    def kanji_data_path(self) -> Path:
        """Configured dataset (relative to the project root), else the bundled one."""
        if self.kanji_data_file:
            return self.project_root / self.kanji_data_file
        return BUNDLED_DATA

    def to_dict(self) -> dict:
        return asdict(self)


def load_settings() -> Settings:
    if CONFIG_PATH.exists():
        raw = json.loads(CONFIG_PATH.read_text())
        known = {f.name for f in Settings.__dataclass_fields__.values()}
        filtered = {k: v for k, v in raw.items() if k in known}
        if "default_level" in filtered:
            filtered["default_level"] = str(filtered["default_level"])
        return Settings(**filtered)
    return Settings()


def save_settings(settings: Settings) -> None:
    CONFIG_PATH.write_text(json.dumps(settings.to_dict(), indent=4) + "\n")
