from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class KanjiEntry:
    kanji: str
    level: int | None  # JLPT level, None when the kanji is outside the JLPT lists
    meanings: tuple[str, ...] = ()
    readings_on: tuple[str, ...] = ()
    readings_kun: tuple[str, ...] = ()


@dataclass(frozen=True)
class KanjiPick:
    kanji: str
    meaning: str


@dataclass
class GenerationRequest:
    kanji: str
    level: str
    task_type: str  # mcq_compound_meaning | mcq_base_meaning | mcq_reading
    max_new_tokens: int = 200
    do_sample: bool = False
    temperature: float = 0.6
    top_p: float = 0.9
    top_k: int = 0
    repetition_penalty: float = 1.1
    seed: int = -1  # -1 lets the backend pick


@dataclass(frozen=True)
class GeneratedQuestion:
    kanji: str
    prompt: str
    choices: tuple[str, ...]
    answer: str

    def to_dict(self) -> dict:
        return {
            "kanji": self.kanji,
            "prompt": self.prompt,
            "choices": list(self.choices),
            "answer": self.answer,
        }


@dataclass
class QuizRoundState:
    question: GeneratedQuestion | None = None
    selection: str | None = None
    result: str | None = None  # correct | wrong
    error: str | None = None
    loading: bool = False
