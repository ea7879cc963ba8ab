"""Level-filtered kanji pools and random picking."""
from __future__ import annotations

import random
from collections.abc import Mapping, Sequence
from typing import TypeVar

from kanji_quiz.errors import NoEligibleKanji
from kanji_quiz.models import KanjiEntry, KanjiPick

LEVELS = ("5", "4", "3", "2", "1")

T = TypeVar("T")


def get_kanji_pool_for_level(data: Mapping[str, KanjiEntry], level: str) -> list[KanjiPick]:
    """Kanji tagged with *level*, in dataset order.

    Entries without a level never match.  *level* must be numeric; checking
    that is up to the caller.
    """
    wanted = int(level)
    return [
        KanjiPick(kanji=kanji, meaning=entry.meanings[0] if entry.meanings else "")
        for kanji, entry in data.items()
        if entry.level is not None and entry.level == wanted
    ]


def pick_one(pool: Sequence[T], rng: random.Random | None = None) -> T:
    if not pool:
        raise NoEligibleKanji("kanji pool is empty")
    return (rng or random).choice(pool)


def pool_sizes(data: Mapping[str, KanjiEntry]) -> dict[str, int]:
    return {level: len(get_kanji_pool_for_level(data, level)) for level in LEVELS}
