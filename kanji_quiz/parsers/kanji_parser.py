"""Load the kanji reference table into KanjiEntry objects.

The file is a JSON object keyed by kanji, in the layout of the common
jouyou dataset:

  "水": {"jlpt_new": 5, "meanings": ["Water"], "readings_on": ["すい"], ...}

Keys other than ``jlpt_new``, ``meanings``, ``readings_on`` and
``readings_kun`` are ignored.
"""
from __future__ import annotations

import json
from pathlib import Path

from kanji_quiz.models import KanjiEntry

BUNDLED_DATA = Path(__file__).resolve().parent.parent / "data" / "kanji.json"


def _coerce_level(value) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    return int(value)


def _strings(value) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(str(v) for v in value)


def parse_kanji_data(raw: dict) -> dict[str, KanjiEntry]:
    data: dict[str, KanjiEntry] = {}
    for kanji, meta in raw.items():
        meta = meta or {}
        data[kanji] = KanjiEntry(
            kanji=kanji,
            level=_coerce_level(meta.get("jlpt_new")),
            meanings=_strings(meta.get("meanings")),
            readings_on=_strings(meta.get("readings_on")),
            readings_kun=_strings(meta.get("readings_kun")),
        )
    return data


def parse_kanji_file(path: Path | None = None) -> dict[str, KanjiEntry]:
    path = path or BUNDLED_DATA
    return parse_kanji_data(json.loads(path.read_text(encoding="utf-8")))
