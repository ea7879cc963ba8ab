"""Shared test fixtures."""
from __future__ import annotations

import random

import pytest

from kanji_quiz.models import KanjiEntry


@pytest.fixture
def sample_data():
    """A small reference table with gaps: no N1 kanji, one untagged entry."""
    return {
        "水": KanjiEntry("水", 5, ("Water",), ("すい",), ("みず",)),
        "火": KanjiEntry("火", 5, ("Fire",), ("か",), ("ひ",)),
        "木": KanjiEntry("木", 5, ("Tree", "Wood"), ("もく", "ぼく"), ("き",)),
        "会": KanjiEntry("会", 4, ("Meeting", "Meet"), ("かい",), ("あ.う",)),
        "政": KanjiEntry("政", 3, ("Politics",), ("せい",), ()),
        "党": KanjiEntry("党", 2, (), ("とう",), ()),
        "璽": KanjiEntry("璽", None, ("Emperor's seal",), ("じ",), ()),
    }


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def valid_output():
    return (
        "Which meaning fits 水?\n"
        "A. water\n"
        "B. fire\n"
        "C. wood\n"
        "D. metal\n"
        "Ans: A\n"
        "---\n"
        "notes"
    )


@pytest.fixture
def kanji_json_content():
    """Minimal jouyou-format JSON for loader testing."""
    return """\
{
  "水": {"strokes": 4, "grade": 1, "jlpt_new": 5, "meanings": ["Water"], "readings_on": ["すい"], "readings_kun": ["みず"]},
  "政": {"strokes": 9, "grade": 5, "jlpt_new": 3, "meanings": ["Politics", "Government"], "readings_on": ["せい"]},
  "璽": {"strokes": 19, "grade": 8, "jlpt_new": null, "meanings": ["Emperor's seal"]},
  "勾": {"jlpt_new": null}
}
"""
