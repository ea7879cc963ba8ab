"""Prompt templates for backends that take a plain text prompt."""
from __future__ import annotations

from kanji_quiz.models import KanjiEntry

OUTPUT_FORMAT = """\
Respond in exactly this format and nothing else:
<one line question>
A. <choice>
B. <choice>
C. <choice>
D. <choice>
Ans: <letter of the correct choice>
---
"""

COMPOUND_MEANING_PROMPT = """\
You are writing a JLPT N{level} kanji quiz question.

Kanji: {kanji}
Meanings: {meanings}

Pick one common compound word (熟語) that contains {kanji} and is suitable \
for an N{level} learner. Ask what that compound means. Give exactly 4 English \
choices: the correct meaning and 3 plausible but wrong meanings. Write the \
compound in the question line.

""" + OUTPUT_FORMAT

BASE_MEANING_PROMPT = """\
You are writing a JLPT N{level} kanji quiz question.

Kanji: {kanji}
Meanings: {meanings}

Ask what the kanji {kanji} means on its own. Give exactly 4 short English \
choices: the correct meaning and 3 meanings of other N{level} kanji.

""" + OUTPUT_FORMAT

READING_PROMPT = """\
You are writing a JLPT N{level} kanji quiz question.

Kanji: {kanji}
On readings: {readings_on}
Kun readings: {readings_kun}

Pick one common word written with {kanji} and ask how it is read. Give \
exactly 4 choices written in hiragana: the correct reading and 3 readings \
that a learner could confuse with it.

""" + OUTPUT_FORMAT

PROMPTS = {
    "mcq_compound_meaning": COMPOUND_MEANING_PROMPT,
    "mcq_base_meaning": BASE_MEANING_PROMPT,
    "mcq_reading": READING_PROMPT,
}


def _join(values) -> str:
    return ", ".join(values) if values else "(unknown)"


def format_prompt(task_type: str, kanji: str, level: str, entry: KanjiEntry | None = None) -> str:
    template = PROMPTS[task_type]
    return template.format(
        kanji=kanji,
        level=level,
        meanings=_join(entry.meanings if entry else ()),
        readings_on=_join(entry.readings_on if entry else ()),
        readings_kun=_join(entry.readings_kun if entry else ()),
    )
