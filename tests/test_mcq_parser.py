"""Tests for turning backend text into questions."""
from __future__ import annotations

import pytest

from kanji_quiz.errors import (
    EmptyOutput,
    InvalidAnswerLetter,
    MissingAnswerMarker,
    UnparsableOutput,
    WrongChoiceCount,
)
from kanji_quiz.models import GeneratedQuestion
from kanji_quiz.parsers.mcq_parser import parse_mcq_output


def _parse_or_kind(kanji, raw):
    try:
        return parse_mcq_output(kanji, raw)
    except UnparsableOutput as e:
        return type(e)


class TestWellFormedOutput:
    def test_full_output(self, valid_output):
        q = parse_mcq_output("水", valid_output)
        assert q == GeneratedQuestion(
            kanji="水",
            prompt="Which meaning fits 水?",
            choices=("water", "fire", "wood", "metal"),
            answer="water",
        )

    def test_answer_is_choice_text_not_letter(self):
        raw = "Read 会社?\nA. かいしゃ\nB. あいしゃ\nC. かいじゃ\nD. がいしゃ\nAns: C"
        q = parse_mcq_output("会", raw)
        assert q.answer == "かいじゃ"
        assert q.answer in q.choices

    def test_lowercase_label_and_letter(self):
        raw = "Q?\nA. a\nB. b\nC. c\nD. d\nans:d"
        assert parse_mcq_output("水", raw).answer == "d"

    def test_answer_letter_padding(self):
        raw = "Q?\nA. a\nB. b\nC. c\nD. d\nAns:    b   "
        assert parse_mcq_output("水", raw).answer == "b"

    def test_windows_line_endings(self):
        raw = "Q?\r\nA. a\r\nB. b\r\nC. c\r\nD. d\r\nAns: B\r\n"
        q = parse_mcq_output("水", raw)
        assert q.choices == ("a", "b", "c", "d")
        assert q.answer == "b"

    def test_blank_lines_and_indentation_ignored(self):
        raw = "\n\n  Q?  \n\n   A. a\n\nB. b\n  C. c  \nD. d\n\n Ans: D \n"
        q = parse_mcq_output("水", raw)
        assert q.prompt == "Q?"
        assert q.choices == ("a", "b", "c", "d")
        assert q.answer == "d"

    def test_choices_kept_in_document_order(self):
        raw = "Q?\nC. third\nA. first\nD. fourth\nB. second\nAns: A"
        q = parse_mcq_output("水", raw)
        assert q.choices == ("third", "first", "fourth", "second")
        # Letter maps to position, not to the label on the line
        assert q.answer == "third"

    def test_non_choice_lines_skipped(self):
        raw = "Q?\nHint: think of rivers\nA. a\nB. b\nE. e\nC. c\nD. d\nAns: B"
        q = parse_mcq_output("水", raw)
        assert q.choices == ("a", "b", "c", "d")

    def test_choice_text_not_normalized(self):
        raw = "Q?\nA. Big  Water\nB. fire\nC. FIRE\nD. wood\nAns: A"
        q = parse_mcq_output("水", raw)
        assert q.choices == ("Big  Water", "fire", "FIRE", "wood")

    def test_label_needs_space_after_period(self):
        raw = "Q?\nA.a\nB. b\nC. c\nD. d\nAns: B"
        with pytest.raises(WrongChoiceCount):
            parse_mcq_output("水", raw)

    def test_lowercase_choice_labels_rejected(self):
        raw = "Q?\na. a\nb. b\nc. c\nd. d\nAns: A"
        with pytest.raises(WrongChoiceCount):
            parse_mcq_output("水", raw)

    def test_first_answer_line_wins(self):
        raw = "Q?\nA. a\nB. b\nC. c\nD. d\nAns: C\nAns: A"
        assert parse_mcq_output("水", raw).answer == "c"

    def test_lines_after_answer_ignored(self):
        raw = "Q?\nA. a\nB. b\nC. c\nD. d\nAns: A\nE. extra\nA. again"
        q = parse_mcq_output("水", raw)
        assert q.choices == ("a", "b", "c", "d")

    def test_first_line_is_always_the_prompt(self):
        raw = "A. a\nB. b\nC. c\nD. d\nAns: A"
        # "A. a" is taken as the prompt, leaving 3 choices
        with pytest.raises(WrongChoiceCount) as exc:
            parse_mcq_output("水", raw)
        assert exc.value.count == 3

    def test_duplicate_choices_accepted(self):
        raw = "Q?\nA. same\nB. same\nC. c\nD. d\nAns: B"
        q = parse_mcq_output("水", raw)
        assert q.choices == ("same", "same", "c", "d")
        assert q.answer == "same"


class TestFailures:
    def test_empty_string(self):
        with pytest.raises(EmptyOutput):
            parse_mcq_output("水", "")

    def test_whitespace_only(self):
        with pytest.raises(EmptyOutput):
            parse_mcq_output("水", "   \n\t\n")

    def test_only_trailing_content(self):
        with pytest.raises(EmptyOutput):
            parse_mcq_output("水", "\n---\nQ?\nA. a\nB. b\nC. c\nD. d\nAns: A")

    def test_three_choices(self):
        raw = "Q?\nA. a\nB. b\nC. c\nAns: A"
        with pytest.raises(WrongChoiceCount) as exc:
            parse_mcq_output("水", raw)
        assert exc.value.count == 3

    def test_five_choices(self):
        raw = "Q?\nA. a\nB. b\nC. c\nD. d\nA. again\nAns: A"
        with pytest.raises(WrongChoiceCount):
            parse_mcq_output("水", raw)

    def test_no_answer_line(self):
        raw = "Q?\nA. a\nB. b\nC. c\nD. d"
        with pytest.raises(MissingAnswerMarker):
            parse_mcq_output("水", raw)

    def test_answer_label_must_start_line(self):
        raw = "Q?\nA. a\nB. b\nC. c\nD. d\nThe Ans: A"
        with pytest.raises(MissingAnswerMarker):
            parse_mcq_output("水", raw)

    def test_answer_after_sentinel_not_seen(self):
        raw = "Q?\nA. a\nB. b\nC. c\nD. d\n---\nAns: A"
        with pytest.raises(MissingAnswerMarker):
            parse_mcq_output("水", raw)

    def test_invalid_letter_first_line(self):
        with pytest.raises(InvalidAnswerLetter) as exc:
            parse_mcq_output("水", "Ans: E\nA. a\nB. b\nC. c\nD. d")
        assert exc.value.letter == "E"

    def test_invalid_letter_after_choices(self):
        raw = "Q?\nA. a\nB. b\nC. c\nD. d\nAns: water"
        with pytest.raises(InvalidAnswerLetter):
            parse_mcq_output("水", raw)

    def test_empty_letter(self):
        raw = "Q?\nA. a\nB. b\nC. c\nD. d\nAns:"
        with pytest.raises(InvalidAnswerLetter):
            parse_mcq_output("水", raw)

    def test_all_failures_are_unparsable(self):
        for raw in ["", "no marker", "Ans: Z", "Q?\nA. a\nAns: A"]:
            with pytest.raises(UnparsableOutput):
                parse_mcq_output("水", raw)


class TestProperties:
    SAMPLES = [
        "",
        "Which meaning fits 水?\nA. water\nB. fire\nC. wood\nD. metal\nAns: A\n---\nnotes",
        "Q?\nA. a\nB. b\nC. c\nAns: A",
        "Q?\nA. a\nB. b\nC. c\nD. d",
        "Ans: E\nA. a\nB. b\nC. c\nD. d",
        "Q?\nD. d\nC. c\nB. b\nA. a\nAns: d",
        "Q?\nA. x\nB. x\nC. x\nD. x\nAns: C",
    ]

    def test_deterministic(self):
        for raw in self.SAMPLES:
            assert _parse_or_kind("水", raw) == _parse_or_kind("水", raw)

    def test_success_invariants(self):
        for raw in self.SAMPLES:
            result = _parse_or_kind("水", raw)
            if isinstance(result, GeneratedQuestion):
                assert len(result.choices) == 4
                assert result.answer in result.choices
                assert result.kanji == "水"

    def test_trailing_content_has_no_effect(self, valid_output):
        base = valid_output.split("\n---")[0]
        tails = [
            "",
            "\n---",
            "\n---\nAns: B",
            "\n---\nA. changed\nB. x\nC. y\nD. z\nAns: D",
            "\n--- garbage\n---\nmore",
        ]
        expected = parse_mcq_output("水", base)
        for tail in tails:
            assert parse_mcq_output("水", base + tail) == expected

    def test_input_not_modified(self, valid_output):
        before = str(valid_output)
        parse_mcq_output("水", valid_output)
        assert valid_output == before
