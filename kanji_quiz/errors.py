"""Quiz failure kinds.

Everything here is reportable: the session turns each kind into a
``user_message`` instead of letting it escape.  Parse failures share one
surfaced message but stay distinct classes so logs show which rule failed.
"""
from __future__ import annotations


class QuizError(Exception):
    user_message = "Something went wrong. Please try again."


class NoEligibleKanji(QuizError):
    user_message = "No kanji found for this JLPT level."


class GenerationFailed(QuizError):
    user_message = "Failed to generate question from API."


class GenerationInProgress(QuizError):
    user_message = "A question is already being generated."


class UnparsableOutput(QuizError):
    user_message = "API returned an unexpected format. Please try again."


class EmptyOutput(UnparsableOutput):
    pass


class MissingAnswerMarker(UnparsableOutput):
    pass


class WrongChoiceCount(UnparsableOutput):
    def __init__(self, count: int):
        super().__init__(f"expected 4 choices, got {count}")
        self.count = count


class InvalidAnswerLetter(UnparsableOutput):
    def __init__(self, letter: str):
        super().__init__(f"answer letter must be A-D (got {letter!r})")
        self.letter = letter
