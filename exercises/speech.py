"""Comparison of a speech transcript with the sentence the learner repeated."""

import re

from .schemas import SpeechComparison, WordResult

_PUNCTUATION_RE = re.compile(r"[.,!?;:\"“”‘’'„‚«»\-–—]")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """Lower-case, drop punctuation and quotes, collapse whitespace."""
    text = _PUNCTUATION_RE.sub("", text.lower())
    return _WHITESPACE_RE.sub(" ", text).strip()


def compare_texts(expected: str, actual: str) -> SpeechComparison:
    """Compare a transcript with the expected sentence.

    The whole result is correct only when the normalized strings are equal.
    Word results compare expected words with the transcript position by
    position, so one dropped word marks the rest of the sentence wrong.
    """
    normalized_expected = normalize_text(expected)
    normalized_actual = normalize_text(actual)

    expected_words = normalized_expected.split(" ") if normalized_expected else []
    actual_words = normalized_actual.split(" ") if normalized_actual else []

    word_results = [
        WordResult(
            word=word,
            correct=i < len(actual_words) and actual_words[i] == word,
        )
        for i, word in enumerate(expected_words)
    ]

    return SpeechComparison(
        expected=expected,
        actual=actual,
        is_correct=normalized_expected == normalized_actual,
        word_results=word_results,
    )
