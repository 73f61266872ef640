"""Shared utilities for exercise generation.

Two kinds of randomness are used and kept apart on purpose:

- seeded_shuffle(): reproducible order derived from the sentence text, used
  wherever a reload of the same text must show the same exercise layout
  (which words become gaps, the initial word bank).
- shuffle(): plain random order for transient presentation details
  (quiz option order, distractor choice, the order-mode word pool).
"""

import random
import re
from collections.abc import Iterable, Sequence
from typing import TypeVar

T = TypeVar("T")

_TOKEN_RE = re.compile(r"^(\W*)(.*?)(\W*)$", re.DOTALL)

_LCG_MULTIPLIER = 1103515245
_LCG_INCREMENT = 12345
_LCG_MASK = 0x7FFFFFFF


def string_hash(text: str) -> int:
    """Hash a string to a non-negative 32-bit seed.

    Polynomial rolling hash (h * 31 + code unit) over UTF-16 code units,
    wrapped to a signed 32-bit integer at every step, then made absolute.
    Iterating UTF-16 units keeps seeds identical to the browser client.
    """
    data = text.encode("utf-16-le", "surrogatepass")
    h = 0
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = (h * 31 + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


class SeededRandom:
    """Linear congruential generator producing floats in [0, 1]."""

    def __init__(self, seed: int):
        self.state = seed & _LCG_MASK

    def random(self) -> float:
        self.state = (self.state * _LCG_MULTIPLIER + _LCG_INCREMENT) & _LCG_MASK
        return self.state / _LCG_MASK


def seeded_shuffle(items: Iterable[T], seed: int) -> list[T]:
    """Return a Fisher-Yates shuffled copy of items driven by a seeded LCG.

    Args:
        items: Items to shuffle (not modified).
        seed: Seed, usually string_hash() of the sentence.

    Returns:
        New list; identical for identical items and seed.
    """
    result = list(items)
    rng = SeededRandom(seed)
    for i in range(len(result) - 1, 0, -1):
        # random() can return exactly 1.0, keep j in range
        j = min(int(rng.random() * (i + 1)), i)
        result[i], result[j] = result[j], result[i]
    return result


def shuffle(items: Iterable[T]) -> list[T]:
    """Return a randomly shuffled copy of items (unseeded)."""
    result = list(items)
    random.shuffle(result)
    return result


def split_token(token: str) -> tuple[str, str, str]:
    """Split a token into (leading punctuation, word, trailing punctuation).

    Examples:
        "Kino." -> ("", "Kino", ".")
        "„Hallo!“" -> ("„", "Hallo", "!“")
    """
    match = _TOKEN_RE.match(token)
    if match is None:
        return "", token, ""
    return match.group(1), match.group(2), match.group(3)


def clean_word(token: str) -> str:
    """Strip leading and trailing punctuation from a token."""
    return split_token(token)[1]


def answers_match(given: str | None, expected: str) -> bool:
    """Case-insensitive, whitespace-trimmed answer comparison."""
    if given is None:
        return False
    return given.strip().lower() == expected.strip().lower()


def select_distractors(
    correct_answer: str,
    answer_pool: Sequence[str],
    count: int = 3,
) -> list[str]:
    """Sample distractor answers without replacement.

    Args:
        correct_answer: The answer that must not appear among distractors.
        answer_pool: All candidate answers (duplicates are ignored).
        count: Number of distractors wanted.

    Returns:
        Up to count unique answers different from correct_answer.
    """
    candidates = list(dict.fromkeys(a for a in answer_pool if a != correct_answer))
    return random.sample(candidates, min(count, len(candidates)))
