"""Sentence segmentation and tokenization.

Sentences end at runs of '.', '!' or '?', optionally followed by a single
closing quote. Abbreviations ("Dr.", "z.B.") and decimal numbers are not
recognised and will split a sentence early.
"""

import re

_CLOSING_QUOTES = "\"'“”»«’"
_SENTENCE_RE = re.compile(
    rf"[^.!?]+[.!?]+[{_CLOSING_QUOTES}]?|[.!?]+[{_CLOSING_QUOTES}]?|[^.!?]+$"
)
# Punctuation with no words of its own, e.g. the "." after a quoted "Hilfe!"
_BARE_RUN_RE = re.compile(rf"[.!?{_CLOSING_QUOTES}]+")
_WHITESPACE_SPLIT_RE = re.compile(r"(\s+)")


def segment(paragraph: str) -> list[str]:
    """Split a paragraph into sentences.

    A run of punctuation without words belongs to the sentence before it,
    or to the next one when it opens the paragraph, so joining the
    sentences with spaces gives back the paragraph's text.

    Args:
        paragraph: Raw paragraph text.

    Returns:
        Stripped, non-empty sentences in order. Empty for blank input.
    """
    if not paragraph.strip():
        return []
    spans: list[list[int]] = []
    lead: int | None = None
    for match in _SENTENCE_RE.finditer(paragraph):
        unit = match.group(0).strip()
        if not unit:
            continue
        if _BARE_RUN_RE.fullmatch(unit):
            if spans:
                spans[-1][1] = match.end()
            elif lead is None:
                lead = match.start()
            continue
        start = match.start() if lead is None else lead
        lead = None
        spans.append([start, match.end()])
    if lead is not None:
        spans.append([lead, len(paragraph)])
    return [paragraph[start:end].strip() for start, end in spans]


def segment_text(paragraphs: list[str]) -> list[str]:
    """Split every paragraph of a text and return all sentences in order."""
    sentences: list[str] = []
    for paragraph in paragraphs:
        sentences.extend(segment(paragraph))
    return sentences


def tokenize(sentence: str) -> list[str]:
    """Split a sentence into whitespace-delimited tokens."""
    return sentence.split()


def split_preserving_whitespace(sentence: str) -> list[str]:
    """Split a sentence into tokens and the whitespace runs between them.

    Joining the result gives back the sentence unchanged. Whitespace parts
    sit at odd positions when the sentence does not start with whitespace.
    """
    return [part for part in _WHITESPACE_SPLIT_RE.split(sentence) if part]
