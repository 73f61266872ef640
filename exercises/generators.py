"""Exercise generators that turn source text and vocabulary into exercises.

The functions here are pure: they take plain data and return plain data,
with no access to stores or persisted state. Gap placement and the initial
word bank are seeded from the sentence text so they survive reloads; the
order-mode pool and quiz options use unseeded randomness.
"""

import itertools
import math
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from typing import Generic, TypeVar

from models import CardsDirection, VocabEntry

from .base import (
    clean_word,
    seeded_shuffle,
    select_distractors,
    shuffle,
    split_token,
    string_hash,
)
from .config import GapConfig, OrderConfig, QuizConfig
from .schemas import GapSegment, GapTemplate, OrderExercise, QuizQuestion, TextSegment
from .segmentation import segment_text, split_preserving_whitespace, tokenize

C = TypeVar("C")  # Config type
E = TypeVar("E")  # Exercise type


# =============================================================================
# Gap Selection
# =============================================================================


def make_hint(word: str) -> str:
    """Return the first letter of a word followed by underscores."""
    if not word:
        return ""
    return word[0] + "_" * (len(word) - 1)


def max_gaps_for(eligible_count: int, config: GapConfig) -> int:
    """Number of gaps a sentence with eligible_count eligible words gets.

    Returns 0 when the sentence is too short to exercise.
    """
    if eligible_count < config.min_eligible_words:
        return 0
    # round() absorbs float noise such as 10 * 0.3 == 3.0000000000000004
    wanted = math.ceil(round(eligible_count * config.gap_ratio, 9))
    return min(config.max_gaps, max(1, wanted))


def build_gap_template(
    sentence: str,
    counter: Iterator[int] | None = None,
    config: GapConfig | None = None,
    sentence_index: int = 0,
) -> GapTemplate | None:
    """Blank out a deterministic subset of a sentence's words.

    Args:
        sentence: The sentence to build a template from.
        counter: Gap ID source shared by all sentences of a text, so IDs
            never collide across sentences. A fresh counter starting at 0 is
            used when omitted.
        config: Gap selection settings.
        sentence_index: Position of the sentence in its text.

    Returns:
        The template, or None if the sentence has too few eligible words or
        no gap could be placed.
    """
    config = config or GapConfig()
    if counter is None:
        counter = itertools.count()

    parts = split_preserving_whitespace(sentence)
    eligible = [
        word
        for word in (clean_word(p) for p in parts if not p.isspace())
        if len(word) >= config.min_word_length
    ]

    max_gaps = max_gaps_for(len(eligible), config)
    if max_gaps == 0:
        return None

    seed = string_hash(sentence)
    unique_words = list(dict.fromkeys(word.lower() for word in eligible))
    chosen = set(seeded_shuffle(unique_words, seed)[:max_gaps])

    segments: list[TextSegment | GapSegment] = []
    gapped: set[str] = set()
    pending = ""

    for part in parts:
        if part.isspace():
            pending += part
            continue

        lead, word, trail = split_token(part)
        key = word.lower()
        if (
            len(word) < config.min_word_length
            or key not in chosen
            or key in gapped
        ):
            pending += part
            continue

        gapped.add(key)
        pending += lead
        if pending:
            segments.append(TextSegment(content=pending))
        segments.append(
            GapSegment(
                gap_id=next(counter),
                original_word=word,
                hint=make_hint(word),
            )
        )
        pending = trail

    if pending:
        segments.append(TextSegment(content=pending))

    gap_words = [s.original_word for s in segments if isinstance(s, GapSegment)]
    if not gap_words:
        return None

    return GapTemplate(
        sentence=sentence,
        sentence_index=sentence_index,
        segments=segments,
        word_bank=seeded_shuffle(gap_words, seed),
    )


def build_gap_exercise(
    paragraphs: list[str],
    config: GapConfig | None = None,
) -> list[GapTemplate]:
    """Build gap templates for every usable sentence of a text.

    Gap IDs are assigned from one counter across the whole text.
    """
    counter = itertools.count()
    templates = []
    for index, sentence in enumerate(segment_text(paragraphs)):
        template = build_gap_template(sentence, counter, config, sentence_index=index)
        if template is not None:
            templates.append(template)
    return templates


# =============================================================================
# Word Order
# =============================================================================


def prepare_order_exercise(
    sentence: str,
    config: OrderConfig | None = None,
) -> OrderExercise | None:
    """Prepare a word-order exercise, or None if the sentence is too short."""
    config = config or OrderConfig()
    words = tokenize(sentence)
    if len(words) < config.min_tokens:
        return None
    return OrderExercise(
        sentence=sentence,
        correct_order=words,
        shuffled_pool=shuffle(words),
    )


def is_correct_order(placed: list[str], correct_order: list[str]) -> bool:
    """Exact comparison of the two word sequences joined by single spaces."""
    return " ".join(placed) == " ".join(correct_order)


def sentence_has_vocabulary(sentence: str, vocabulary_terms: Iterable[str]) -> bool:
    """Check whether any token of the sentence is one of the given terms."""
    terms = {term.strip().lower() for term in vocabulary_terms if term.strip()}
    return any(clean_word(token).lower() in terms for token in tokenize(sentence))


def eligible_order_sentences(
    paragraphs: list[str],
    vocabulary_terms: Iterable[str] | None = None,
    config: OrderConfig | None = None,
) -> list[str]:
    """Return the sentences of a text usable for word-order practice.

    Args:
        paragraphs: The text's paragraphs.
        vocabulary_terms: Saved words of the learner. When given and the
            config requires vocabulary, only sentences containing one of them
            are kept.
        config: Order settings.

    Returns:
        Eligible sentences in text order.
    """
    config = config or OrderConfig()
    terms = list(vocabulary_terms) if vocabulary_terms is not None else None
    eligible = []
    for sentence in segment_text(paragraphs):
        if len(tokenize(sentence)) < config.min_tokens:
            continue
        if config.require_vocabulary and terms is not None:
            if not sentence_has_vocabulary(sentence, terms):
                continue
        eligible.append(sentence)
    return eligible


# =============================================================================
# Flashcard Quiz
# =============================================================================


def unique_answer_count(vocabulary: list[VocabEntry], direction: CardsDirection) -> int:
    """Count distinct answer values for the given direction."""
    return len({entry.answer_for(direction) for entry in vocabulary})


def can_generate_quiz(
    vocabulary: list[VocabEntry],
    direction: CardsDirection,
    config: QuizConfig | None = None,
) -> bool:
    """Check that there are enough entries and distinct answers for a quiz."""
    config = config or QuizConfig()
    return (
        len(vocabulary) >= config.min_entries
        and unique_answer_count(vocabulary, direction) >= config.total_options
    )


def build_question(
    entry: VocabEntry,
    answer_pool: list[str],
    direction: CardsDirection,
    config: QuizConfig | None = None,
) -> QuizQuestion | None:
    """Build one question for an entry with distractors from answer_pool.

    Returns None if the pool does not hold enough distinct wrong answers.
    """
    config = config or QuizConfig()
    correct_answer = entry.answer_for(direction)
    num_wrong_needed = config.total_options - 1

    distractors = select_distractors(correct_answer, answer_pool, num_wrong_needed)
    if len(distractors) < num_wrong_needed:
        return None

    options = [correct_answer] + distractors
    if config.shuffle_options:
        options = shuffle(options)

    return QuizQuestion(
        subject_id=entry.id,
        prompt_text=entry.prompt_for(direction),
        correct_answer=correct_answer,
        options=options,
    )


def generate_questions(
    vocabulary: list[VocabEntry],
    direction: CardsDirection,
    config: QuizConfig | None = None,
) -> list[QuizQuestion]:
    """Generate one question per vocabulary entry, in random order.

    Returns an empty list when the vocabulary cannot support a quiz.
    """
    config = config or QuizConfig()
    if not can_generate_quiz(vocabulary, direction, config):
        return []

    answer_pool = [entry.answer_for(direction) for entry in vocabulary]
    questions = []
    for entry in shuffle(vocabulary):
        question = build_question(entry, answer_pool, direction, config)
        if question is not None:
            questions.append(question)
    return questions


# =============================================================================
# Generator Classes
# =============================================================================


class ExerciseGenerator(ABC, Generic[C, E]):
    """Abstract base class for exercise generators bound to one source."""

    def __init__(self, config: C):
        self.config = config

    @abstractmethod
    def generate(self) -> list[E]:
        """Generate all exercise items for the source (may be empty)."""
        pass

    @abstractmethod
    def can_generate(self) -> bool:
        """Check if at least one exercise item can be generated."""
        pass

    @property
    @abstractmethod
    def source_item_count(self) -> int:
        """Size of the source set, used to detect source changes."""
        pass


class GapGenerator(ExerciseGenerator[GapConfig, GapTemplate]):
    """Generates gap templates for the fill and write modes."""

    def __init__(self, paragraphs: list[str], config: GapConfig | None = None):
        super().__init__(config or GapConfig())
        self.paragraphs = paragraphs

    @property
    def source_item_count(self) -> int:
        return len(segment_text(self.paragraphs))

    def can_generate(self) -> bool:
        return bool(self.generate())

    def generate(self) -> list[GapTemplate]:
        return build_gap_exercise(self.paragraphs, self.config)


class OrderGenerator(ExerciseGenerator[OrderConfig, OrderExercise]):
    """Generates word-order exercises for the eligible sentences of a text."""

    def __init__(
        self,
        paragraphs: list[str],
        vocabulary_terms: Iterable[str] | None = None,
        config: OrderConfig | None = None,
    ):
        super().__init__(config or OrderConfig())
        self.paragraphs = paragraphs
        self.vocabulary_terms = (
            list(vocabulary_terms) if vocabulary_terms is not None else None
        )

    @property
    def sentences(self) -> list[str]:
        return eligible_order_sentences(
            self.paragraphs, self.vocabulary_terms, self.config
        )

    @property
    def source_item_count(self) -> int:
        return len(self.sentences)

    def can_generate(self) -> bool:
        return self.source_item_count > 0

    def generate(self) -> list[OrderExercise]:
        exercises = []
        for sentence in self.sentences:
            exercise = prepare_order_exercise(sentence, self.config)
            if exercise is not None:
                exercises.append(exercise)
        return exercises

    def generate_for(self, sentence: str) -> OrderExercise | None:
        """Reshuffle a single sentence."""
        return prepare_order_exercise(sentence, self.config)


class QuizGenerator(ExerciseGenerator[QuizConfig, QuizQuestion]):
    """Generates flashcard quiz questions for one direction."""

    def __init__(
        self,
        vocabulary: list[VocabEntry],
        direction: CardsDirection,
        config: QuizConfig | None = None,
    ):
        super().__init__(config or QuizConfig())
        self.vocabulary = vocabulary
        self.direction = direction

    @property
    def source_item_count(self) -> int:
        return len(self.vocabulary)

    def can_generate(self) -> bool:
        return can_generate_quiz(self.vocabulary, self.direction, self.config)

    def generate(self) -> list[QuizQuestion]:
        return generate_questions(self.vocabulary, self.direction, self.config)

    def generate_for(self, entries: list[VocabEntry]) -> list[QuizQuestion]:
        """Generate questions only for the given entries.

        Distractors are still drawn from the whole vocabulary.
        """
        if not self.can_generate():
            return []
        answer_pool = [entry.answer_for(self.direction) for entry in self.vocabulary]
        questions = []
        for entry in entries:
            question = build_question(entry, answer_pool, self.direction, self.config)
            if question is not None:
                questions.append(question)
        return questions
