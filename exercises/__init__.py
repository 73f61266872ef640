"""Exercise generation for the German reader.

This package turns source text and saved vocabulary into exercises. Nothing
here touches storage or persisted state: functions take plain data and
return plain data.

Architecture:
- base: seeded PRNG, string hashing, shuffles and word helpers
- segmentation: sentence and token splitting
- schemas: exercise models (gap templates, order exercises, quiz questions)
- generators: gap selection, word-order shuffling, quiz generation
- speech: transcript comparison for speaking practice

Randomness comes in two kinds, kept apart on purpose in the API:
- seeded_shuffle: deterministic, used for gap placement and word banks
- shuffle: unseeded, used for order pools, distractors and option order

Configuration:
- ExerciseGeneratorConfig: Configure exercise generation behavior
"""

from exercises.base import (
    SeededRandom,
    answers_match,
    seeded_shuffle,
    select_distractors,
    shuffle,
    string_hash,
)
from exercises.config import (
    CardsConfig,
    ExerciseGeneratorConfig,
    GapConfig,
    OrderConfig,
    QuizConfig,
)
from exercises.generators import (
    ExerciseGenerator,
    GapGenerator,
    OrderGenerator,
    QuizGenerator,
    build_gap_exercise,
    build_gap_template,
    can_generate_quiz,
    eligible_order_sentences,
    generate_questions,
    is_correct_order,
    prepare_order_exercise,
)
from exercises.schemas import (
    GapSegment,
    GapTemplate,
    OrderExercise,
    QuizQuestion,
    SpeechComparison,
    TextSegment,
    WordResult,
)
from exercises.segmentation import segment, segment_text, tokenize
from exercises.speech import compare_texts, normalize_text

__all__ = [
    # Seeding and utilities
    "string_hash",
    "SeededRandom",
    "seeded_shuffle",
    "shuffle",
    "answers_match",
    "select_distractors",
    # Segmentation
    "segment",
    "segment_text",
    "tokenize",
    # Schema models
    "TextSegment",
    "GapSegment",
    "GapTemplate",
    "OrderExercise",
    "QuizQuestion",
    "WordResult",
    "SpeechComparison",
    # Configuration
    "ExerciseGeneratorConfig",
    "GapConfig",
    "OrderConfig",
    "QuizConfig",
    "CardsConfig",
    # Generation functions
    "build_gap_template",
    "build_gap_exercise",
    "prepare_order_exercise",
    "is_correct_order",
    "eligible_order_sentences",
    "can_generate_quiz",
    "generate_questions",
    # Generators
    "ExerciseGenerator",
    "GapGenerator",
    "OrderGenerator",
    "QuizGenerator",
    # Speech
    "normalize_text",
    "compare_texts",
]
