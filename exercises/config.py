"""Configuration for exercise generation.

These configuration models allow tuning exercise generation behavior,
such as how many gaps a sentence gets or how long the cards mode waits
before moving on to the next question.
"""

from pydantic import BaseModel, Field


class GapConfig(BaseModel):
    """Configuration for fill-in-blank and write gap selection."""

    min_word_length: int = Field(default=3, ge=1)
    min_eligible_words: int = Field(default=2, ge=1)
    gap_ratio: float = Field(default=0.3, gt=0.0, le=1.0)
    max_gaps: int = Field(default=3, ge=1)


class OrderConfig(BaseModel):
    """Configuration for word-order exercises."""

    min_tokens: int = Field(default=3, ge=2)
    # Only sentences containing a saved vocabulary word are practiced
    require_vocabulary: bool = True


class QuizConfig(BaseModel):
    """Configuration for flashcard quiz generation."""

    total_options: int = Field(default=4, ge=2, le=6)
    min_entries: int = Field(default=4, ge=2)
    shuffle_options: bool = True


class CardsConfig(BaseModel):
    """Configuration for the cards practice mode."""

    auto_advance_delay: float = Field(default=1.2, ge=0.0)


class ExerciseGeneratorConfig(BaseModel):
    """Master configuration for all exercise types."""

    gaps: GapConfig = Field(default_factory=GapConfig)
    order: OrderConfig = Field(default_factory=OrderConfig)
    quiz: QuizConfig = Field(default_factory=QuizConfig)
    cards: CardsConfig = Field(default_factory=CardsConfig)
