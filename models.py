from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class ValidationState(str, Enum):
    IDLE = "idle"
    CORRECT = "correct"
    INCORRECT = "incorrect"


class PracticeMode(str, Enum):
    FILL = "fill"
    ORDER = "order"
    WRITE = "write"
    CARDS = "cards"
    SPEAK = "speak"


class CardsDirection(str, Enum):
    """Which translation direction a cards round tests.

    FORWARD shows the German term and asks for the translation,
    REVERSE shows the translation and asks for the German term.
    """

    FORWARD = "forward"
    REVERSE = "reverse"


class ProgressKey(str, Enum):
    """Completion flags stored per text.

    The five practice modes plus one flag per cards direction. The overall
    CARDS flag is derived from both direction flags.
    """

    FILL = "fill"
    ORDER = "order"
    WRITE = "write"
    CARDS = "cards"
    CARDS_FORWARD = "cards_forward"
    CARDS_REVERSE = "cards_reverse"
    SPEAK = "speak"

    @classmethod
    def for_direction(cls, direction: CardsDirection) -> "ProgressKey":
        if direction == CardsDirection.FORWARD:
            return cls.CARDS_FORWARD
        return cls.CARDS_REVERSE


# Keys counted towards the "n of 5 modes done" summary
COUNTED_PROGRESS_KEYS = (
    ProgressKey.FILL,
    ProgressKey.ORDER,
    ProgressKey.WRITE,
    ProgressKey.CARDS,
    ProgressKey.SPEAK,
)


# ============================================================================
# Content Models
# ============================================================================


class Text(BaseModel):
    id: str
    title: str
    paragraphs: list[str] = Field(default_factory=list)


class Topic(BaseModel):
    id: str
    title: str
    description: str = ""
    texts: list[Text] = Field(default_factory=list)

    def get_text(self, text_id: str) -> Text | None:
        """Get a text of this topic by ID."""
        for text in self.texts:
            if text.id == text_id:
                return text
        return None


# ============================================================================
# Vocabulary and Progress Models
# ============================================================================


class VocabEntry(BaseModel):
    """A word the learner saved while reading a text."""

    id: str
    source_term: str  # German word as it appeared in the text
    target_term: str  # Translation
    base_form: str | None = None  # Dictionary form, e.g. infinitive
    topic_id: str = ""
    text_id: str = ""
    created_at: datetime = Field(default_factory=datetime.now)

    def prompt_for(self, direction: CardsDirection) -> str:
        """Return the term shown as the question in the given direction."""
        if direction == CardsDirection.FORWARD:
            return self.source_term
        return self.target_term

    def answer_for(self, direction: CardsDirection) -> str:
        """Return the expected answer in the given direction."""
        if direction == CardsDirection.FORWARD:
            return self.target_term
        return self.base_form or self.source_term


class TextProgress(BaseModel):
    """Which practice modes are complete for one (topic, text) pair."""

    fill: bool = False
    order: bool = False
    write: bool = False
    cards: bool = False
    cards_forward: bool = False
    cards_reverse: bool = False
    speak: bool = False

    def is_set(self, key: ProgressKey) -> bool:
        return getattr(self, key.value)

    @property
    def completion_count(self) -> int:
        return sum(1 for key in COUNTED_PROGRESS_KEYS if self.is_set(key))

    @property
    def completion_percentage(self) -> int:
        return round(self.completion_count / len(COUNTED_PROGRESS_KEYS) * 100)

    @property
    def is_complete(self) -> bool:
        return self.completion_count == len(COUNTED_PROGRESS_KEYS)
