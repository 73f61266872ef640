"""Persisted practice state for one (topic, text) pair.

One PracticeState holds the state of all five modes and is stored as a
single JSON blob. Older blobs may lack fields or whole modes; loading merges
them over the defaults instead of rejecting them.
"""

import logging
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from exercises.schemas import QuizQuestion, SpeechComparison
from models import CardsDirection, ValidationState

logger = logging.getLogger(__name__)


# ============================================================================
# Per-item State
# ============================================================================


class GapAnswerState(BaseModel):
    """Answers of one gap sentence (fill or write mode)."""

    answers: dict[int, str | None] = Field(default_factory=dict)
    available_words: list[str] = Field(default_factory=list)  # Fill word bank
    validation_state: ValidationState = ValidationState.IDLE
    incorrect_gap_ids: list[int] = Field(default_factory=list)


class OrderSentenceState(BaseModel):
    """Word bank and the learner's current ordering of one sentence."""

    shuffled_pool: list[str] = Field(default_factory=list)
    placed_sequence: list[str] = Field(default_factory=list)
    validation_state: ValidationState = ValidationState.IDLE


# ============================================================================
# Per-mode State
# ============================================================================


class ModeState(BaseModel):
    """Fields shared by every mode.

    source_item_count records the size of the source set (sentences or
    vocabulary entries) the state was built from. A different count on the
    next sync means the state has to be regenerated or reconciled.
    """

    current_index: int = 0
    initialized: bool = False
    source_item_count: int = 0


class GapModeState(ModeState):
    sentence_states: dict[int, GapAnswerState] = Field(default_factory=dict)


class FillModeState(GapModeState):
    pass


class WriteModeState(GapModeState):
    pass


class OrderModeState(ModeState):
    sentence_states: dict[int, OrderSentenceState] = Field(default_factory=dict)


class CardsDirectionState(ModeState):
    questions: list[QuizQuestion] = Field(default_factory=list)
    show_results: bool = False


class CardsModeState(BaseModel):
    direction: CardsDirection = CardsDirection.FORWARD
    forward: CardsDirectionState = Field(default_factory=CardsDirectionState)
    reverse: CardsDirectionState = Field(default_factory=CardsDirectionState)

    def for_direction(self, direction: CardsDirection) -> CardsDirectionState:
        if direction == CardsDirection.FORWARD:
            return self.forward
        return self.reverse


class SpeakPhase(str, Enum):
    LISTENING = "listening"
    RECORDING = "recording"
    PROCESSING = "processing"
    RESULT = "result"


class SpeakModeState(ModeState):
    phase: SpeakPhase = SpeakPhase.LISTENING
    results: dict[int, SpeechComparison] = Field(default_factory=dict)


# ============================================================================
# Whole-text State
# ============================================================================


class PracticeState(BaseModel):
    fill: FillModeState = Field(default_factory=FillModeState)
    order: OrderModeState = Field(default_factory=OrderModeState)
    write: WriteModeState = Field(default_factory=WriteModeState)
    cards: CardsModeState = Field(default_factory=CardsModeState)
    speak: SpeakModeState = Field(default_factory=SpeakModeState)

    @classmethod
    def from_stored(cls, data: Any) -> "PracticeState":
        """Build state from a stored blob, merging it over the defaults.

        Missing modes and missing fields take their defaults. A mode whose
        stored value does not validate is replaced by its defaults.
        """
        state = cls()
        if not isinstance(data, dict):
            return state

        for name, field in cls.model_fields.items():
            stored = data.get(name)
            if stored is None:
                continue
            try:
                setattr(state, name, field.annotation.model_validate(stored))
            except ValidationError as e:
                logger.warning("Discarding unreadable %s practice state: %s", name, e)
        return state
