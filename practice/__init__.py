"""Practice modes for the German reader.

Each mode has a controller that owns its state, applies the learner's
actions and reports completion to the progress store:
- FillController: place word-bank words into gaps
- WriteController: type the gap words
- OrderController: rebuild sentences from shuffled words
- CardsController: flashcard quiz in both directions
- SpeakController: repeat sentences and compare transcripts

PracticeSession wires the five controllers to storage for one text.
"""

from practice.base import ModeController, ProgressTracker
from practice.cards import CardsController
from practice.gaps import FillController, GapModeController, WriteController
from practice.order import OrderController
from practice.session import PracticeSession
from practice.speak import SpeakController
from practice.state import (
    CardsDirectionState,
    CardsModeState,
    FillModeState,
    GapAnswerState,
    OrderModeState,
    OrderSentenceState,
    PracticeState,
    SpeakModeState,
    SpeakPhase,
    WriteModeState,
)
from practice.timers import AutoAdvanceTimer

__all__ = [
    # Controllers
    "ModeController",
    "ProgressTracker",
    "GapModeController",
    "FillController",
    "WriteController",
    "OrderController",
    "CardsController",
    "SpeakController",
    "PracticeSession",
    "AutoAdvanceTimer",
    # State
    "PracticeState",
    "GapAnswerState",
    "FillModeState",
    "WriteModeState",
    "OrderSentenceState",
    "OrderModeState",
    "CardsDirectionState",
    "CardsModeState",
    "SpeakPhase",
    "SpeakModeState",
]
