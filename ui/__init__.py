"""German Reader UI Module - Terminal interface for reading and practice."""

from ui.app import ReaderUI
from ui.components import (
    GapSentencePanel,
    OrderPanel,
    ProgressPanel,
    QuizPanel,
    ReaderPanel,
    ResultsPanel,
    SpeechResultPanel,
    TopicTable,
    VocabularyTable,
)
from ui.styles import (
    ACCENT_GOLD,
    ACCENT_RED,
    ERROR_RED,
    INFO_BLUE,
    MUTED_GRAY,
    SUCCESS_GREEN,
)

__all__ = [
    "ReaderUI",
    "TopicTable",
    "ReaderPanel",
    "GapSentencePanel",
    "OrderPanel",
    "QuizPanel",
    "ResultsPanel",
    "SpeechResultPanel",
    "ProgressPanel",
    "VocabularyTable",
    "ACCENT_RED",
    "ACCENT_GOLD",
    "SUCCESS_GREEN",
    "ERROR_RED",
    "INFO_BLUE",
    "MUTED_GRAY",
]
