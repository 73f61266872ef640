"""Practice session for one text: controllers, persistence and reconciliation."""

import logging
import threading
from collections.abc import Callable
from typing import Any

from exercises.config import ExerciseGeneratorConfig
from models import PracticeMode, Text, VocabEntry
from storage.base import PracticeStateRepository
from storage.stores import ProgressStore, VocabularyStore

from .base import ModeController
from .cards import CardsController
from .gaps import FillController, WriteController
from .order import OrderController
from .speak import SpeakController
from .state import PracticeState
from .timers import AutoAdvanceTimer, TimerFactory

logger = logging.getLogger(__name__)


def vocabulary_terms(entries: list[VocabEntry]) -> list[str]:
    return [entry.source_term for entry in entries]


class PracticeSession:
    """All five practice modes of one (topic, text) pair.

    The session loads the stored practice state, hands each mode's part to
    its controller, and stores the whole state again after every change.
    While open it follows the vocabulary store so cards and order practice
    pick up words saved or removed elsewhere. Call close() when done.
    """

    def __init__(
        self,
        topic_id: str,
        text: Text,
        vocabulary_store: VocabularyStore,
        progress_store: ProgressStore,
        state_repo: PracticeStateRepository,
        config: ExerciseGeneratorConfig | None = None,
        timer_factory: TimerFactory = threading.Timer,
    ):
        self.topic_id = topic_id
        self.text = text
        self.vocabulary_store = vocabulary_store
        self.progress_store = progress_store
        self.state_repo = state_repo
        self.config = config or ExerciseGeneratorConfig()
        self.timer_factory = timer_factory
        self.progress = progress_store.for_text(topic_id, text.id)
        self._save_lock = threading.Lock()

        self.state = PracticeState.from_stored(state_repo.load(topic_id, text.id))
        self._build_controllers()
        self._unsubscribe = vocabulary_store.subscribe(self._on_vocabulary_changed)

    def __enter__(self) -> "PracticeSession":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Controllers
    # -------------------------------------------------------------------------

    def _build_controllers(self) -> None:
        paragraphs = self.text.paragraphs
        vocabulary = self.vocabulary_store.get_for_text(self.topic_id, self.text.id)

        self.fill = FillController(
            paragraphs,
            self.state.fill,
            self.progress,
            self.config.gaps,
            on_change=self._saver("fill"),
        )
        self.write = WriteController(
            paragraphs,
            self.state.write,
            self.progress,
            self.config.gaps,
            on_change=self._saver("write"),
        )
        self.order = OrderController(
            paragraphs,
            self.state.order,
            self.progress,
            vocabulary_terms(vocabulary),
            self.config.order,
            on_change=self._saver("order"),
        )
        self.cards = CardsController(
            vocabulary,
            self.state.cards,
            self.progress,
            self.config.quiz,
            self.config.cards,
            timer=AutoAdvanceTimer(self.timer_factory),
            on_change=self._saver("cards"),
        )
        self.speak = SpeakController(
            paragraphs,
            self.state.speak,
            self.progress,
            on_change=self._saver("speak"),
        )

    def controller(self, mode: PracticeMode) -> ModeController:
        controllers: dict[PracticeMode, ModeController] = {
            PracticeMode.FILL: self.fill,
            PracticeMode.ORDER: self.order,
            PracticeMode.WRITE: self.write,
            PracticeMode.CARDS: self.cards,
            PracticeMode.SPEAK: self.speak,
        }
        return controllers[PracticeMode(mode)]

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def _saver(self, mode: str) -> Callable[[Any], None]:
        def save(mode_state: Any) -> None:
            with self._save_lock:
                setattr(self.state, mode, mode_state)
                self.state_repo.save(
                    self.topic_id, self.text.id, self.state.model_dump(mode="json")
                )

        return save

    def _on_vocabulary_changed(self, topic_id: str, text_id: str) -> None:
        if (topic_id, text_id) != (self.topic_id, self.text.id):
            return
        entries = self.vocabulary_store.get_for_text(topic_id, text_id)
        logger.debug("Vocabulary of %s/%s now has %d entries", topic_id, text_id, len(entries))
        self.cards.update_vocabulary(entries)
        self.order.update_vocabulary(vocabulary_terms(entries))

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def reset_all(self) -> None:
        """Forget all practice state and progress of this text."""
        self.cards.close()
        self.state_repo.delete(self.topic_id, self.text.id)
        self.progress_store.reset_text(self.topic_id, self.text.id)
        self.state = PracticeState()
        self._build_controllers()

    def close(self) -> None:
        """Stop pending timers and stop following the vocabulary store."""
        self.cards.close()
        self._unsubscribe()
