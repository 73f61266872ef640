"""Order mode: rebuild sentences from their shuffled words."""

import logging
from collections import Counter
from collections.abc import Callable, Iterable

from exercises.config import OrderConfig
from exercises.generators import OrderGenerator, is_correct_order
from exercises.schemas import OrderExercise
from exercises.segmentation import tokenize
from models import ProgressKey, ValidationState

from .base import ModeController, ProgressTracker, validation_of
from .state import OrderModeState, OrderSentenceState

logger = logging.getLogger(__name__)


class OrderController(ModeController[OrderModeState]):
    """Moves words between a sentence's word pool and its placed sequence.

    Every operation keeps the pool and the placed sequence together a
    permutation of the sentence's words. A sentence is checked automatically
    once its pool is empty.
    """

    progress_key = ProgressKey.ORDER

    def __init__(
        self,
        paragraphs: list[str],
        state: OrderModeState,
        progress: ProgressTracker,
        vocabulary_terms: Iterable[str] | None = None,
        config: OrderConfig | None = None,
        on_change: Callable[[OrderModeState], None] | None = None,
    ):
        self.generator = OrderGenerator(paragraphs, vocabulary_terms, config)
        self.sentences = self.generator.sentences
        super().__init__(state, progress, on_change)
        self.sync()

    @property
    def total(self) -> int:
        return len(self.sentences)

    def item(self, index: int) -> OrderSentenceState:
        return self._state.sentence_states[index]

    def correct_order(self, index: int) -> list[str]:
        return tokenize(self.sentences[index])

    def correct_count(self) -> int:
        return sum(
            1
            for index in range(self.total)
            if index in self._state.sentence_states
            and self.item(index).validation_state == ValidationState.CORRECT
        )

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    @staticmethod
    def _item_from(exercise: OrderExercise) -> OrderSentenceState:
        return OrderSentenceState(shuffled_pool=list(exercise.shuffled_pool))

    def _matches_sentences(self) -> bool:
        states = self._state.sentence_states
        if set(states) != set(range(self.total)):
            return False
        return all(
            Counter(states[i].shuffled_pool + states[i].placed_sequence)
            == Counter(self.correct_order(i))
            for i in range(self.total)
        )

    def sync(self) -> None:
        with self._lock:
            state = self._state
            if (
                state.initialized
                and state.source_item_count == self.total
                and self._matches_sentences()
            ):
                return

            if not state.initialized and self.progress.is_mode_complete(
                self.progress_key
            ):
                # Completed earlier but the state was discarded: show it solved
                items = {
                    i: OrderSentenceState(
                        placed_sequence=self.correct_order(i),
                        validation_state=ValidationState.CORRECT,
                    )
                    for i in range(self.total)
                }
            else:
                if state.initialized:
                    logger.debug(
                        "order sentences changed (%d -> %d), regenerating",
                        state.source_item_count,
                        self.total,
                    )
                    self._invalidate()
                items = {
                    i: self._item_from(exercise)
                    for i, exercise in enumerate(self.generator.generate())
                }

            self._state = OrderModeState(
                current_index=self._clamp(state.current_index),
                sentence_states=items,
                initialized=True,
                source_item_count=self.total,
            )
            self._commit()

    def update_vocabulary(self, vocabulary_terms: Iterable[str]) -> None:
        """Re-filter the eligible sentences after the saved words changed."""
        with self._lock:
            self.generator.vocabulary_terms = list(vocabulary_terms)
            self.sentences = self.generator.sentences
            self.sync()

    def reset_item(self, index: int) -> None:
        with self._lock:
            if not 0 <= index < self.total:
                return
            exercise = self.generator.generate_for(self.sentences[index])
            self._state.sentence_states[index] = OrderSentenceState(
                shuffled_pool=exercise.shuffled_pool if exercise else []
            )
            self._commit()

    def reset(self) -> None:
        with self._lock:
            self._state = OrderModeState(
                current_index=0,
                sentence_states={
                    i: self._item_from(exercise)
                    for i, exercise in enumerate(self.generator.generate())
                },
                initialized=True,
                source_item_count=self.total,
            )
            self._invalidate()
            self._commit()

    # -------------------------------------------------------------------------
    # Moves
    # -------------------------------------------------------------------------

    def place(self, index: int, pool_position: int, at: int | None = None) -> bool:
        """Move a word from the pool into the placed sequence.

        Args:
            index: Sentence index.
            pool_position: Position of the word in the pool.
            at: Insert position in the placed sequence; appends when None.

        Returns:
            False if the sentence or pool position does not exist.
        """
        with self._lock:
            if not 0 <= index < self.total:
                return False
            item = self.item(index)
            if not 0 <= pool_position < len(item.shuffled_pool):
                return False

            word = item.shuffled_pool.pop(pool_position)
            if at is None:
                item.placed_sequence.append(word)
            else:
                item.placed_sequence.insert(at, word)
            self._after_move(index)
            return True

    def unplace(self, index: int, placed_position: int) -> bool:
        """Move a placed word back to the end of the pool."""
        with self._lock:
            if not 0 <= index < self.total:
                return False
            item = self.item(index)
            if not 0 <= placed_position < len(item.placed_sequence):
                return False

            item.shuffled_pool.append(item.placed_sequence.pop(placed_position))
            self._after_move(index)
            return True

    def move_placed(self, index: int, source: int, destination: int) -> bool:
        """Reorder the placed sequence."""
        with self._lock:
            if not 0 <= index < self.total:
                return False
            placed = self.item(index).placed_sequence
            if not (0 <= source < len(placed) and 0 <= destination < len(placed)):
                return False

            placed.insert(destination, placed.pop(source))
            self._after_move(index)
            return True

    def _after_move(self, index: int) -> None:
        item = self.item(index)
        item.validation_state = ValidationState.IDLE
        if not item.shuffled_pool:
            self.check(index)
        else:
            self._commit()

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def check(self, index: int) -> ValidationState:
        with self._lock:
            if not 0 <= index < self.total:
                return ValidationState.IDLE
            item = self.item(index)
            item.validation_state = validation_of(
                is_correct_order(item.placed_sequence, self.correct_order(index))
            )
            self._commit()
            return item.validation_state

    def check_all(self) -> int:
        """Check every sentence that has placed words.

        Returns:
            Number of correct sentences afterwards.
        """
        with self._lock:
            for index in range(self.total):
                if self.item(index).placed_sequence:
                    self.check(index)
            return self.correct_count()
