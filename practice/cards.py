"""Cards mode: multiple choice flashcard quiz in two directions.

Each direction keeps its own question set. Selecting an answer locks the
question and, after a short delay, advances to the next one; after the last
question the results are shown. Questions follow the learner's vocabulary:
new entries append questions, removed entries drop theirs.
"""

import logging
from collections.abc import Callable

from exercises.config import CardsConfig, QuizConfig
from exercises.generators import QuizGenerator
from exercises.schemas import QuizQuestion
from models import CardsDirection, ProgressKey, VocabEntry

from .base import ModeController, ProgressTracker
from .state import CardsDirectionState, CardsModeState
from .timers import AutoAdvanceTimer

logger = logging.getLogger(__name__)


def verdict_for(percentage: int) -> str:
    if percentage >= 90:
        return "Excellent!"
    if percentage >= 70:
        return "Good job!"
    if percentage >= 50:
        return "Keep practicing!"
    return "Try again!"


class CardsController(ModeController[CardsModeState]):
    """Quiz over the saved vocabulary of one text.

    Each direction reports its own completion (cards_forward, cards_reverse)
    once its results are shown with every answer correct. The progress store
    derives overall cards completion from the two.
    """

    progress_key = ProgressKey.CARDS

    def __init__(
        self,
        vocabulary: list[VocabEntry],
        state: CardsModeState,
        progress: ProgressTracker,
        quiz_config: QuizConfig | None = None,
        cards_config: CardsConfig | None = None,
        timer: AutoAdvanceTimer | None = None,
        on_change: Callable[[CardsModeState], None] | None = None,
    ):
        self.vocabulary = list(vocabulary)
        self.quiz_config = quiz_config or QuizConfig()
        self.cards_config = cards_config or CardsConfig()
        self.timer = timer or AutoAdvanceTimer()
        super().__init__(state, progress, on_change)
        self.sync()

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def direction(self) -> CardsDirection:
        return self._state.direction

    @property
    def current(self) -> CardsDirectionState:
        return self._state.for_direction(self.direction)

    @property
    def questions(self) -> list[QuizQuestion]:
        return self.current.questions

    @property
    def current_question(self) -> QuizQuestion | None:
        current = self.current
        if current.show_results or not 0 <= current.current_index < len(
            current.questions
        ):
            return None
        return current.questions[current.current_index]

    @property
    def total(self) -> int:
        return len(self.questions)

    @property
    def is_available(self) -> bool:
        return self._generator(self.direction).can_generate()

    def correct_count(self) -> int:
        return sum(1 for q in self.questions if q.is_correct)

    def is_direction_complete(self, direction: CardsDirection) -> bool:
        state = self._state.for_direction(direction)
        return (
            state.show_results
            and bool(state.questions)
            and all(q.is_correct for q in state.questions)
        )

    def is_all_correct(self) -> bool:
        return all(self.is_direction_complete(d) for d in CardsDirection)

    def _completion_flags(self) -> dict[ProgressKey, bool]:
        return {
            ProgressKey.for_direction(d): self.is_direction_complete(d)
            for d in CardsDirection
        }

    def _generator(self, direction: CardsDirection) -> QuizGenerator:
        return QuizGenerator(self.vocabulary, direction, self.quiz_config)

    # -------------------------------------------------------------------------
    # Results
    # -------------------------------------------------------------------------

    def score(self) -> tuple[int, int]:
        """Correct answers and question count of the current direction."""
        return self.correct_count(), self.total

    def percentage(self) -> int:
        if not self.total:
            return 0
        return round(self.correct_count() / self.total * 100)

    def verdict(self) -> str:
        return verdict_for(self.percentage())

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def _fresh_direction(self, direction: CardsDirection) -> CardsDirectionState:
        return CardsDirectionState(
            questions=self._generator(direction).generate(),
            initialized=True,
            source_item_count=len(self.vocabulary),
        )

    def _reconcile(
        self, direction: CardsDirection, state: CardsDirectionState
    ) -> CardsDirectionState:
        """Bring one direction's questions in line with the vocabulary."""
        generator = self._generator(direction)
        if not state.questions or not generator.can_generate():
            return self._fresh_direction(direction)

        entry_ids = {entry.id for entry in self.vocabulary}
        kept = [q for q in state.questions if q.subject_id in entry_ids]
        asked = {q.subject_id for q in kept}
        added = generator.generate_for(
            [entry for entry in self.vocabulary if entry.id not in asked]
        )
        logger.debug(
            "cards %s: kept %d questions, dropped %d, added %d",
            direction.value,
            len(kept),
            len(state.questions) - len(kept),
            len(added),
        )

        questions = kept + added
        if added and state.show_results:
            current_index = len(kept)
        else:
            current_index = state.current_index
        current_index = max(0, min(current_index, len(questions) - 1))

        return CardsDirectionState(
            questions=questions,
            current_index=current_index,
            show_results=bool(questions) and all(q.answered for q in questions),
            initialized=True,
            source_item_count=len(self.vocabulary),
        )

    def sync(self) -> None:
        with self._lock:
            count = len(self.vocabulary)
            for direction in CardsDirection:
                state = self._state.for_direction(direction)
                if state.initialized and state.source_item_count == count:
                    continue

                if state.initialized:
                    state = self._reconcile(direction, state)
                    self._invalidate(ProgressKey.for_direction(direction))
                else:
                    state = self._fresh_direction(direction)
                self._set_direction_state(direction, state)
            self._commit()

    def update_vocabulary(self, vocabulary: list[VocabEntry]) -> None:
        """Reconcile both directions with a changed vocabulary list."""
        with self._lock:
            self.timer.cancel()
            self.vocabulary = list(vocabulary)
            self.sync()

    def _set_direction_state(
        self, direction: CardsDirection, state: CardsDirectionState
    ) -> None:
        if direction == CardsDirection.FORWARD:
            self._state.forward = state
        else:
            self._state.reverse = state

    def reset_item(self, index: int) -> None:
        """Clear the answer of one question in the current direction."""
        with self._lock:
            if not 0 <= index < self.total:
                return
            question = self.questions[index]
            question.selected_answer = None
            question.is_correct = None
            self.current.show_results = False
            self._commit()

    def reset_direction(self, direction: CardsDirection | None = None) -> None:
        """Generate a new question set for one direction."""
        with self._lock:
            direction = direction or self.direction
            self.timer.cancel()
            self._set_direction_state(direction, self._fresh_direction(direction))
            self._invalidate(ProgressKey.for_direction(direction))
            self._commit()

    def reset(self) -> None:
        with self._lock:
            self.timer.cancel()
            for direction in CardsDirection:
                self._set_direction_state(direction, self._fresh_direction(direction))
                self._invalidate(ProgressKey.for_direction(direction))
            self._invalidate()
            self._commit()

    def close(self) -> None:
        self.timer.cancel()

    # -------------------------------------------------------------------------
    # Navigation and answers
    # -------------------------------------------------------------------------

    def set_direction(self, direction: CardsDirection) -> None:
        with self._lock:
            if direction == self.direction:
                return
            self.timer.cancel()
            self._state.direction = direction
            self._notify()

    def select(self, index: int) -> None:
        with self._lock:
            self.timer.cancel()
            super().select(index)

    def select_answer(self, answer: str) -> bool | None:
        """Answer the current question and schedule the auto-advance.

        Returns:
            Whether the answer was correct, or None if there is no open
            question to answer.
        """
        with self._lock:
            question = self.current_question
            if question is None or question.answered:
                return None

            question.selected_answer = answer
            question.is_correct = answer == question.correct_answer
            self._commit()

            direction = self.direction
            index = self.current.current_index
            self.timer.schedule(
                self.cards_config.auto_advance_delay,
                lambda: self.advance_past(direction, index),
            )
            return question.is_correct

    def advance_past(self, direction: CardsDirection, index: int) -> bool:
        """Advance only if the quiz still shows question index of direction.

        The auto-advance timer and a learner pressing "next" can both ask to
        leave the same question; whichever comes second is a no-op.

        Returns:
            True if the quiz advanced.
        """
        with self._lock:
            self.timer.cancel()
            current = self.current
            if (
                self.direction != direction
                or current.current_index != index
                or current.show_results
            ):
                return False
            self._advance()
            return True

    def next(self) -> None:
        """Go to the next question, or to the results after the last one."""
        with self._lock:
            self.timer.cancel()
            if self.current.show_results or not self.questions:
                return
            self._advance()

    def _advance(self) -> None:
        current = self.current
        if current.current_index < len(current.questions) - 1:
            current.current_index += 1
        else:
            current.show_results = True
        self._commit()
