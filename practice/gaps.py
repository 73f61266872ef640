"""Fill and write modes: sentences with gaps.

Fill mode offers the gap words in a word bank to place into gaps; write mode
asks the learner to type them with the first letter as a hint. Both use the
same deterministic gap templates. Any edit puts the sentence back to idle;
once every gap of the sentence holds a value it is checked automatically.
"""

import logging
from collections.abc import Callable

from exercises.base import answers_match
from exercises.config import GapConfig
from exercises.generators import GapGenerator
from exercises.schemas import GapTemplate
from models import ProgressKey, ValidationState

from .base import ModeController, ProgressTracker, validation_of
from .state import FillModeState, GapAnswerState, GapModeState, WriteModeState

logger = logging.getLogger(__name__)


class GapModeController(ModeController[GapModeState]):
    """Shared logic for the gap-based modes."""

    def __init__(
        self,
        paragraphs: list[str],
        state: GapModeState,
        progress: ProgressTracker,
        config: GapConfig | None = None,
        on_change: Callable[[GapModeState], None] | None = None,
    ):
        self.generator = GapGenerator(paragraphs, config)
        self.templates = self.generator.generate()
        super().__init__(state, progress, on_change)
        self.sync()

    @property
    def total(self) -> int:
        return len(self.templates)

    def template(self, index: int) -> GapTemplate:
        return self.templates[index]

    def item(self, index: int) -> GapAnswerState:
        return self._state.sentence_states[index]

    def correct_count(self) -> int:
        return sum(
            1
            for index in range(self.total)
            if index in self._state.sentence_states
            and self.item(index).validation_state == ValidationState.CORRECT
        )

    # -------------------------------------------------------------------------
    # Item construction
    # -------------------------------------------------------------------------

    def _fresh_item(self, template: GapTemplate) -> GapAnswerState:
        return GapAnswerState(answers={gap_id: None for gap_id in template.gap_ids})

    def _solved_item(self, template: GapTemplate) -> GapAnswerState:
        return GapAnswerState(
            answers={g.gap_id: g.original_word for g in template.gaps},
            validation_state=ValidationState.CORRECT,
        )

    def _matches_templates(self) -> bool:
        """Check that stored answers belong to the current templates."""
        states = self._state.sentence_states
        if set(states) != set(range(self.total)):
            return False
        return all(
            set(states[i].answers) <= set(template.gap_ids)
            for i, template in enumerate(self.templates)
        )

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def sync(self) -> None:
        with self._lock:
            state = self._state
            count = self.generator.source_item_count
            if (
                state.initialized
                and state.source_item_count == count
                and self._matches_templates()
            ):
                return

            if not state.initialized and self.progress.is_mode_complete(
                self.progress_key
            ):
                # Completed earlier but the state was discarded: show it solved
                items = {i: self._solved_item(t) for i, t in enumerate(self.templates)}
            else:
                if state.initialized:
                    logger.debug(
                        "%s source changed (%d -> %d sentences), regenerating",
                        self.progress_key.value,
                        state.source_item_count,
                        count,
                    )
                    self._invalidate()
                items = {i: self._fresh_item(t) for i, t in enumerate(self.templates)}

            self._state = type(state)(
                current_index=0,
                sentence_states=items,
                initialized=True,
                source_item_count=count,
            )
            self._commit()

    def reset_item(self, index: int) -> None:
        with self._lock:
            if not 0 <= index < self.total:
                return
            self._state.sentence_states[index] = self._fresh_item(self.template(index))
            self._commit()

    def reset(self) -> None:
        with self._lock:
            self._state = type(self._state)(
                current_index=0,
                sentence_states={
                    i: self._fresh_item(t) for i, t in enumerate(self.templates)
                },
                initialized=True,
                source_item_count=self.generator.source_item_count,
            )
            self._invalidate()
            self._commit()

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def is_filled(self, index: int) -> bool:
        """True when every gap of the sentence holds a non-blank value."""
        answers = self.item(index).answers
        return all(
            (answers.get(gap_id) or "").strip()
            for gap_id in self.template(index).gap_ids
        )

    def check(self, index: int) -> ValidationState:
        """Validate every gap of one sentence and record the result."""
        with self._lock:
            if not 0 <= index < self.total:
                return ValidationState.IDLE
            item = self.item(index)
            incorrect = [
                gap.gap_id
                for gap in self.template(index).gaps
                if not answers_match(item.answers.get(gap.gap_id), gap.original_word)
            ]
            item.incorrect_gap_ids = incorrect
            item.validation_state = validation_of(not incorrect)
            self._commit()
            return item.validation_state

    def _after_edit(self, index: int) -> None:
        item = self.item(index)
        item.validation_state = ValidationState.IDLE
        if self.is_filled(index):
            self.check(index)
        else:
            self._commit()

    def _owns_gap(self, index: int, gap_id: int) -> bool:
        return 0 <= index < self.total and gap_id in self.template(index).gap_ids


class FillController(GapModeController):
    """Fill mode: drag words from the sentence's word bank into its gaps."""

    progress_key = ProgressKey.FILL

    def __init__(
        self,
        paragraphs: list[str],
        state: FillModeState,
        progress: ProgressTracker,
        config: GapConfig | None = None,
        on_change: Callable[[FillModeState], None] | None = None,
    ):
        super().__init__(paragraphs, state, progress, config, on_change)

    def _fresh_item(self, template: GapTemplate) -> GapAnswerState:
        item = super()._fresh_item(template)
        item.available_words = list(template.word_bank)
        return item

    def place_word(self, index: int, gap_id: int, word: str) -> bool:
        """Move a word from the word bank into a gap.

        A word already in the gap goes back to the word bank.

        Returns:
            False if the gap or the word is unknown, True otherwise.
        """
        with self._lock:
            if not self._owns_gap(index, gap_id):
                return False
            item = self.item(index)
            if word not in item.available_words:
                return False

            item.available_words.remove(word)
            displaced = item.answers.get(gap_id)
            if displaced:
                item.available_words.append(displaced)
            item.answers[gap_id] = word
            item.incorrect_gap_ids = []
            self._after_edit(index)
            return True

    def move_word(self, index: int, from_gap: int, to_gap: int) -> bool:
        """Move a placed word to another gap, swapping with its content."""
        with self._lock:
            if not (self._owns_gap(index, from_gap) and self._owns_gap(index, to_gap)):
                return False
            item = self.item(index)
            word = item.answers.get(from_gap)
            if not word or from_gap == to_gap:
                return False

            item.answers[from_gap] = item.answers.get(to_gap)
            item.answers[to_gap] = word
            item.incorrect_gap_ids = []
            self._after_edit(index)
            return True

    def return_word(self, index: int, gap_id: int) -> bool:
        """Take a placed word out of its gap and back to the word bank."""
        with self._lock:
            if not self._owns_gap(index, gap_id):
                return False
            item = self.item(index)
            word = item.answers.get(gap_id)
            if not word:
                return False

            item.answers[gap_id] = None
            item.available_words.append(word)
            item.incorrect_gap_ids = []
            self._after_edit(index)
            return True


class WriteController(GapModeController):
    """Write mode: type the missing words, guided by a first-letter hint."""

    progress_key = ProgressKey.WRITE

    def __init__(
        self,
        paragraphs: list[str],
        state: WriteModeState,
        progress: ProgressTracker,
        config: GapConfig | None = None,
        on_change: Callable[[WriteModeState], None] | None = None,
    ):
        super().__init__(paragraphs, state, progress, config, on_change)

    def hint(self, index: int, gap_id: int) -> str:
        gap = self.template(index).get_gap(gap_id)
        return gap.hint if gap else ""

    def type_answer(self, index: int, gap_id: int, text: str) -> bool:
        """Replace the typed text of one gap.

        Only this gap loses its incorrect mark; the others keep theirs until
        the next check.
        """
        with self._lock:
            if not self._owns_gap(index, gap_id):
                return False
            item = self.item(index)
            item.answers[gap_id] = text
            item.incorrect_gap_ids = [g for g in item.incorrect_gap_ids if g != gap_id]
            self._after_edit(index)
            return True
