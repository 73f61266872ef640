"""Speak mode: listen to each sentence, repeat it, compare the transcript.

Speech recognition runs outside the controller. The caller moves the phase
forward with start_recording() and stop_recording(), then reports the
recognized text with submit_transcript() or the failure with
fail_transcription(). Both carry the sentence index they were started for,
and a result for a sentence that is no longer current is dropped.
"""

import logging
from collections.abc import Callable

from exercises.schemas import SpeechComparison
from exercises.segmentation import segment_text
from exercises.speech import compare_texts
from models import ProgressKey

from .base import ModeController, ProgressTracker
from .state import SpeakModeState, SpeakPhase

logger = logging.getLogger(__name__)


class SpeakController(ModeController[SpeakModeState]):
    progress_key = ProgressKey.SPEAK

    def __init__(
        self,
        paragraphs: list[str],
        state: SpeakModeState,
        progress: ProgressTracker,
        on_change: Callable[[SpeakModeState], None] | None = None,
    ):
        self.sentences = segment_text(paragraphs)
        super().__init__(state, progress, on_change)
        self.sync()

    @property
    def total(self) -> int:
        return len(self.sentences)

    @property
    def phase(self) -> SpeakPhase:
        return self._state.phase

    @property
    def current_sentence(self) -> str:
        index = self._state.current_index
        if 0 <= index < self.total:
            return self.sentences[index]
        return ""

    @property
    def current_result(self) -> SpeechComparison | None:
        return self._state.results.get(self._state.current_index)

    def correct_count(self) -> int:
        return sum(1 for result in self._state.results.values() if result.is_correct)

    def is_finished(self) -> bool:
        """True once the last sentence has a result."""
        return (
            self.total > 0
            and self._state.current_index >= self.total - 1
            and self._state.phase == SpeakPhase.RESULT
        )

    def _completion_flags(self) -> dict[ProgressKey, bool]:
        # Speaking counts as done once every sentence was attempted
        return {self.progress_key: self.is_finished()}

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def sync(self) -> None:
        with self._lock:
            state = self._state
            if state.initialized and state.source_item_count == self.total:
                return
            if state.initialized:
                logger.debug(
                    "speak sentences changed (%d -> %d), starting over",
                    state.source_item_count,
                    self.total,
                )
                self._invalidate()
            self._state = SpeakModeState(initialized=True, source_item_count=self.total)
            self._commit()

    def reset_item(self, index: int) -> None:
        with self._lock:
            self._state.results.pop(index, None)
            if index == self._state.current_index:
                self._state.phase = SpeakPhase.LISTENING
            self._commit()

    def reset_current(self) -> None:
        """Try the current sentence again."""
        self.reset_item(self._state.current_index)

    def reset(self) -> None:
        with self._lock:
            self._state = SpeakModeState(initialized=True, source_item_count=self.total)
            self._invalidate()
            self._commit()

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    def select(self, index: int) -> None:
        with self._lock:
            self._state.current_index = self._clamp(index)
            if self._state.current_index in self._state.results:
                self._state.phase = SpeakPhase.RESULT
            else:
                self._state.phase = SpeakPhase.LISTENING
            self._commit()

    def next(self) -> bool:
        """Move to the next sentence. Returns False on the last one."""
        with self._lock:
            if self._state.current_index >= self.total - 1:
                return False
            self.select(self._state.current_index + 1)
            return True

    # -------------------------------------------------------------------------
    # Recording
    # -------------------------------------------------------------------------

    def start_recording(self) -> int | None:
        """Start recording the current sentence.

        Returns:
            The sentence index the recording belongs to, or None if a
            recording or transcription is already running.
        """
        with self._lock:
            if self.total == 0 or self._state.phase in (
                SpeakPhase.RECORDING,
                SpeakPhase.PROCESSING,
            ):
                return None
            self._state.phase = SpeakPhase.RECORDING
            self._notify()
            return self._state.current_index

    def stop_recording(self) -> bool:
        with self._lock:
            if self._state.phase != SpeakPhase.RECORDING:
                return False
            self._state.phase = SpeakPhase.PROCESSING
            self._notify()
            return True

    def _is_awaiting(self, index: int) -> bool:
        return (
            index == self._state.current_index
            and self._state.phase == SpeakPhase.PROCESSING
        )

    def submit_transcript(self, index: int, transcript: str) -> SpeechComparison | None:
        """Compare a transcript with the sentence it was recorded for.

        Returns:
            The comparison, or None if the result arrived too late.
        """
        with self._lock:
            if not self._is_awaiting(index):
                logger.debug("Ignoring stale transcript for sentence %d", index)
                return None
            result = compare_texts(self.sentences[index], transcript)
            self._state.results[index] = result
            self._state.phase = SpeakPhase.RESULT
            self._commit()
            return result

    def fail_transcription(self, index: int) -> bool:
        """Go back to listening after recognition failed."""
        with self._lock:
            if not self._is_awaiting(index):
                return False
            logger.info("Transcription failed for sentence %d", index)
            self._state.phase = SpeakPhase.LISTENING
            self._notify()
            return True
