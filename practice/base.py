"""Abstract base class for practice mode controllers.

A controller owns the state of one practice mode for one text, applies the
learner's actions to it, and reports completion to the progress tracker.
All mutations go through the controller's lock and read the current state
object, so delayed callbacks (auto-advance timers, late transcription
results) never act on a stale snapshot.
"""

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Generic, Protocol, TypeVar

from models import ProgressKey, ValidationState

logger = logging.getLogger(__name__)

S = TypeVar("S")  # Mode state type


class ProgressTracker(Protocol):
    """Completion flags of one text, as seen by the controllers."""

    def mark_mode_complete(self, key: ProgressKey) -> None: ...

    def is_mode_complete(self, key: ProgressKey) -> bool: ...

    def reset_mode(self, key: ProgressKey) -> None: ...


class ModeController(ABC, Generic[S]):
    """Abstract base class for practice mode controllers.

    Subclasses must set up whatever is_all_correct() needs before calling
    super().__init__(), and call sync() at the end of their own __init__.

    Completion is signalled on every transition from "not complete" to
    "complete", so a learner who breaks a finished mode and fixes it again
    signals again. The progress tracker treats repeated signals as no-ops.
    """

    progress_key: ProgressKey

    def __init__(
        self,
        state: S,
        progress: ProgressTracker,
        on_change: Callable[[S], None] | None = None,
    ):
        self._state = state
        self.progress = progress
        self.on_change = on_change
        self._lock = threading.RLock()
        self._was_complete = self._completion_flags()

    @property
    def state(self) -> S:
        return self._state

    @property
    @abstractmethod
    def total(self) -> int:
        """Number of exercise items in this mode."""
        ...

    @abstractmethod
    def correct_count(self) -> int:
        """Number of items currently validated as correct."""
        ...

    @abstractmethod
    def sync(self) -> None:
        """Initialize the state, or reconcile it after the source changed."""
        ...

    @abstractmethod
    def reset_item(self, index: int) -> None:
        """Clear one item without touching its siblings."""
        ...

    @abstractmethod
    def reset(self) -> None:
        """Regenerate every item and clear the mode's completion."""
        ...

    def is_all_correct(self) -> bool:
        return self.total > 0 and self.correct_count() == self.total

    @property
    def is_available(self) -> bool:
        """False when the source is too small for this mode."""
        return self.total > 0

    def select(self, index: int) -> None:
        """Make the item at index the current one (clamped into range)."""
        with self._lock:
            self._state.current_index = self._clamp(index)
            self._notify()

    def _clamp(self, index: int) -> int:
        if self.total == 0:
            return 0
        return max(0, min(index, self.total - 1))

    def _completion_flags(self) -> dict[ProgressKey, bool]:
        return {self.progress_key: self.is_all_correct()}

    def _invalidate(self, key: ProgressKey | None = None) -> None:
        """Clear a completion flag after the items were regenerated."""
        key = key or self.progress_key
        self.progress.reset_mode(key)
        self._was_complete[key] = False

    def _commit(self) -> None:
        """Signal newly reached completion, then publish the state."""
        flags = self._completion_flags()
        for key, complete in flags.items():
            if complete and not self._was_complete.get(key, False):
                logger.debug("%s complete", key.value)
                self.progress.mark_mode_complete(key)
        self._was_complete = flags
        self._notify()

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self._state)


def validation_of(is_correct: bool) -> ValidationState:
    return ValidationState.CORRECT if is_correct else ValidationState.INCORRECT
