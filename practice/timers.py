"""Cancellable one-shot timer used for delayed auto-advance."""

import threading
from collections.abc import Callable
from typing import Any

TimerFactory = Callable[[float, Callable[[], None]], Any]


class AutoAdvanceTimer:
    """Runs a callback once after a delay.

    Scheduling again replaces the pending callback, so only the most recent
    request fires. Call cancel() on teardown so nothing fires after the
    owner is gone.
    """

    def __init__(self, timer_factory: TimerFactory = threading.Timer):
        self._timer_factory = timer_factory
        self._timer: Any = None
        self._lock = threading.Lock()

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def schedule(self, delay: float, callback: Callable[[], None]) -> None:
        """Run callback after delay seconds, replacing any pending one."""
        with self._lock:
            self._cancel_locked()
            timer: Any = None

            def fire() -> None:
                with self._lock:
                    if self._timer is not timer:
                        return
                    self._timer = None
                callback()

            timer = self._timer_factory(delay, fire)
            timer.daemon = True
            self._timer = timer
            timer.start()

    def cancel(self) -> None:
        with self._lock:
            self._cancel_locked()

    def _cancel_locked(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
