"""Observable stores shared by the application and the practice sessions.

The stores wrap the repositories and send a blinker signal after every
change. The application creates one of each and passes them to whoever
needs them; listeners only hear the store they subscribed to.
"""

import logging
import threading
from collections.abc import Callable
from pathlib import Path

from blinker import Namespace

from models import ProgressKey, TextProgress, VocabEntry

from .base import ProgressRepository, VocabularyRepository

logger = logging.getLogger(__name__)

store_signals = Namespace()

# Payload: topic_id, text_id
vocabulary_changed = store_signals.signal("vocabulary_changed")

# Payload: topic_id, text_id, progress
progress_changed = store_signals.signal("progress_changed")

_DIRECTION_KEYS = (ProgressKey.CARDS_FORWARD, ProgressKey.CARDS_REVERSE)


class _SignalStore:
    """Base for stores whose subscribers are receivers of one signal.

    Subclasses set ``changed`` and the payload ``fields`` passed to
    listeners as positional arguments.
    """

    changed = None
    fields: tuple[str, ...] = ()

    def subscribe(self, listener: Callable) -> Callable[[], None]:
        """Register a listener.

        Returns:
            A function that removes the listener again.
        """
        fields = self.fields

        def receiver(sender, **payload) -> None:
            listener(*(payload[name] for name in fields))

        self.changed.connect(receiver, sender=self, weak=False)

        def unsubscribe() -> None:
            self.changed.disconnect(receiver)

        return unsubscribe

    def _emit(self, **payload) -> None:
        self.changed.send(self, **payload)


class VocabularyStore(_SignalStore):
    """Saved words per text. Listeners receive (topic_id, text_id)."""

    changed = vocabulary_changed
    fields = ("topic_id", "text_id")

    def __init__(self, repo: VocabularyRepository):
        self.repo = repo

    def add(
        self,
        topic_id: str,
        text_id: str,
        source_term: str,
        target_term: str,
        base_form: str | None = None,
    ) -> VocabEntry | None:
        """Save a word. Returns None if the text already has it."""
        entry = self.repo.add(topic_id, text_id, source_term, target_term, base_form)
        if entry is not None:
            logger.info("Saved %r for %s/%s", entry.source_term, topic_id, text_id)
            self._emit(topic_id=topic_id, text_id=text_id)
        return entry

    def remove(self, entry: VocabEntry) -> bool:
        removed = self.repo.remove(entry.id)
        if removed:
            logger.info("Removed %r from %s/%s", entry.source_term, entry.topic_id, entry.text_id)
            self._emit(topic_id=entry.topic_id, text_id=entry.text_id)
        return removed

    def clear_for_text(self, topic_id: str, text_id: str) -> int:
        count = self.repo.clear_for_text(topic_id, text_id)
        if count:
            self._emit(topic_id=topic_id, text_id=text_id)
        return count

    def get_for_text(self, topic_id: str, text_id: str) -> list[VocabEntry]:
        return self.repo.get_for_text(topic_id, text_id)

    def get_all(self) -> list[VocabEntry]:
        return self.repo.get_all()

    def find(self, topic_id: str, text_id: str, source_term: str) -> VocabEntry | None:
        return self.repo.find_by_term(topic_id, text_id, source_term)

    def export_csv(self, path: Path) -> int:
        return self.repo.export_csv(path)


class ProgressStore(_SignalStore):
    """Practice completion per text.

    Listeners receive (topic_id, text_id, progress) after a flag changed.
    Marking an already complete mode, or resetting an incomplete one, is a
    no-op and notifies nobody.
    """

    changed = progress_changed
    fields = ("topic_id", "text_id", "progress")

    def __init__(self, repo: ProgressRepository):
        self.repo = repo
        self._lock = threading.RLock()

    def get_text_progress(self, topic_id: str, text_id: str) -> TextProgress:
        return self.repo.get(topic_id, text_id)

    def get_all(self) -> dict[tuple[str, str], TextProgress]:
        return self.repo.get_all()

    def is_mode_complete(self, topic_id: str, text_id: str, key: ProgressKey) -> bool:
        return self.get_text_progress(topic_id, text_id).is_set(key)

    def mark_mode_complete(self, topic_id: str, text_id: str, key: ProgressKey) -> None:
        key = ProgressKey(key)
        with self._lock:
            progress = self.get_text_progress(topic_id, text_id)
            if progress.is_set(key):
                return

            self.repo.set_flag(topic_id, text_id, key, True)
            if key in _DIRECTION_KEYS:
                # Cards counts as done once both directions are
                other = next(k for k in _DIRECTION_KEYS if k != key)
                if progress.is_set(other):
                    self.repo.set_flag(topic_id, text_id, ProgressKey.CARDS, True)

            logger.info("%s/%s: %s complete", topic_id, text_id, key.value)
            self._emit(
                topic_id=topic_id,
                text_id=text_id,
                progress=self.get_text_progress(topic_id, text_id),
            )

    def reset_mode(self, topic_id: str, text_id: str, key: ProgressKey) -> None:
        key = ProgressKey(key)
        with self._lock:
            progress = self.get_text_progress(topic_id, text_id)
            if not progress.is_set(key):
                return

            self.repo.set_flag(topic_id, text_id, key, False)
            if key in _DIRECTION_KEYS:
                self.repo.set_flag(topic_id, text_id, ProgressKey.CARDS, False)

            logger.debug("%s/%s: %s reset", topic_id, text_id, key.value)
            self._emit(
                topic_id=topic_id,
                text_id=text_id,
                progress=self.get_text_progress(topic_id, text_id),
            )

    def reset_text(self, topic_id: str, text_id: str) -> None:
        with self._lock:
            self.repo.reset_text(topic_id, text_id)
            self._emit(topic_id=topic_id, text_id=text_id, progress=TextProgress())

    def for_text(self, topic_id: str, text_id: str) -> "TextProgressTracker":
        return TextProgressTracker(self, topic_id, text_id)


class TextProgressTracker:
    """The progress of one text, in the shape practice controllers expect."""

    def __init__(self, store: ProgressStore, topic_id: str, text_id: str):
        self.store = store
        self.topic_id = topic_id
        self.text_id = text_id

    def mark_mode_complete(self, key: ProgressKey) -> None:
        self.store.mark_mode_complete(self.topic_id, self.text_id, key)

    def is_mode_complete(self, key: ProgressKey) -> bool:
        return self.store.is_mode_complete(self.topic_id, self.text_id, key)

    def reset_mode(self, key: ProgressKey) -> None:
        self.store.reset_mode(self.topic_id, self.text_id, key)

    def get(self) -> TextProgress:
        return self.store.get_text_progress(self.topic_id, self.text_id)
