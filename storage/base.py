"""Abstract repository interfaces for the storage layer."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from models import ProgressKey, TextProgress, VocabEntry


class VocabularyRepository(ABC):
    """Abstract interface for saved vocabulary storage."""

    @abstractmethod
    def add(
        self,
        topic_id: str,
        text_id: str,
        source_term: str,
        target_term: str,
        base_form: str | None = None,
    ) -> VocabEntry | None:
        """Save a word for a text.

        Args:
            topic_id: The topic the text belongs to.
            text_id: The text the word was saved from.
            source_term: The German word.
            target_term: Its translation.
            base_form: Optional dictionary form of the word.

        Returns:
            The new entry, or None if the text already has this word
            (compared case-insensitively).

        Raises:
            ValueError: If source_term or target_term is empty.
        """
        pass

    @abstractmethod
    def remove(self, entry_id: str) -> bool:
        """Delete an entry.

        Returns:
            True if an entry was deleted.
        """
        pass

    @abstractmethod
    def get_for_text(self, topic_id: str, text_id: str) -> list[VocabEntry]:
        """Load the entries of one text, oldest first."""
        pass

    @abstractmethod
    def get_all(self) -> list[VocabEntry]:
        """Load every saved entry, oldest first."""
        pass

    @abstractmethod
    def find_by_term(
        self, topic_id: str, text_id: str, source_term: str
    ) -> VocabEntry | None:
        """Look up a word of a text, ignoring case."""
        pass

    @abstractmethod
    def clear_for_text(self, topic_id: str, text_id: str) -> int:
        """Delete all entries of a text.

        Returns:
            Number of deleted entries.
        """
        pass

    @abstractmethod
    def export_csv(self, path: Path) -> int:
        """Write all entries to a CSV file.

        Returns:
            Number of exported entries.
        """
        pass


class ProgressRepository(ABC):
    """Abstract interface for practice completion flags."""

    @abstractmethod
    def get(self, topic_id: str, text_id: str) -> TextProgress:
        """Load the completion flags of a text (all False if none stored)."""
        pass

    @abstractmethod
    def get_all(self) -> dict[tuple[str, str], TextProgress]:
        """Load the flags of every text that has any, keyed by (topic, text)."""
        pass

    @abstractmethod
    def set_flag(
        self, topic_id: str, text_id: str, key: ProgressKey, value: bool
    ) -> None:
        """Set or clear one completion flag."""
        pass

    @abstractmethod
    def reset_text(self, topic_id: str, text_id: str) -> None:
        """Clear every flag of a text."""
        pass


class PracticeStateRepository(ABC):
    """Abstract interface for persisted practice state blobs."""

    @abstractmethod
    def load(self, topic_id: str, text_id: str) -> dict[str, Any] | None:
        """Load the stored blob of a text, or None if nothing is stored."""
        pass

    @abstractmethod
    def save(self, topic_id: str, text_id: str, state: dict[str, Any]) -> None:
        """Store the blob of a text, replacing any previous one."""
        pass

    @abstractmethod
    def delete(self, topic_id: str, text_id: str) -> None:
        """Delete the stored blob of a text."""
        pass
