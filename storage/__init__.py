"""Storage layer for the German reader.

Provides repository interfaces and SQLite implementations for saved
vocabulary, practice completion and practice state, plus the observable
stores the application shares between its parts.
"""

from pathlib import Path

from .base import PracticeStateRepository, ProgressRepository, VocabularyRepository
from .connection import DEFAULT_DB_PATH, get_connection, init_schema
from .sqlite import (
    SQLitePracticeStateRepository,
    SQLiteProgressRepository,
    SQLiteVocabularyRepository,
)
from .stores import ProgressStore, TextProgressTracker, VocabularyStore

__all__ = [
    # Abstract interfaces
    "VocabularyRepository",
    "ProgressRepository",
    "PracticeStateRepository",
    # SQLite implementations
    "SQLiteVocabularyRepository",
    "SQLiteProgressRepository",
    "SQLitePracticeStateRepository",
    # Stores
    "VocabularyStore",
    "ProgressStore",
    "TextProgressTracker",
    # Connection utilities
    "get_connection",
    "init_schema",
    "DEFAULT_DB_PATH",
    # Factory functions
    "get_vocabulary_store",
    "get_progress_store",
    "get_practice_state_repo",
]


# ============================================================================
# Factory Functions
# ============================================================================


def get_vocabulary_store(db_path: Path = DEFAULT_DB_PATH) -> VocabularyStore:
    """Get a VocabularyStore backed by SQLite."""
    return VocabularyStore(SQLiteVocabularyRepository(db_path))


def get_progress_store(db_path: Path = DEFAULT_DB_PATH) -> ProgressStore:
    """Get a ProgressStore backed by SQLite."""
    return ProgressStore(SQLiteProgressRepository(db_path))


def get_practice_state_repo(db_path: Path = DEFAULT_DB_PATH) -> PracticeStateRepository:
    """Get a PracticeStateRepository instance."""
    return SQLitePracticeStateRepository(db_path)
