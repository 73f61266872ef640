"""Shared pytest fixtures for the German Reader test suite."""

import sys
from pathlib import Path

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from models import ProgressKey, Text, VocabEntry
from storage import (
    get_practice_state_repo,
    get_progress_store,
    get_vocabulary_store,
    init_schema,
)


class RecordingProgress:
    """In-memory progress tracker that records every call."""

    def __init__(self, complete: tuple[ProgressKey, ...] = ()):
        self.flags: set[ProgressKey] = set(complete)
        self.marked: list[ProgressKey] = []
        self.resets: list[ProgressKey] = []

    def mark_mode_complete(self, key: ProgressKey) -> None:
        self.marked.append(key)
        self.flags.add(key)

    def is_mode_complete(self, key: ProgressKey) -> bool:
        return key in self.flags

    def reset_mode(self, key: ProgressKey) -> None:
        self.resets.append(key)
        self.flags.discard(key)


class FakeTimer:
    """Stand-in for threading.Timer that only fires when told to."""

    def __init__(self, delay: float, callback):
        self.delay = delay
        self.callback = callback
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        if not self.cancelled:
            self.callback()


class FakeTimerFactory:
    """Creates FakeTimers and remembers them."""

    def __init__(self):
        self.timers: list[FakeTimer] = []

    def __call__(self, delay: float, callback) -> FakeTimer:
        timer = FakeTimer(delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def last(self) -> FakeTimer:
        return self.timers[-1]


def _make_entry(
    entry_id: str,
    source_term: str,
    target_term: str,
    base_form: str | None = None,
) -> VocabEntry:
    return VocabEntry(
        id=entry_id,
        source_term=source_term,
        target_term=target_term,
        base_form=base_form,
        topic_id="alltag",
        text_id="ein-tag",
    )


@pytest.fixture
def make_entry():
    """Build vocabulary entries for the sample text."""
    return _make_entry


@pytest.fixture
def progress() -> RecordingProgress:
    """Create an empty recording progress tracker."""
    return RecordingProgress()


@pytest.fixture
def make_progress():
    """Build a recording progress tracker with some modes already complete."""

    def _make(*complete: ProgressKey) -> RecordingProgress:
        return RecordingProgress(complete)

    return _make


@pytest.fixture
def timer_factory() -> FakeTimerFactory:
    """Create a factory for manually fired timers."""
    return FakeTimerFactory()


@pytest.fixture
def sample_paragraphs() -> list[str]:
    """Two short paragraphs with three usable sentences."""
    return [
        "Ich gehe heute ins Kino. Der Hund läuft sehr schnell über die Straße.",
        "Am Abend trinkt meine Mutter einen Tee.",
    ]


@pytest.fixture
def sample_text(sample_paragraphs) -> Text:
    """Create a sample text."""
    return Text(id="ein-tag", title="Ein Tag", paragraphs=sample_paragraphs)


@pytest.fixture
def sample_vocabulary() -> list[VocabEntry]:
    """Five saved words with distinct translations."""
    return [
        _make_entry("e1", "Hund", "dog"),
        _make_entry("e2", "Kino", "cinema"),
        _make_entry("e3", "läuft", "runs", base_form="laufen"),
        _make_entry("e4", "Straße", "street"),
        _make_entry("e5", "Tee", "tea"),
    ]


@pytest.fixture
def test_db_path(tmp_path) -> Path:
    """Create a temporary database path for testing."""
    db_path = tmp_path / "test_reader.db"
    init_schema(db_path)
    return db_path


@pytest.fixture
def vocabulary_store(test_db_path):
    return get_vocabulary_store(test_db_path)


@pytest.fixture
def progress_store(test_db_path):
    return get_progress_store(test_db_path)


@pytest.fixture
def state_repo(test_db_path):
    return get_practice_state_repo(test_db_path)


@pytest.fixture
def content_dir(tmp_path) -> Path:
    """Create a content directory with one topic file."""
    directory = tmp_path / "content"
    directory.mkdir()
    (directory / "alltag.md").write_text(
        "# Alltag\n"
        "Texte über den Alltag.\n"
        "\n"
        "## Ein Tag\n"
        "Ich gehe heute ins Kino. Der Hund läuft sehr schnell über die Straße.\n"
        "Am Abend trinkt meine Mutter einen Tee.\n"
        "\n"
        "---\n"
        "\n"
        "## Kurz\n"
        "Ich gehe heute ins Kino.\n",
        encoding="utf-8",
    )
    return directory
