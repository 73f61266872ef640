"""Tests for the practice session of one text."""

import pytest

from models import PracticeMode, ProgressKey, ValidationState
from practice import PracticeSession

WORDS = [("Hund", "dog"), ("Kino", "cinema"), ("Straße", "street"), ("Tee", "tea")]


@pytest.fixture
def open_session(sample_text, vocabulary_store, progress_store, state_repo, timer_factory):
    sessions = []

    def _open():
        session = PracticeSession(
            "alltag",
            sample_text,
            vocabulary_store,
            progress_store,
            state_repo,
            timer_factory=timer_factory,
        )
        sessions.append(session)
        return session

    yield _open
    for session in sessions:
        session.close()


def solve_fill(controller, index):
    for gap in controller.template(index).gaps:
        controller.place_word(index, gap.gap_id, gap.original_word)


class TestPracticeSession:
    """Tests for PracticeSession."""

    def test_builds_every_mode(self, open_session):
        session = open_session()
        assert session.fill.total == 3
        assert session.write.total == 3
        assert session.speak.total == 3
        assert session.order.total == 0
        assert session.cards.total == 0
        assert session.controller(PracticeMode.FILL) is session.fill
        assert session.controller("speak") is session.speak

    def test_state_persists_between_sessions(self, open_session, state_repo):
        session = open_session()
        solve_fill(session.fill, 0)
        session.close()

        assert state_repo.load("alltag", "ein-tag") is not None
        reopened = open_session()
        assert reopened.fill.item(0).validation_state == ValidationState.CORRECT
        assert reopened.fill.correct_count() == 1

    def test_completion_reaches_progress_store(self, open_session, progress_store):
        session = open_session()
        for index in range(session.fill.total):
            solve_fill(session.fill, index)
        assert progress_store.is_mode_complete("alltag", "ein-tag", ProgressKey.FILL)

    def test_follows_saved_words(self, open_session, vocabulary_store):
        session = open_session()
        for term, translation in WORDS:
            vocabulary_store.add("alltag", "ein-tag", term, translation)

        assert session.cards.total == 4
        assert session.cards.is_available
        assert session.order.sentences == [
            "Ich gehe heute ins Kino.",
            "Der Hund läuft sehr schnell über die Straße.",
            "Am Abend trinkt meine Mutter einen Tee.",
        ]

    def test_ignores_other_texts(self, open_session, vocabulary_store):
        session = open_session()
        for term, translation in WORDS:
            vocabulary_store.add("alltag", "markt", term, translation)
        assert session.cards.total == 0

    def test_removed_word_leaves_order_practice(self, open_session, vocabulary_store):
        session = open_session()
        entry = vocabulary_store.add("alltag", "ein-tag", "Hund", "dog")
        assert session.order.total == 1

        vocabulary_store.remove(entry)
        assert session.order.total == 0

    def test_close_stops_following(self, open_session, vocabulary_store):
        session = open_session()
        session.close()
        for term, translation in WORDS:
            vocabulary_store.add("alltag", "ein-tag", term, translation)
        assert session.cards.total == 0

    def test_reset_all(self, open_session, progress_store, state_repo):
        session = open_session()
        for index in range(session.fill.total):
            solve_fill(session.fill, index)

        session.reset_all()
        assert session.fill.correct_count() == 0
        assert not progress_store.is_mode_complete("alltag", "ein-tag", ProgressKey.FILL)
        stored = state_repo.load("alltag", "ein-tag")
        assert stored is not None
        assert stored["fill"]["initialized"]

    def test_context_manager_closes(self, sample_text, vocabulary_store, progress_store, state_repo, timer_factory):
        with PracticeSession(
            "alltag",
            sample_text,
            vocabulary_store,
            progress_store,
            state_repo,
            timer_factory=timer_factory,
        ) as session:
            pass
        vocabulary_store.add("alltag", "ein-tag", "Hund", "dog")
        assert session.order.total == 0
