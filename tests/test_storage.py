"""Tests for the SQLite repositories."""

import csv
import sqlite3

import pytest

from models import ProgressKey
from storage import (
    SQLitePracticeStateRepository,
    SQLiteProgressRepository,
    SQLiteVocabularyRepository,
    init_schema,
)


@pytest.fixture
def vocab_repo(test_db_path):
    return SQLiteVocabularyRepository(test_db_path)


@pytest.fixture
def progress_repo(test_db_path):
    return SQLiteProgressRepository(test_db_path)


@pytest.fixture
def practice_repo(test_db_path):
    return SQLitePracticeStateRepository(test_db_path)


class TestSchema:
    """Tests for schema initialization."""

    def test_creates_tables(self, test_db_path):
        conn = sqlite3.connect(test_db_path)
        tables = {
            row[0]
            for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        }
        conn.close()
        assert {"vocabulary", "text_progress", "practice_state"} <= tables

    def test_is_idempotent_and_creates_parents(self, tmp_path):
        db_path = tmp_path / "nested" / "dir" / "reader.db"
        init_schema(db_path)
        init_schema(db_path)
        assert db_path.exists()


class TestVocabularyRepository:
    """Tests for SQLiteVocabularyRepository."""

    def test_add_and_get(self, vocab_repo):
        entry = vocab_repo.add("alltag", "ein-tag", " läuft ", "runs", base_form="laufen")
        assert entry.source_term == "läuft"
        assert entry.base_form == "laufen"

        entries = vocab_repo.get_for_text("alltag", "ein-tag")
        assert [e.id for e in entries] == [entry.id]
        assert entries[0].target_term == "runs"
        assert entries[0].created_at == entry.created_at

    def test_duplicate_ignoring_case(self, vocab_repo):
        assert vocab_repo.add("alltag", "ein-tag", "Äpfel", "apples")
        assert vocab_repo.add("alltag", "ein-tag", "äpfel", "apples") is None
        assert len(vocab_repo.get_for_text("alltag", "ein-tag")) == 1

    def test_same_word_in_another_text(self, vocab_repo):
        assert vocab_repo.add("alltag", "ein-tag", "Hund", "dog")
        assert vocab_repo.add("alltag", "markt", "Hund", "dog")
        assert len(vocab_repo.get_all()) == 2

    def test_empty_terms_rejected(self, vocab_repo):
        with pytest.raises(ValueError):
            vocab_repo.add("alltag", "ein-tag", "  ", "dog")
        with pytest.raises(ValueError):
            vocab_repo.add("alltag", "ein-tag", "Hund", "")

    def test_blank_base_form_stored_as_none(self, vocab_repo):
        entry = vocab_repo.add("alltag", "ein-tag", "Hund", "dog", base_form="  ")
        assert entry.base_form is None

    def test_keeps_insertion_order(self, vocab_repo):
        for word in ["Hund", "Katze", "Maus"]:
            vocab_repo.add("alltag", "ein-tag", word, word.lower())
        entries = vocab_repo.get_for_text("alltag", "ein-tag")
        assert [e.source_term for e in entries] == ["Hund", "Katze", "Maus"]

    def test_find_and_remove(self, vocab_repo):
        entry = vocab_repo.add("alltag", "ein-tag", "Hund", "dog")
        assert vocab_repo.find_by_term("alltag", "ein-tag", "HUND").id == entry.id
        assert vocab_repo.remove(entry.id)
        assert not vocab_repo.remove(entry.id)
        assert vocab_repo.find_by_term("alltag", "ein-tag", "Hund") is None

    def test_clear_for_text(self, vocab_repo):
        vocab_repo.add("alltag", "ein-tag", "Hund", "dog")
        vocab_repo.add("alltag", "ein-tag", "Katze", "cat")
        vocab_repo.add("alltag", "markt", "Käse", "cheese")
        assert vocab_repo.clear_for_text("alltag", "ein-tag") == 2
        assert [e.source_term for e in vocab_repo.get_all()] == ["Käse"]

    def test_export_csv(self, vocab_repo, tmp_path):
        vocab_repo.add("alltag", "ein-tag", "läuft", "runs", base_form="laufen")
        vocab_repo.add("alltag", "ein-tag", "Hund", "dog")
        path = tmp_path / "export" / "words.csv"

        assert vocab_repo.export_csv(path) == 2
        with open(path, newline="", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))
        assert list(rows[0]) == [
            "topic_id",
            "text_id",
            "source_term",
            "base_form",
            "target_term",
        ]
        assert rows[0]["source_term"] == "läuft"
        assert rows[0]["base_form"] == "laufen"
        assert rows[1]["base_form"] == ""


class TestProgressRepository:
    """Tests for SQLiteProgressRepository."""

    def test_defaults_to_nothing_done(self, progress_repo):
        progress = progress_repo.get("alltag", "ein-tag")
        assert progress.completion_count == 0
        assert not progress.fill

    def test_set_and_clear_flag(self, progress_repo):
        progress_repo.set_flag("alltag", "ein-tag", ProgressKey.FILL, True)
        progress_repo.set_flag("alltag", "ein-tag", ProgressKey.FILL, True)
        assert progress_repo.get("alltag", "ein-tag").fill

        progress_repo.set_flag("alltag", "ein-tag", ProgressKey.FILL, False)
        assert not progress_repo.get("alltag", "ein-tag").fill

    def test_unknown_key_rejected(self, progress_repo):
        with pytest.raises(ValueError):
            progress_repo.set_flag("alltag", "ein-tag", "bogus", True)

    def test_get_all_groups_by_text(self, progress_repo):
        progress_repo.set_flag("alltag", "ein-tag", ProgressKey.FILL, True)
        progress_repo.set_flag("alltag", "ein-tag", ProgressKey.SPEAK, True)
        progress_repo.set_flag("reisen", "bahnhof", ProgressKey.ORDER, True)

        everything = progress_repo.get_all()
        assert everything[("alltag", "ein-tag")].completion_count == 2
        assert everything[("reisen", "bahnhof")].order

    def test_reset_text(self, progress_repo):
        progress_repo.set_flag("alltag", "ein-tag", ProgressKey.FILL, True)
        progress_repo.set_flag("reisen", "bahnhof", ProgressKey.FILL, True)
        progress_repo.reset_text("alltag", "ein-tag")
        assert not progress_repo.get("alltag", "ein-tag").fill
        assert progress_repo.get("reisen", "bahnhof").fill

    def test_unknown_stored_key_ignored(self, progress_repo, test_db_path):
        conn = sqlite3.connect(test_db_path)
        conn.execute(
            "INSERT INTO text_progress VALUES (?, ?, ?, ?)",
            ("alltag", "ein-tag", "dance", "2024-01-01T00:00:00"),
        )
        conn.commit()
        conn.close()
        assert progress_repo.get("alltag", "ein-tag").completion_count == 0


class TestPracticeStateRepository:
    """Tests for SQLitePracticeStateRepository."""

    def test_missing_state(self, practice_repo):
        assert practice_repo.load("alltag", "ein-tag") is None

    def test_save_load_delete(self, practice_repo):
        practice_repo.save("alltag", "ein-tag", {"fill": {"current_index": 1}})
        practice_repo.save("alltag", "ein-tag", {"fill": {"current_index": 2}})
        assert practice_repo.load("alltag", "ein-tag") == {"fill": {"current_index": 2}}

        practice_repo.delete("alltag", "ein-tag")
        assert practice_repo.load("alltag", "ein-tag") is None

    def test_corrupt_state_discarded(self, practice_repo, test_db_path):
        conn = sqlite3.connect(test_db_path)
        conn.execute(
            "INSERT INTO practice_state VALUES (?, ?, ?, ?)",
            ("alltag", "ein-tag", "{not json", "2024-01-01T00:00:00"),
        )
        conn.commit()
        conn.close()
        assert practice_repo.load("alltag", "ein-tag") is None

    def test_non_object_state_discarded(self, practice_repo):
        practice_repo.save("alltag", "ein-tag", [1, 2, 3])
        assert practice_repo.load("alltag", "ein-tag") is None
