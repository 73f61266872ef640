"""SQLite implementations of repository interfaces."""

import csv
import json
import logging
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any

from models import ProgressKey, TextProgress, VocabEntry

from .base import PracticeStateRepository, ProgressRepository, VocabularyRepository
from .connection import DEFAULT_DB_PATH, get_connection

logger = logging.getLogger(__name__)

CSV_COLUMNS = ["topic_id", "text_id", "source_term", "base_form", "target_term"]


class SQLiteVocabularyRepository(VocabularyRepository):
    """SQLite implementation of VocabularyRepository."""

    def __init__(self, db_path: Path = DEFAULT_DB_PATH):
        self.db_path = db_path

    def add(
        self,
        topic_id: str,
        text_id: str,
        source_term: str,
        target_term: str,
        base_form: str | None = None,
    ) -> VocabEntry | None:
        """Save a word for a text, refusing duplicates."""
        source_term = source_term.strip()
        target_term = target_term.strip()
        if not source_term or not target_term:
            raise ValueError("Both the word and its translation are required")

        conn = get_connection(self.db_path)
        try:
            if self._find(conn, topic_id, text_id, source_term):
                logger.debug("Word %r already saved for %s/%s", source_term, topic_id, text_id)
                return None

            entry = VocabEntry(
                id=uuid.uuid4().hex,
                source_term=source_term,
                target_term=target_term,
                base_form=(base_form or "").strip() or None,
                topic_id=topic_id,
                text_id=text_id,
            )
            conn.execute(
                """INSERT INTO vocabulary
                (id, topic_id, text_id, source_term, target_term, base_form, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)""",
                (
                    entry.id,
                    entry.topic_id,
                    entry.text_id,
                    entry.source_term,
                    entry.target_term,
                    entry.base_form,
                    entry.created_at.isoformat(),
                ),
            )
            conn.commit()
            return entry
        finally:
            conn.close()

    def remove(self, entry_id: str) -> bool:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute("DELETE FROM vocabulary WHERE id = ?", (entry_id,))
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def get_for_text(self, topic_id: str, text_id: str) -> list[VocabEntry]:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                """SELECT * FROM vocabulary WHERE topic_id = ? AND text_id = ?
                ORDER BY created_at, rowid""",
                (topic_id, text_id),
            )
            return [self._row_to_model(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def get_all(self) -> list[VocabEntry]:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute("SELECT * FROM vocabulary ORDER BY created_at, rowid")
            return [self._row_to_model(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def find_by_term(
        self, topic_id: str, text_id: str, source_term: str
    ) -> VocabEntry | None:
        conn = get_connection(self.db_path)
        try:
            row = self._find(conn, topic_id, text_id, source_term.strip())
            return self._row_to_model(row) if row else None
        finally:
            conn.close()

    def clear_for_text(self, topic_id: str, text_id: str) -> int:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                "DELETE FROM vocabulary WHERE topic_id = ? AND text_id = ?",
                (topic_id, text_id),
            )
            conn.commit()
            return cursor.rowcount
        finally:
            conn.close()

    def export_csv(self, path: Path) -> int:
        """Write all entries to a CSV file with a header row."""
        entries = self.get_all()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=CSV_COLUMNS)
            writer.writeheader()
            for entry in entries:
                writer.writerow(
                    {
                        "topic_id": entry.topic_id,
                        "text_id": entry.text_id,
                        "source_term": entry.source_term,
                        "base_form": entry.base_form or "",
                        "target_term": entry.target_term,
                    }
                )
        return len(entries)

    def _find(self, conn, topic_id: str, text_id: str, source_term: str):
        # SQLite's LOWER() only folds ASCII, so compare in Python
        cursor = conn.execute(
            "SELECT * FROM vocabulary WHERE topic_id = ? AND text_id = ?",
            (topic_id, text_id),
        )
        wanted = source_term.lower()
        for row in cursor.fetchall():
            if row["source_term"].lower() == wanted:
                return row
        return None

    def _row_to_model(self, row) -> VocabEntry:
        """Convert a database row to a VocabEntry model."""
        return VocabEntry(
            id=row["id"],
            source_term=row["source_term"],
            target_term=row["target_term"],
            base_form=row["base_form"],
            topic_id=row["topic_id"],
            text_id=row["text_id"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )


class SQLiteProgressRepository(ProgressRepository):
    """SQLite implementation of ProgressRepository.

    Only set flags are stored; a missing row means False.
    """

    def __init__(self, db_path: Path = DEFAULT_DB_PATH):
        self.db_path = db_path

    def get(self, topic_id: str, text_id: str) -> TextProgress:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                "SELECT progress_key FROM text_progress WHERE topic_id = ? AND text_id = ?",
                (topic_id, text_id),
            )
            return self._to_progress(row["progress_key"] for row in cursor.fetchall())
        finally:
            conn.close()

    def get_all(self) -> dict[tuple[str, str], TextProgress]:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                "SELECT topic_id, text_id, progress_key FROM text_progress"
            )
            keys: dict[tuple[str, str], list[str]] = {}
            for row in cursor.fetchall():
                pair = (row["topic_id"], row["text_id"])
                keys.setdefault(pair, []).append(row["progress_key"])
            return {pair: self._to_progress(values) for pair, values in keys.items()}
        finally:
            conn.close()

    def set_flag(
        self, topic_id: str, text_id: str, key: ProgressKey, value: bool
    ) -> None:
        key = ProgressKey(key)
        conn = get_connection(self.db_path)
        try:
            if value:
                conn.execute(
                    """INSERT OR IGNORE INTO text_progress
                    (topic_id, text_id, progress_key, completed_at)
                    VALUES (?, ?, ?, ?)""",
                    (topic_id, text_id, key.value, datetime.now().isoformat()),
                )
            else:
                conn.execute(
                    """DELETE FROM text_progress
                    WHERE topic_id = ? AND text_id = ? AND progress_key = ?""",
                    (topic_id, text_id, key.value),
                )
            conn.commit()
        finally:
            conn.close()

    def reset_text(self, topic_id: str, text_id: str) -> None:
        conn = get_connection(self.db_path)
        try:
            conn.execute(
                "DELETE FROM text_progress WHERE topic_id = ? AND text_id = ?",
                (topic_id, text_id),
            )
            conn.commit()
        finally:
            conn.close()

    def _to_progress(self, keys) -> TextProgress:
        flags = {}
        for value in keys:
            try:
                flags[ProgressKey(value).value] = True
            except ValueError:
                logger.warning("Ignoring unknown progress key %r", value)
        return TextProgress(**flags)


class SQLitePracticeStateRepository(PracticeStateRepository):
    """SQLite implementation of PracticeStateRepository."""

    def __init__(self, db_path: Path = DEFAULT_DB_PATH):
        self.db_path = db_path

    def load(self, topic_id: str, text_id: str) -> dict[str, Any] | None:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                "SELECT state FROM practice_state WHERE topic_id = ? AND text_id = ?",
                (topic_id, text_id),
            )
            row = cursor.fetchone()
        finally:
            conn.close()

        if row is None:
            return None
        try:
            data = json.loads(row["state"])
        except json.JSONDecodeError as e:
            logger.warning(
                "Discarding corrupt practice state for %s/%s: %s", topic_id, text_id, e
            )
            return None
        return data if isinstance(data, dict) else None

    def save(self, topic_id: str, text_id: str, state: dict[str, Any]) -> None:
        conn = get_connection(self.db_path)
        try:
            conn.execute(
                """INSERT OR REPLACE INTO practice_state
                (topic_id, text_id, state, updated_at)
                VALUES (?, ?, ?, ?)""",
                (topic_id, text_id, json.dumps(state), datetime.now().isoformat()),
            )
            conn.commit()
        finally:
            conn.close()

    def delete(self, topic_id: str, text_id: str) -> None:
        conn = get_connection(self.db_path)
        try:
            conn.execute(
                "DELETE FROM practice_state WHERE topic_id = ? AND text_id = ?",
                (topic_id, text_id),
            )
            conn.commit()
        finally:
            conn.close()
