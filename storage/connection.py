"""Database connection management and schema initialization."""

import sqlite3
from pathlib import Path

DEFAULT_DB_PATH = Path(__file__).parent.parent / "data" / "reader.db"

SCHEMA_SQL = """
-- Words the learner saved while reading, scoped to one text
CREATE TABLE IF NOT EXISTS vocabulary (
    id TEXT PRIMARY KEY,
    topic_id TEXT NOT NULL,
    text_id TEXT NOT NULL,
    source_term TEXT NOT NULL,
    target_term TEXT NOT NULL,
    base_form TEXT,
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_vocabulary_text ON vocabulary(topic_id, text_id);

-- Completion flags per (topic, text) and progress key
CREATE TABLE IF NOT EXISTS text_progress (
    topic_id TEXT NOT NULL,
    text_id TEXT NOT NULL,
    progress_key TEXT NOT NULL,
    completed_at TEXT NOT NULL,
    PRIMARY KEY (topic_id, text_id, progress_key)
);

-- Practice state of all modes per (topic, text), as one JSON blob
CREATE TABLE IF NOT EXISTS practice_state (
    topic_id TEXT NOT NULL,
    text_id TEXT NOT NULL,
    state TEXT NOT NULL,  -- JSON object keyed by mode
    updated_at TEXT NOT NULL,
    PRIMARY KEY (topic_id, text_id)
);
"""


def get_connection(db_path: Path = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Get a database connection with appropriate settings.

    Args:
        db_path: Path to the SQLite database file.

    Returns:
        A configured sqlite3 Connection object.
    """
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def init_schema(db_path: Path = DEFAULT_DB_PATH) -> None:
    """Initialize the database schema if it doesn't exist.

    Args:
        db_path: Path to the SQLite database file.
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = get_connection(db_path)
    try:
        conn.executescript(SCHEMA_SQL)
        conn.commit()
    finally:
        conn.close()
