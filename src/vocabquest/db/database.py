"""SQLite database connection and schema management.

Provides connection management and schema initialization for vocabquest.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

import structlog

from vocabquest.config.app_config import get_db_path

logger = structlog.get_logger(__name__)

# Current connection target (module-level for simplicity in CLI context)
_db_path: Path | None = None


class RepositoryError(Exception):
    """Error reading or writing persisted records."""

    pass


def init_db(db_path: Path | None = None) -> Path:
    """Initialize database with schema.

    Creates the database file and all required tables if they don't exist.

    Args:
        db_path: Path to database file. Defaults to the configured path.

    Returns:
        Path of the initialized database
    """
    global _db_path
    _db_path = db_path or get_db_path()

    with get_db() as conn:
        _create_schema(conn)

    logger.info("database.initialized", path=str(_db_path))
    return _db_path


def current_db_path() -> Path:
    """Path used by get_db()."""
    return _db_path or get_db_path()


@contextmanager
def get_db() -> Generator[sqlite3.Connection, None, None]:
    """Get database connection as context manager.

    Yields:
        SQLite connection with row factory set to sqlite3.Row

    Example:
        with get_db() as conn:
            rows = conn.execute("SELECT * FROM vocabulary").fetchall()
    """
    db_path = current_db_path()

    # Ensure directory exists
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")

    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def _create_schema(conn: sqlite3.Connection) -> None:
    """Create database schema.

    Uses IF NOT EXISTS for idempotency.
    """
    conn.executescript(
        """
        -- Reference data: vocabulary entries
        CREATE TABLE IF NOT EXISTS vocabulary (
            vocabulary_id TEXT PRIMARY KEY,
            word TEXT NOT NULL,
            reading TEXT NOT NULL,
            ruby_text TEXT NOT NULL,
            meaning TEXT NOT NULL,
            meaning_en TEXT,
            category TEXT NOT NULL,
            difficulty INTEGER NOT NULL DEFAULT 1,
            jlpt_level INTEGER,
            romaji TEXT,
            image_url TEXT NOT NULL DEFAULT '',
            audio_url TEXT NOT NULL DEFAULT '',
            example_sentences TEXT NOT NULL DEFAULT '[]'
        );

        -- Reference data: scenes (vocabulary_ids is a JSON array)
        CREATE TABLE IF NOT EXISTS scenes (
            scene_id TEXT PRIMARY KEY,
            title TEXT NOT NULL,
            ruby_title TEXT NOT NULL,
            title_en TEXT,
            description TEXT NOT NULL,
            description_en TEXT,
            story_content TEXT NOT NULL,
            scene_order INTEGER NOT NULL,
            category TEXT NOT NULL,
            vocabulary_ids TEXT NOT NULL DEFAULT '[]',
            illustration_urls TEXT NOT NULL DEFAULT '[]',
            cultural_note TEXT
        );

        CREATE TABLE IF NOT EXISTS learners (
            learner_id TEXT PRIMARY KEY,
            name TEXT NOT NULL UNIQUE,
            avatar TEXT NOT NULL DEFAULT 'default',
            level INTEGER NOT NULL DEFAULT 1,
            total_points INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL,
            parent_id TEXT
        );

        -- One row per (learner, vocabulary); removed with the learner
        CREATE TABLE IF NOT EXISTS learning_progress (
            learner_id TEXT NOT NULL REFERENCES learners(learner_id) ON DELETE CASCADE,
            vocabulary_id TEXT NOT NULL,
            mastery_level INTEGER NOT NULL DEFAULT 0 CHECK(mastery_level BETWEEN 0 AND 3),
            review_count INTEGER NOT NULL DEFAULT 0,
            correct_answers INTEGER NOT NULL DEFAULT 0,
            total_answers INTEGER NOT NULL DEFAULT 0,
            last_review_date TEXT NOT NULL,
            first_learned_date TEXT,
            PRIMARY KEY (learner_id, vocabulary_id)
        );

        CREATE INDEX IF NOT EXISTS idx_vocabulary_category ON vocabulary(category);
        CREATE INDEX IF NOT EXISTS idx_scenes_category ON scenes(category);
        CREATE INDEX IF NOT EXISTS idx_progress_learner ON learning_progress(learner_id);
        """
    )
