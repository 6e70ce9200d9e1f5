"""Repository functions for the vocabulary table."""

from __future__ import annotations

import json
import sqlite3

import structlog

from vocabquest.core.models import VocabularyEntry
from vocabquest.db.database import get_db

logger = structlog.get_logger(__name__)


def insert_vocabulary(entry: VocabularyEntry) -> None:
    """Insert a vocabulary entry.

    Raises:
        sqlite3.IntegrityError: If vocabulary_id already exists
    """
    with get_db() as conn:
        conn.execute(
            """
            INSERT INTO vocabulary (
                vocabulary_id, word, reading, ruby_text, meaning, meaning_en,
                category, difficulty, jlpt_level, romaji,
                image_url, audio_url, example_sentences
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                entry.vocabulary_id,
                entry.word,
                entry.reading,
                entry.ruby_text,
                entry.meaning,
                entry.meaning_en,
                entry.category,
                entry.difficulty,
                entry.jlpt_level,
                entry.romaji,
                entry.image_url,
                entry.audio_url,
                json.dumps(list(entry.example_sentences), ensure_ascii=False),
            ),
        )

    logger.debug("vocabulary.inserted", vocabulary_id=entry.vocabulary_id)


def get_vocabulary_by_id(vocabulary_id: str) -> VocabularyEntry | None:
    """Get a vocabulary entry by ID, or None if missing."""
    with get_db() as conn:
        row = conn.execute(
            "SELECT * FROM vocabulary WHERE vocabulary_id = ?", (vocabulary_id,)
        ).fetchone()

    if row is None:
        return None

    return _row_to_entry(row)


def get_all_vocabulary() -> list[VocabularyEntry]:
    """Get all entries sorted by word."""
    with get_db() as conn:
        rows = conn.execute("SELECT * FROM vocabulary ORDER BY word").fetchall()

    return [_row_to_entry(row) for row in rows]


def get_vocabulary_by_ids(vocabulary_ids: list[str]) -> list[VocabularyEntry]:
    """Get entries for a list of IDs, sorted by difficulty then word.

    Unknown IDs are skipped.
    """
    if not vocabulary_ids:
        return []

    placeholders = ", ".join("?" for _ in vocabulary_ids)
    with get_db() as conn:
        rows = conn.execute(
            f"SELECT * FROM vocabulary WHERE vocabulary_id IN ({placeholders}) "
            "ORDER BY difficulty, word",
            tuple(vocabulary_ids),
        ).fetchall()

    return [_row_to_entry(row) for row in rows]


def get_vocabulary_by_category(category: str) -> list[VocabularyEntry]:
    """Get entries of a category sorted by word."""
    with get_db() as conn:
        rows = conn.execute(
            "SELECT * FROM vocabulary WHERE category = ? ORDER BY word", (category,)
        ).fetchall()

    return [_row_to_entry(row) for row in rows]


def get_vocabulary_by_difficulty(difficulty: int) -> list[VocabularyEntry]:
    """Get entries of a difficulty level sorted by word."""
    with get_db() as conn:
        rows = conn.execute(
            "SELECT * FROM vocabulary WHERE difficulty = ? ORDER BY word",
            (difficulty,),
        ).fetchall()

    return [_row_to_entry(row) for row in rows]


def count_vocabulary() -> int:
    with get_db() as conn:
        return conn.execute("SELECT COUNT(*) FROM vocabulary").fetchone()[0]


def delete_vocabulary(vocabulary_id: str) -> bool:
    """Delete an entry by ID.

    Returns:
        True if deleted, False if not found
    """
    with get_db() as conn:
        cursor = conn.execute(
            "DELETE FROM vocabulary WHERE vocabulary_id = ?", (vocabulary_id,)
        )

    deleted = cursor.rowcount > 0
    if deleted:
        logger.debug("vocabulary.deleted", vocabulary_id=vocabulary_id)

    return deleted


def _row_to_entry(row: sqlite3.Row) -> VocabularyEntry:
    """Convert database row to VocabularyEntry."""
    return VocabularyEntry(
        vocabulary_id=row["vocabulary_id"],
        word=row["word"],
        reading=row["reading"],
        ruby_text=row["ruby_text"],
        meaning=row["meaning"],
        meaning_en=row["meaning_en"],
        category=row["category"],
        difficulty=row["difficulty"],
        jlpt_level=row["jlpt_level"],
        romaji=row["romaji"],
        image_url=row["image_url"],
        audio_url=row["audio_url"],
        example_sentences=tuple(json.loads(row["example_sentences"] or "[]")),
    )
