"""Repository functions for learners and their progress.

Progress rows hang off learners with ON DELETE CASCADE, so deleting
a learner removes every progress record it owns.
"""

from __future__ import annotations

import sqlite3
from datetime import datetime

import structlog

from vocabquest.core.models import Learner, LearningProgress
from vocabquest.db.database import RepositoryError, get_db

logger = structlog.get_logger(__name__)


def insert_learner(learner: Learner) -> None:
    """Insert a learner and any progress it already carries.

    Raises:
        sqlite3.IntegrityError: If learner_id or name already exists
    """
    with get_db() as conn:
        conn.execute(
            """
            INSERT INTO learners (
                learner_id, name, avatar, level, total_points, created_at, parent_id
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                learner.learner_id,
                learner.name,
                learner.avatar,
                learner.level,
                learner.total_points,
                learner.created_at.isoformat(),
                learner.parent_id,
            ),
        )
        for progress in learner.progress.values():
            _upsert_progress(conn, progress)

    logger.debug("learners.inserted", learner_id=learner.learner_id)


def get_learner_by_id(learner_id: str) -> Learner | None:
    """Get a learner with its progress records."""
    with get_db() as conn:
        row = conn.execute(
            "SELECT * FROM learners WHERE learner_id = ?", (learner_id,)
        ).fetchone()
        if row is None:
            return None
        return _load_learner(conn, row)


def get_learner_by_name(name: str) -> Learner | None:
    with get_db() as conn:
        row = conn.execute(
            "SELECT * FROM learners WHERE name = ?", (name,)
        ).fetchone()
        if row is None:
            return None
        return _load_learner(conn, row)


def get_all_learners() -> list[Learner]:
    """Get all learners, oldest first."""
    with get_db() as conn:
        rows = conn.execute(
            "SELECT * FROM learners ORDER BY created_at, rowid"
        ).fetchall()
        return [_load_learner(conn, row) for row in rows]


def get_current_learner() -> Learner | None:
    """Get the most recently created learner."""
    with get_db() as conn:
        row = conn.execute(
            "SELECT * FROM learners ORDER BY created_at DESC, rowid DESC LIMIT 1"
        ).fetchone()
        if row is None:
            return None
        return _load_learner(conn, row)


def update_learner(learner: Learner) -> None:
    """Persist level, points and avatar of an existing learner.

    Raises:
        RepositoryError: If the learner doesn't exist
    """
    with get_db() as conn:
        cursor = conn.execute(
            """
            UPDATE learners SET avatar = ?, level = ?, total_points = ?
            WHERE learner_id = ?
            """,
            (learner.avatar, learner.level, learner.total_points, learner.learner_id),
        )
        if cursor.rowcount == 0:
            raise RepositoryError(f"Learner not found: {learner.learner_id}")

    logger.debug(
        "learners.updated",
        learner_id=learner.learner_id,
        total_points=learner.total_points,
    )


def save_answer(learner: Learner, progress: LearningProgress) -> None:
    """Persist a recorded answer: learner points and the progress row together.

    Raises:
        RepositoryError: If the learner doesn't exist
    """
    with get_db() as conn:
        cursor = conn.execute(
            "UPDATE learners SET level = ?, total_points = ? WHERE learner_id = ?",
            (learner.level, learner.total_points, learner.learner_id),
        )
        if cursor.rowcount == 0:
            raise RepositoryError(f"Learner not found: {learner.learner_id}")
        _upsert_progress(conn, progress)

    logger.debug(
        "learners.answer_saved",
        learner_id=learner.learner_id,
        vocabulary_id=progress.vocabulary_id,
        mastery_level=progress.mastery_level,
    )


def delete_learner(learner_id: str) -> bool:
    """Delete a learner and, by cascade, its progress.

    Returns:
        True if deleted, False if not found
    """
    with get_db() as conn:
        cursor = conn.execute(
            "DELETE FROM learners WHERE learner_id = ?", (learner_id,)
        )

    deleted = cursor.rowcount > 0
    if deleted:
        logger.debug("learners.deleted", learner_id=learner_id)

    return deleted


def upsert_progress(progress: LearningProgress) -> None:
    """Insert or replace a single progress record."""
    with get_db() as conn:
        _upsert_progress(conn, progress)


def get_progress_for_learner(learner_id: str) -> list[LearningProgress]:
    with get_db() as conn:
        return _fetch_progress(conn, learner_id)


def count_progress_rows(learner_id: str) -> int:
    with get_db() as conn:
        return conn.execute(
            "SELECT COUNT(*) FROM learning_progress WHERE learner_id = ?",
            (learner_id,),
        ).fetchone()[0]


def _upsert_progress(conn: sqlite3.Connection, progress: LearningProgress) -> None:
    conn.execute(
        """
        INSERT INTO learning_progress (
            learner_id, vocabulary_id, mastery_level, review_count,
            correct_answers, total_answers, last_review_date, first_learned_date
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        ON CONFLICT(learner_id, vocabulary_id) DO UPDATE SET
            mastery_level = excluded.mastery_level,
            review_count = excluded.review_count,
            correct_answers = excluded.correct_answers,
            total_answers = excluded.total_answers,
            last_review_date = excluded.last_review_date,
            first_learned_date = excluded.first_learned_date
        """,
        (
            progress.learner_id,
            progress.vocabulary_id,
            progress.mastery_level,
            progress.review_count,
            progress.correct_answers,
            progress.total_answers,
            progress.last_review_date.isoformat(),
            progress.first_learned_date.isoformat()
            if progress.first_learned_date
            else None,
        ),
    )


def _fetch_progress(conn: sqlite3.Connection, learner_id: str) -> list[LearningProgress]:
    rows = conn.execute(
        "SELECT * FROM learning_progress WHERE learner_id = ? ORDER BY vocabulary_id",
        (learner_id,),
    ).fetchall()
    return [_row_to_progress(row) for row in rows]


def _load_learner(conn: sqlite3.Connection, row: sqlite3.Row) -> Learner:
    """Convert database row to Learner, attaching its progress."""
    learner = Learner(
        learner_id=row["learner_id"],
        name=row["name"],
        avatar=row["avatar"],
        level=row["level"],
        total_points=row["total_points"],
        created_at=datetime.fromisoformat(row["created_at"]),
        parent_id=row["parent_id"],
    )
    for progress in _fetch_progress(conn, learner.learner_id):
        learner.progress[progress.vocabulary_id] = progress
    return learner


def _row_to_progress(row: sqlite3.Row) -> LearningProgress:
    first_learned = row["first_learned_date"]
    return LearningProgress(
        learner_id=row["learner_id"],
        vocabulary_id=row["vocabulary_id"],
        mastery_level=row["mastery_level"],
        review_count=row["review_count"],
        correct_answers=row["correct_answers"],
        total_answers=row["total_answers"],
        last_review_date=datetime.fromisoformat(row["last_review_date"]),
        first_learned_date=datetime.fromisoformat(first_learned) if first_learned else None,
    )
