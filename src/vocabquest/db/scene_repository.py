"""Repository functions for the scenes table."""

from __future__ import annotations

import json
import sqlite3

import structlog

from vocabquest.core.models import SceneCategory, SceneDefinition
from vocabquest.db.database import get_db

logger = structlog.get_logger(__name__)


def insert_scene(scene: SceneDefinition) -> None:
    """Insert a scene.

    Raises:
        sqlite3.IntegrityError: If scene_id already exists
    """
    with get_db() as conn:
        conn.execute(
            """
            INSERT INTO scenes (
                scene_id, title, ruby_title, title_en, description,
                description_en, story_content, scene_order, category,
                vocabulary_ids, illustration_urls, cultural_note
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                scene.scene_id,
                scene.title,
                scene.ruby_title,
                scene.title_en,
                scene.description,
                scene.description_en,
                scene.story_content,
                scene.order,
                scene.category.value,
                json.dumps(list(scene.vocabulary_ids)),
                json.dumps(list(scene.illustration_urls)),
                scene.cultural_note,
            ),
        )

    logger.debug("scenes.inserted", scene_id=scene.scene_id, title=scene.title)


def get_scene_by_id(scene_id: str) -> SceneDefinition | None:
    with get_db() as conn:
        row = conn.execute(
            "SELECT * FROM scenes WHERE scene_id = ?", (scene_id,)
        ).fetchone()

    if row is None:
        return None

    return _row_to_scene(row)


def get_scene_by_order(order: int) -> SceneDefinition | None:
    """Get the first scene with the given display order."""
    with get_db() as conn:
        row = conn.execute(
            "SELECT * FROM scenes WHERE scene_order = ? ORDER BY title LIMIT 1",
            (order,),
        ).fetchone()

    if row is None:
        return None

    return _row_to_scene(row)


def get_all_scenes() -> list[SceneDefinition]:
    """Get all scenes sorted by display order."""
    with get_db() as conn:
        rows = conn.execute(
            "SELECT * FROM scenes ORDER BY scene_order, title"
        ).fetchall()

    return [_row_to_scene(row) for row in rows]


def get_scenes_by_category(category: SceneCategory) -> list[SceneDefinition]:
    """Get scenes of a category sorted by display order."""
    with get_db() as conn:
        rows = conn.execute(
            "SELECT * FROM scenes WHERE category = ? ORDER BY scene_order, title",
            (category.value,),
        ).fetchall()

    return [_row_to_scene(row) for row in rows]


def count_scenes() -> int:
    with get_db() as conn:
        return conn.execute("SELECT COUNT(*) FROM scenes").fetchone()[0]


def delete_scene(scene_id: str) -> bool:
    """Delete a scene by ID.

    Returns:
        True if deleted, False if not found
    """
    with get_db() as conn:
        cursor = conn.execute("DELETE FROM scenes WHERE scene_id = ?", (scene_id,))

    deleted = cursor.rowcount > 0
    if deleted:
        logger.debug("scenes.deleted", scene_id=scene_id)

    return deleted


def _row_to_scene(row: sqlite3.Row) -> SceneDefinition:
    """Convert database row to SceneDefinition."""
    return SceneDefinition(
        scene_id=row["scene_id"],
        title=row["title"],
        ruby_title=row["ruby_title"],
        title_en=row["title_en"],
        description=row["description"],
        description_en=row["description_en"],
        story_content=row["story_content"],
        order=row["scene_order"],
        category=SceneCategory(row["category"]),
        vocabulary_ids=tuple(json.loads(row["vocabulary_ids"] or "[]")),
        illustration_urls=tuple(json.loads(row["illustration_urls"] or "[]")),
        cultural_note=row["cultural_note"],
    )
