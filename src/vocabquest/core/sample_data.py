"""Bundled vocabulary and scene tables.

Loads the YAML tables shipped in vocabquest/data/ and seeds an empty
database with them. Scenes get their vocabulary_ids from the entries
whose category matches the scene's vocabulary category.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog
import yaml

from vocabquest.core.models import SceneCategory, SceneDefinition, VocabularyEntry
from vocabquest.db import scene_repository, vocabulary_repository

logger = structlog.get_logger(__name__)

DATA_DIR = Path(__file__).resolve().parent.parent / "data"
VOCABULARY_FILE = DATA_DIR / "vocabulary_v1.yaml"
SCENES_FILE = DATA_DIR / "scenes_v1.yaml"


class SeedError(Exception):
    """Error loading or seeding bundled data."""

    pass


@dataclass
class SeedResult:
    """Counts of records inserted by seed_database."""

    vocabulary_inserted: int
    scenes_inserted: int

    @property
    def seeded(self) -> bool:
        return self.vocabulary_inserted > 0 or self.scenes_inserted > 0


def _load_yaml(path: Path, key: str) -> list[dict[str, Any]]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise SeedError(f"Cannot read {path.name}: {e}") from e

    items = data.get(key)
    if not isinstance(items, list):
        raise SeedError(f"{path.name} has no '{key}' list")
    return items


def load_sample_vocabulary(path: Path | None = None) -> list[VocabularyEntry]:
    """Load bundled vocabulary entries (fresh ids on each call)."""
    entries = []
    for item in _load_yaml(path or VOCABULARY_FILE, "vocabulary"):
        entries.append(
            VocabularyEntry(
                word=item["word"],
                reading=item["reading"],
                ruby_text=item.get("ruby_text", item["word"]),
                meaning=item["meaning"],
                meaning_en=item.get("meaning_en"),
                category=item["category"],
                difficulty=int(item.get("difficulty", 1)),
                jlpt_level=item.get("jlpt_level"),
                romaji=item.get("romaji"),
                image_url=item.get("image_url", ""),
                audio_url=item.get("audio_url", ""),
                example_sentences=tuple(item.get("example_sentences", [])),
            )
        )
    return entries


def default_scenes(
    vocabulary: list[VocabularyEntry] | None = None,
    path: Path | None = None,
) -> list[SceneDefinition]:
    """Load bundled scenes, linking them to the given vocabulary.

    Args:
        vocabulary: Entries to link by category (none linked if omitted)
        path: Alternative scenes YAML

    Returns:
        Scenes sorted by order
    """
    ids_by_category: dict[str, list[str]] = {}
    for entry in vocabulary or []:
        ids_by_category.setdefault(entry.category, []).append(entry.vocabulary_id)

    scenes = []
    for item in _load_yaml(path or SCENES_FILE, "scenes"):
        category = SceneCategory(item["category"])
        scenes.append(
            SceneDefinition(
                title=item["title"],
                ruby_title=item.get("ruby_title", item["title"]),
                title_en=item.get("title_en"),
                description=item.get("description", ""),
                description_en=item.get("description_en"),
                story_content=item.get("story_content", ""),
                order=int(item["order"]),
                category=category,
                vocabulary_ids=tuple(
                    ids_by_category.get(category.vocabulary_category, [])
                ),
                illustration_urls=tuple(item.get("illustration_urls", [])),
                cultural_note=item.get("cultural_note"),
            )
        )

    return sorted(scenes, key=lambda s: s.order)


def seed_database() -> SeedResult:
    """Insert bundled vocabulary and scenes into empty tables.

    Tables that already hold rows are left untouched. Scenes are linked
    to whatever vocabulary is in the database after the first step.
    """
    vocabulary_inserted = 0
    scenes_inserted = 0

    if vocabulary_repository.count_vocabulary() == 0:
        for entry in load_sample_vocabulary():
            vocabulary_repository.insert_vocabulary(entry)
            vocabulary_inserted += 1
        logger.info("seed.vocabulary_inserted", count=vocabulary_inserted)
    else:
        logger.info("seed.vocabulary_exists")

    if scene_repository.count_scenes() == 0:
        vocabulary = vocabulary_repository.get_all_vocabulary()
        for scene in default_scenes(vocabulary):
            scene_repository.insert_scene(scene)
            scenes_inserted += 1
        logger.info("seed.scenes_inserted", count=scenes_inserted)
    else:
        logger.info("seed.scenes_exist")

    return SeedResult(
        vocabulary_inserted=vocabulary_inserted,
        scenes_inserted=scenes_inserted,
    )
