"""Repository-backed stores for the presentation layer.

Each store holds the records last loaded through its repository and a
last_error string. Repository failures never propagate out of a store:
they are logged and surfaced through last_error, and the loaded
collection falls back to an empty (or default) value. There is no retry.

Repositories are injected explicitly; the defaults are the SQLite
repository modules in vocabquest.db.
"""

from __future__ import annotations

import random
import sqlite3
from typing import Any, Callable, TypeVar

import structlog

from vocabquest.core.models import (
    Learner,
    LearningProgress,
    SceneCategory,
    SceneDefinition,
    VocabularyEntry,
)
from vocabquest.core.sample_data import SeedError, default_scenes
from vocabquest.db import learner_repository, scene_repository, vocabulary_repository
from vocabquest.db.database import RepositoryError

logger = structlog.get_logger(__name__)

T = TypeVar("T")

# Failures a store turns into last_error
STORE_ERRORS = (sqlite3.Error, RepositoryError, SeedError)

# Sample size when a scene has no linked vocabulary at all
FALLBACK_SAMPLE_SIZE = 5


class _Store:
    """Shared error surfacing for stores."""

    def __init__(self) -> None:
        self.last_error: str | None = None

    def _call(self, operation: str, func: Callable[[], T], fallback: T) -> T:
        """Run a repository call, returning fallback on failure."""
        self.last_error = None
        try:
            return func()
        except STORE_ERRORS as e:
            self.last_error = str(e) or type(e).__name__
            logger.warning(
                "store.operation_failed",
                store=type(self).__name__,
                operation=operation,
                error=self.last_error,
            )
            return fallback


class VocabularyStore(_Store):
    """Loads vocabulary for scenes and categories."""

    def __init__(self, repository: Any = vocabulary_repository, rng: random.Random | None = None):
        super().__init__()
        self.repository = repository
        self.rng = rng or random.Random()
        self.vocabularies: list[VocabularyEntry] = []

    def fetch_for_scene(self, scene: SceneDefinition) -> list[VocabularyEntry]:
        """Load the vocabulary of a scene.

        Uses the scene's linked ids, then its vocabulary category, then
        a random sample of all entries.
        """

        def load() -> list[VocabularyEntry]:
            if scene.vocabulary_ids:
                entries = self.repository.get_vocabulary_by_ids(list(scene.vocabulary_ids))
            else:
                entries = self.repository.get_vocabulary_by_category(
                    scene.category.vocabulary_category
                )
            if entries:
                return entries

            everything = self.repository.get_all_vocabulary()
            logger.info(
                "store.scene_vocabulary_fallback",
                scene_id=scene.scene_id,
                available=len(everything),
            )
            return self.rng.sample(everything, min(FALLBACK_SAMPLE_SIZE, len(everything)))

        self.vocabularies = self._call("fetch_for_scene", load, [])
        return self.vocabularies

    def fetch_by_category(self, category: str) -> list[VocabularyEntry]:
        self.vocabularies = self._call(
            "fetch_by_category",
            lambda: self.repository.get_vocabulary_by_category(category),
            [],
        )
        return self.vocabularies

    def fetch_all(self) -> list[VocabularyEntry]:
        self.vocabularies = self._call(
            "fetch_all", self.repository.get_all_vocabulary, []
        )
        return self.vocabularies


class SceneStore(_Store):
    """Loads scenes, seeding the defaults into an empty repository."""

    def __init__(
        self,
        repository: Any = scene_repository,
        vocabulary: Any = vocabulary_repository,
    ):
        super().__init__()
        self.repository = repository
        self.vocabulary = vocabulary
        self.scenes: list[SceneDefinition] = []

    def fetch_all(self) -> list[SceneDefinition]:
        """Load all scenes; on failure fall back to unlinked default scenes."""

        def load() -> list[SceneDefinition]:
            scenes = self.repository.get_all_scenes()
            if scenes:
                return scenes
            return self._initialize_defaults()

        self.scenes = self._call("fetch_all", load, [])
        if self.last_error is not None:
            self.scenes = self._safe_defaults()
        return self.scenes

    def fetch_by_category(self, category: SceneCategory) -> list[SceneDefinition]:
        self.scenes = self._call(
            "fetch_by_category",
            lambda: self.repository.get_scenes_by_category(category),
            [],
        )
        return self.scenes

    def get(self, scene_id: str) -> SceneDefinition | None:
        return self._call("get", lambda: self.repository.get_scene_by_id(scene_id), None)

    @property
    def school_life_scenes(self) -> list[SceneDefinition]:
        return [s for s in self.scenes if s.category.is_school_life]

    @property
    def daily_life_scenes(self) -> list[SceneDefinition]:
        return [s for s in self.scenes if not s.category.is_school_life]

    def _initialize_defaults(self) -> list[SceneDefinition]:
        scenes = default_scenes(self.vocabulary.get_all_vocabulary())
        for scene in scenes:
            self.repository.insert_scene(scene)
        logger.info("store.default_scenes_saved", count=len(scenes))
        return scenes

    def _safe_defaults(self) -> list[SceneDefinition]:
        try:
            return default_scenes()
        except SeedError as e:
            logger.error("store.default_scenes_unavailable", error=str(e))
            return []


class LearnerStore(_Store):
    """Holds the current learner and records answers for it."""

    def __init__(self, repository: Any = learner_repository):
        super().__init__()
        self.repository = repository
        self.current_learner: Learner | None = None

    def fetch_current(self) -> Learner | None:
        """Load the most recently created learner."""
        self.current_learner = self._call(
            "fetch_current", self.repository.get_current_learner, None
        )
        return self.current_learner

    def select(self, learner_id: str) -> Learner | None:
        self.current_learner = self._call(
            "select", lambda: self.repository.get_learner_by_id(learner_id), None
        )
        return self.current_learner

    def fetch_all(self) -> list[Learner]:
        return self._call("fetch_all", self.repository.get_all_learners, [])

    def create(self, name: str) -> Learner:
        """Create a learner and make it current.

        The learner stays current even when saving fails; the failure is
        reported through last_error.
        """
        learner = Learner(name=name)
        self.current_learner = learner
        self._call("create", lambda: self.repository.insert_learner(learner), None)
        return learner

    def delete(self, learner_id: str) -> bool:
        deleted = self._call(
            "delete", lambda: self.repository.delete_learner(learner_id), False
        )
        if deleted and self.current_learner and self.current_learner.learner_id == learner_id:
            self.current_learner = None
        return deleted

    def record_answer(self, vocabulary_id: str, is_correct: bool) -> LearningProgress | None:
        """Record an answer for the current learner and persist it.

        Returns:
            The updated progress record, or None without a current learner
        """
        learner = self.current_learner
        if learner is None:
            return None

        progress = learner.record_answer(vocabulary_id, is_correct)
        self._call(
            "record_answer",
            lambda: self.repository.save_answer(learner, progress),
            None,
        )
        return progress
