"""Domain records for vocabulary, scenes, learners and progress.

Reference data (VocabularyEntry, SceneDefinition) is immutable.
LearningProgress and Learner are plain mutable records owned by a
single caller; persistence lives in vocabquest.db.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

# Mastery bounds
MIN_MASTERY_LEVEL = 0
MAX_MASTERY_LEVEL = 3
MASTERED_ACCURACY = 0.8

POINTS_PER_LEVEL = 100


def generate_id() -> str:
    """Generate a new record identifier."""
    return uuid.uuid4().hex


def utc_now() -> datetime:
    """Current time as timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


# =============================================================================
# REFERENCE DATA
# =============================================================================


@dataclass(frozen=True)
class VocabularyEntry:
    """A single vocabulary item with its reading and ruby markup."""

    word: str
    reading: str
    ruby_text: str
    meaning: str
    category: str
    difficulty: int
    vocabulary_id: str = field(default_factory=generate_id)
    meaning_en: str | None = None
    jlpt_level: int | None = None
    romaji: str | None = None
    image_url: str = ""
    audio_url: str = ""
    example_sentences: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "vocabulary_id": self.vocabulary_id,
            "word": self.word,
            "reading": self.reading,
            "ruby_text": self.ruby_text,
            "meaning": self.meaning,
            "meaning_en": self.meaning_en,
            "category": self.category,
            "difficulty": self.difficulty,
            "jlpt_level": self.jlpt_level,
            "romaji": self.romaji,
            "image_url": self.image_url,
            "audio_url": self.audio_url,
            "example_sentences": list(self.example_sentences),
        }


class SceneCategory(str, Enum):
    """School-life and daily-life scene groupings."""

    MORNING_ASSEMBLY = "morning_assembly"
    CLASS_TIME = "class_time"
    LUNCH_TIME = "lunch_time"
    CLEANING_TIME = "cleaning_time"
    BREAK_TIME = "break_time"
    HOME_LIFE = "home_life"
    SHOPPING = "shopping"
    PARK = "park"
    LESSONS = "lessons"

    @property
    def display_name(self) -> str:
        return _CATEGORY_NAMES[self][0]

    @property
    def ruby_display_name(self) -> str:
        return _CATEGORY_NAMES[self][1]

    @property
    def vocabulary_category(self) -> str:
        """Vocabulary category tag this scene draws its words from."""
        return _CATEGORY_NAMES[self][2]

    @property
    def is_school_life(self) -> bool:
        return self in _SCHOOL_LIFE


# category -> (display name, kana, vocabulary category tag)
_CATEGORY_NAMES: dict[SceneCategory, tuple[str, str, str]] = {
    SceneCategory.MORNING_ASSEMBLY: ("朝の会", "あさのかい", "朝の会・帰りの会"),
    SceneCategory.CLASS_TIME: ("授業時間", "じゅぎょうじかん", "教室"),
    SceneCategory.LUNCH_TIME: ("給食時間", "きゅうしょくじかん", "給食"),
    SceneCategory.CLEANING_TIME: ("掃除時間", "そうじじかん", "掃除の時間"),
    SceneCategory.BREAK_TIME: ("休み時間", "やすみじかん", "休み時間"),
    SceneCategory.HOME_LIFE: ("家での生活", "いえでのせいかつ", "家での生活"),
    SceneCategory.SHOPPING: ("買い物", "かいもの", "買い物"),
    SceneCategory.PARK: ("公園・遊び場", "こうえん・あそびば", "公園・遊び場"),
    SceneCategory.LESSONS: ("習い事", "ならいごと", "習い事"),
}

_SCHOOL_LIFE = frozenset(
    {
        SceneCategory.MORNING_ASSEMBLY,
        SceneCategory.CLASS_TIME,
        SceneCategory.LUNCH_TIME,
        SceneCategory.CLEANING_TIME,
        SceneCategory.BREAK_TIME,
    }
)


@dataclass(frozen=True)
class SceneDefinition:
    """A thematic grouping of vocabulary tied to a real-life context."""

    title: str
    ruby_title: str
    description: str
    story_content: str
    order: int
    category: SceneCategory
    scene_id: str = field(default_factory=generate_id)
    vocabulary_ids: tuple[str, ...] = ()
    illustration_urls: tuple[str, ...] = ()
    title_en: str | None = None
    description_en: str | None = None
    cultural_note: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "scene_id": self.scene_id,
            "title": self.title,
            "ruby_title": self.ruby_title,
            "title_en": self.title_en,
            "description": self.description,
            "description_en": self.description_en,
            "story_content": self.story_content,
            "order": self.order,
            "category": self.category.value,
            "vocabulary_ids": list(self.vocabulary_ids),
            "illustration_urls": list(self.illustration_urls),
            "cultural_note": self.cultural_note,
        }


# =============================================================================
# LEARNER STATE
# =============================================================================


@dataclass
class LearningProgress:
    """Progress of one learner on one vocabulary item."""

    learner_id: str
    vocabulary_id: str
    mastery_level: int = 0
    review_count: int = 0
    correct_answers: int = 0
    total_answers: int = 0
    last_review_date: datetime = field(default_factory=utc_now)
    first_learned_date: datetime | None = None

    def __post_init__(self):
        if not MIN_MASTERY_LEVEL <= self.mastery_level <= MAX_MASTERY_LEVEL:
            raise ValueError(
                f"mastery_level must be in [{MIN_MASTERY_LEVEL}, {MAX_MASTERY_LEVEL}], "
                f"got {self.mastery_level}"
            )

    @property
    def accuracy_rate(self) -> float:
        """Correct answers over total answers, 0.0 before any answer."""
        if self.total_answers <= 0:
            return 0.0
        return self.correct_answers / self.total_answers

    @property
    def is_mastered(self) -> bool:
        return (
            self.mastery_level >= MAX_MASTERY_LEVEL
            and self.accuracy_rate >= MASTERED_ACCURACY
        )

    def record_answer(self, is_correct: bool, now: datetime | None = None) -> None:
        """Record an answer and move the mastery level one step."""
        now = now or utc_now()

        self.total_answers += 1
        if is_correct:
            self.correct_answers += 1

        if self.first_learned_date is None:
            self.first_learned_date = now

        self.last_review_date = now
        self.review_count += 1

        if is_correct:
            self.mastery_level = min(MAX_MASTERY_LEVEL, self.mastery_level + 1)
        else:
            self.mastery_level = max(MIN_MASTERY_LEVEL, self.mastery_level - 1)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "learner_id": self.learner_id,
            "vocabulary_id": self.vocabulary_id,
            "mastery_level": self.mastery_level,
            "review_count": self.review_count,
            "correct_answers": self.correct_answers,
            "total_answers": self.total_answers,
            "accuracy_rate": self.accuracy_rate,
            "is_mastered": self.is_mastered,
            "last_review_date": self.last_review_date.isoformat(),
            "first_learned_date": (
                self.first_learned_date.isoformat() if self.first_learned_date else None
            ),
        }


@dataclass
class Learner:
    """A young learner with points, level and per-word progress."""

    name: str
    learner_id: str = field(default_factory=generate_id)
    avatar: str = "default"
    level: int = 1
    total_points: int = 0
    created_at: datetime = field(default_factory=utc_now)
    parent_id: str | None = None
    progress: dict[str, LearningProgress] = field(default_factory=dict)

    def progress_for(self, vocabulary_id: str) -> LearningProgress:
        """Get the progress record for a word, creating it if needed."""
        record = self.progress.get(vocabulary_id)
        if record is None:
            record = LearningProgress(
                learner_id=self.learner_id, vocabulary_id=vocabulary_id
            )
            self.progress[vocabulary_id] = record
        return record

    def record_answer(
        self,
        vocabulary_id: str,
        is_correct: bool,
        now: datetime | None = None,
    ) -> LearningProgress:
        """Record an answer and award points on a correct one.

        A correct answer earns as many points as the new mastery level.
        """
        record = self.progress_for(vocabulary_id)
        record.record_answer(is_correct, now=now)
        if is_correct:
            self.total_points += record.mastery_level
        return record

    def level_progress(self, points_per_level: int = POINTS_PER_LEVEL) -> float:
        """Fraction of the way from the current level to the next (0.0-1.0)."""
        current_floor = self.level * points_per_level
        progress_points = max(0, self.total_points - current_floor)
        return min(1.0, progress_points / points_per_level)

    def points_to_next_level(self, points_per_level: int = POINTS_PER_LEVEL) -> int:
        return (self.level + 1) * points_per_level - self.total_points

    @property
    def mastered_count(self) -> int:
        return sum(1 for p in self.progress.values() if p.is_mastered)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "learner_id": self.learner_id,
            "name": self.name,
            "avatar": self.avatar,
            "level": self.level,
            "total_points": self.total_points,
            "created_at": self.created_at.isoformat(),
            "parent_id": self.parent_id,
            "mastered_count": self.mastered_count,
        }
