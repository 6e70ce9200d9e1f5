"""Pydantic schemas for the Web API.

Serialization models for vocabulary, scenes, learners, progress,
quiz questions and ruby segments.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from vocabquest import __version__
from vocabquest.core.quiz import QuizType


# =============================================================================
# RUBY SCHEMAS
# =============================================================================


class RubySegmentResponse(BaseModel):
    """One display segment of ruby markup."""

    text: str
    ruby: str = ""

    model_config = {"from_attributes": True}


class RubyParseRequest(BaseModel):
    """Request body for parsing ruby markup."""

    text: str = Field(..., max_length=10_000)


class RubyParseResponse(BaseModel):
    """Parsed segments plus plain and accessibility renderings."""

    segments: list[RubySegmentResponse]
    plain_text: str
    reading_text: str
    accessibility_text: str


# =============================================================================
# VOCABULARY SCHEMAS
# =============================================================================


class VocabularyResponse(BaseModel):
    """Response for a vocabulary entry."""

    vocabulary_id: str
    word: str
    reading: str
    ruby_text: str
    meaning: str
    meaning_en: str | None = None
    category: str
    difficulty: int
    jlpt_level: int | None = None
    romaji: str | None = None
    image_url: str = ""
    audio_url: str = ""
    example_sentences: list[str] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class VocabularyDetailResponse(VocabularyResponse):
    """Vocabulary entry with its ruby markup parsed."""

    ruby_segments: list[RubySegmentResponse]


class VocabularyListResponse(BaseModel):
    """Response for list of vocabulary entries."""

    vocabulary: list[VocabularyResponse]
    count: int


# =============================================================================
# SCENE SCHEMAS
# =============================================================================


class SceneResponse(BaseModel):
    """Response for a scene."""

    scene_id: str
    title: str
    ruby_title: str
    title_en: str | None = None
    description: str
    description_en: str | None = None
    story_content: str
    order: int
    category: str
    category_name: str
    is_school_life: bool
    vocabulary_ids: list[str]
    illustration_urls: list[str] = Field(default_factory=list)
    cultural_note: str | None = None


class SceneListResponse(BaseModel):
    """Response for list of scenes."""

    scenes: list[SceneResponse]
    count: int


# =============================================================================
# LEARNER SCHEMAS
# =============================================================================


class LearnerCreate(BaseModel):
    """Request body for creating a learner."""

    name: str = Field(..., min_length=1, max_length=100)
    avatar: str = Field(default="default", max_length=100)
    parent_id: str | None = None


class LearnerResponse(BaseModel):
    """Response for a learner."""

    learner_id: str
    name: str
    avatar: str
    level: int
    total_points: int
    level_progress: float
    points_to_next_level: int
    mastered_count: int
    created_at: datetime
    parent_id: str | None = None


class LearnerListResponse(BaseModel):
    """Response for list of learners."""

    learners: list[LearnerResponse]
    count: int


class ProgressResponse(BaseModel):
    """Progress of one learner on one vocabulary entry."""

    learner_id: str
    vocabulary_id: str
    mastery_level: int
    review_count: int
    correct_answers: int
    total_answers: int
    accuracy_rate: float
    is_mastered: bool
    last_review_date: datetime
    first_learned_date: datetime | None = None

    model_config = {"from_attributes": True}


class ProgressListResponse(BaseModel):
    """All progress records of a learner."""

    learner_id: str
    progress: list[ProgressResponse]
    count: int
    mastered_count: int


class AnswerRequest(BaseModel):
    """Request body for recording an answer."""

    vocabulary_id: str = Field(..., min_length=1)
    is_correct: bool


class AnswerResponse(BaseModel):
    """Updated progress and learner totals after an answer."""

    progress: ProgressResponse
    total_points: int
    level: int


# =============================================================================
# QUIZ SCHEMAS
# =============================================================================


class QuizRequest(BaseModel):
    """Request body for generating a quiz question."""

    vocabulary_id: str = Field(..., min_length=1)
    quiz_type: QuizType | None = None


class QuizChoiceResponse(BaseModel):
    """One choice of a quiz question."""

    vocabulary_id: str
    word: str
    ruby_text: str
    image_url: str = ""
    is_placeholder: bool = False


class QuizResponse(BaseModel):
    """A multiple-choice quiz question."""

    vocabulary_id: str
    quiz_type: QuizType
    prompt: str
    choices: list[QuizChoiceResponse]
    correct_index: int


# =============================================================================
# HEALTH SCHEMAS
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = __version__
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
