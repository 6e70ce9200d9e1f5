"""Learner and progress endpoints."""

import sqlite3

import structlog
from fastapi import APIRouter, HTTPException, status

from vocabquest.config import load_app_config
from vocabquest.core.models import Learner
from vocabquest.core.stores import LearnerStore
from vocabquest.db import learner_repository, vocabulary_repository
from vocabquest.web.schemas import (
    AnswerRequest,
    AnswerResponse,
    LearnerCreate,
    LearnerListResponse,
    LearnerResponse,
    ProgressListResponse,
    ProgressResponse,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/learners", tags=["learners"])


def _learner_response(learner: Learner) -> LearnerResponse:
    points_per_level = load_app_config().points.points_per_level
    return LearnerResponse(
        learner_id=learner.learner_id,
        name=learner.name,
        avatar=learner.avatar,
        level=learner.level,
        total_points=learner.total_points,
        level_progress=learner.level_progress(points_per_level),
        points_to_next_level=learner.points_to_next_level(points_per_level),
        mastered_count=learner.mastered_count,
        created_at=learner.created_at,
        parent_id=learner.parent_id,
    )


def _get_learner_or_404(learner_id: str) -> Learner:
    learner = learner_repository.get_learner_by_id(learner_id)
    if learner is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Learner '{learner_id}' not found",
        )
    return learner


@router.get("", response_model=LearnerListResponse)
async def list_learners() -> LearnerListResponse:
    """List all learners, oldest first."""
    learners = [_learner_response(item) for item in learner_repository.get_all_learners()]
    return LearnerListResponse(learners=learners, count=len(learners))


@router.get("/{learner_id}", response_model=LearnerResponse)
async def get_learner(learner_id: str) -> LearnerResponse:
    """Get a specific learner by ID."""
    return _learner_response(_get_learner_or_404(learner_id))


@router.post("", response_model=LearnerResponse, status_code=status.HTTP_201_CREATED)
async def create_learner(learner_data: LearnerCreate) -> LearnerResponse:
    """Create a new learner."""
    name = learner_data.name.strip()
    if not name:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Learner name must not be blank",
        )

    # Check for duplicate name
    if learner_repository.get_learner_by_name(name) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Learner with name '{name}' already exists",
        )

    learner = Learner(
        name=name,
        avatar=learner_data.avatar,
        parent_id=learner_data.parent_id,
    )
    try:
        learner_repository.insert_learner(learner)
    except sqlite3.IntegrityError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Learner with name '{name}' already exists",
        ) from e

    logger.info("learners.created", learner_id=learner.learner_id)
    return _learner_response(learner)


@router.delete("/{learner_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_learner(learner_id: str) -> None:
    """Delete a learner and all of its progress."""
    if not learner_repository.delete_learner(learner_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Learner '{learner_id}' not found",
        )


@router.get("/{learner_id}/progress", response_model=ProgressListResponse)
async def get_progress(learner_id: str) -> ProgressListResponse:
    """All progress records of a learner."""
    learner = _get_learner_or_404(learner_id)
    records = sorted(learner.progress.values(), key=lambda p: p.vocabulary_id)
    return ProgressListResponse(
        learner_id=learner.learner_id,
        progress=[ProgressResponse.model_validate(p) for p in records],
        count=len(records),
        mastered_count=learner.mastered_count,
    )


@router.post("/{learner_id}/answers", response_model=AnswerResponse)
async def record_answer(learner_id: str, answer: AnswerRequest) -> AnswerResponse:
    """Record an answer, updating mastery and points."""
    if vocabulary_repository.get_vocabulary_by_id(answer.vocabulary_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Vocabulary '{answer.vocabulary_id}' not found",
        )

    store = LearnerStore()
    learner = store.select(learner_id)
    if learner is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Learner '{learner_id}' not found",
        )

    progress = store.record_answer(answer.vocabulary_id, answer.is_correct)
    if store.last_error is not None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=store.last_error,
        )

    return AnswerResponse(
        progress=ProgressResponse.model_validate(progress),
        total_points=learner.total_points,
        level=learner.level,
    )
