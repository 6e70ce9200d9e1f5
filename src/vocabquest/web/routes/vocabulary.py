"""Vocabulary endpoints."""

from fastapi import APIRouter, HTTPException, Query, status

from vocabquest.core.ruby import parse_ruby
from vocabquest.db import vocabulary_repository
from vocabquest.web.schemas import (
    RubySegmentResponse,
    VocabularyDetailResponse,
    VocabularyListResponse,
    VocabularyResponse,
)

router = APIRouter(prefix="/api/vocabulary", tags=["vocabulary"])


@router.get("", response_model=VocabularyListResponse)
async def list_vocabulary(
    category: str | None = Query(default=None),
    difficulty: int | None = Query(default=None, ge=1),
) -> VocabularyListResponse:
    """List vocabulary, optionally filtered by category and difficulty."""
    if category is not None:
        entries = vocabulary_repository.get_vocabulary_by_category(category)
        if difficulty is not None:
            entries = [e for e in entries if e.difficulty == difficulty]
    elif difficulty is not None:
        entries = vocabulary_repository.get_vocabulary_by_difficulty(difficulty)
    else:
        entries = vocabulary_repository.get_all_vocabulary()

    items = [VocabularyResponse(**e.to_dict()) for e in entries]
    return VocabularyListResponse(vocabulary=items, count=len(items))


@router.get("/{vocabulary_id}", response_model=VocabularyDetailResponse)
async def get_vocabulary(vocabulary_id: str) -> VocabularyDetailResponse:
    """Get a vocabulary entry with its ruby segments."""
    entry = vocabulary_repository.get_vocabulary_by_id(vocabulary_id)
    if entry is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Vocabulary '{vocabulary_id}' not found",
        )

    return VocabularyDetailResponse(
        **entry.to_dict(),
        ruby_segments=[
            RubySegmentResponse.model_validate(s) for s in parse_ruby(entry.ruby_text)
        ],
    )
