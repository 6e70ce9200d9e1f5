"""Quiz endpoint."""

import structlog
from fastapi import APIRouter, HTTPException, status

from vocabquest.config import load_app_config
from vocabquest.core.quiz import build_question, is_placeholder
from vocabquest.db import vocabulary_repository
from vocabquest.web.schemas import QuizChoiceResponse, QuizRequest, QuizResponse

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/quiz", tags=["quiz"])


@router.post("", response_model=QuizResponse)
async def create_question(request: QuizRequest) -> QuizResponse:
    """Build a multiple-choice question for a vocabulary entry.

    Distractors come from the whole vocabulary table, same category first.
    """
    entry = vocabulary_repository.get_vocabulary_by_id(request.vocabulary_id)
    if entry is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Vocabulary '{request.vocabulary_id}' not found",
        )

    config = load_app_config()
    question = build_question(
        entry,
        vocabulary_repository.get_all_vocabulary(),
        quiz_type=request.quiz_type,
        num_choices=config.quiz.num_choices,
        placeholder_word=config.quiz.placeholder_word,
    )
    logger.debug(
        "quiz.question_built",
        vocabulary_id=entry.vocabulary_id,
        quiz_type=question.quiz_type.value,
    )

    return QuizResponse(
        vocabulary_id=entry.vocabulary_id,
        quiz_type=question.quiz_type,
        prompt=question.quiz_type.prompt,
        choices=[
            QuizChoiceResponse(
                vocabulary_id=c.vocabulary_id,
                word=c.word,
                ruby_text=c.ruby_text,
                image_url=c.image_url,
                is_placeholder=is_placeholder(c),
            )
            for c in question.choices
        ],
        correct_index=question.correct_index,
    )
