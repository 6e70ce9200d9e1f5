"""Study session state for one pass over a scene's vocabulary.

A session walks the cards in order. In flashcard mode the learner types
an answer; in quiz mode each card carries a multiple-choice question
built from the session's own vocabulary.
"""

from __future__ import annotations

import random
from enum import Enum

import structlog

from vocabquest.core.models import SceneDefinition, VocabularyEntry
from vocabquest.core.quiz import (
    DEFAULT_NUM_CHOICES,
    PLACEHOLDER_WORD,
    QuizQuestion,
    build_question,
)

logger = structlog.get_logger(__name__)

SESSION_POINTS_PER_CORRECT = 10


class SessionError(Exception):
    """Invalid operation for the current session state."""

    pass


class SessionMode(str, Enum):
    FLASHCARD = "flashcard"
    QUIZ = "quiz"


def check_answer(answer: str, entry: VocabularyEntry) -> bool:
    """True if the trimmed, case-folded answer matches word, reading or meaning."""
    normalized = answer.strip().casefold()
    if not normalized:
        return False
    targets = (entry.word, entry.reading, entry.meaning)
    return any(normalized == t.strip().casefold() for t in targets if t)


class StudySession:
    """Progress through a list of vocabulary cards.

    Attributes:
        vocabularies: Cards in study order
        scene: Scene the cards belong to, if any
        mode: Flashcard or quiz
        current_index: Index of the current card
        show_answer: Whether the current card has been answered
        correct_count: Correct answers so far
        total_count: Answers so far
    """

    def __init__(
        self,
        vocabularies: list[VocabularyEntry],
        scene: SceneDefinition | None = None,
        mode: SessionMode | str = SessionMode.FLASHCARD,
        rng: random.Random | None = None,
        num_choices: int = DEFAULT_NUM_CHOICES,
        placeholder_word: str = PLACEHOLDER_WORD,
        points_per_correct: int = SESSION_POINTS_PER_CORRECT,
    ):
        self.vocabularies = list(vocabularies)
        self.scene = scene
        self.mode = SessionMode(mode)
        self.rng = rng or random.Random()
        self.num_choices = num_choices
        self.placeholder_word = placeholder_word
        self.points_per_correct = points_per_correct

        self.current_index = 0
        self.show_answer = False
        self.correct_count = 0
        self.total_count = 0
        self.last_result: bool | None = None
        self._completed = not self.vocabularies
        self._question: QuizQuestion | None = None

    @property
    def is_completed(self) -> bool:
        return self._completed

    @property
    def current_vocabulary(self) -> VocabularyEntry | None:
        if self._completed:
            return None
        return self.vocabularies[self.current_index]

    @property
    def current_question(self) -> QuizQuestion | None:
        """Quiz question for the current card (quiz mode only)."""
        if self.mode is not SessionMode.QUIZ:
            return None
        entry = self.current_vocabulary
        if entry is None:
            return None
        if self._question is None or self._question.vocabulary.vocabulary_id != entry.vocabulary_id:
            self._question = build_question(
                entry,
                self.vocabularies,
                num_choices=self.num_choices,
                rng=self.rng,
                placeholder_word=self.placeholder_word,
            )
        return self._question

    @property
    def progress(self) -> float:
        if not self.vocabularies:
            return 0.0
        return min(self.current_index + 1, len(self.vocabularies)) / len(self.vocabularies)

    @property
    def accuracy_rate(self) -> float:
        if self.total_count == 0:
            return 0.0
        return self.correct_count / self.total_count

    @property
    def remaining(self) -> int:
        if self._completed:
            return 0
        return len(self.vocabularies) - self.current_index

    @property
    def points_earned(self) -> int:
        return self.correct_count * self.points_per_correct

    def _record(self, is_correct: bool) -> bool:
        self.total_count += 1
        if is_correct:
            self.correct_count += 1
        self.show_answer = True
        self.last_result = is_correct
        return is_correct

    def _ensure_answerable(self) -> VocabularyEntry:
        entry = self.current_vocabulary
        if entry is None:
            raise SessionError("Session is completed")
        if self.show_answer:
            raise SessionError("Current card already answered")
        return entry

    def submit_answer(self, text: str) -> bool:
        """Check a typed answer for the current card."""
        entry = self._ensure_answerable()
        return self._record(check_answer(text, entry))

    def select_choice(self, index: int) -> bool:
        """Check a quiz choice for the current card.

        Raises:
            SessionError: Not in quiz mode, completed, or already answered
            IndexError: index outside the choices
        """
        if self.mode is not SessionMode.QUIZ:
            raise SessionError("select_choice requires quiz mode")
        self._ensure_answerable()
        question = self.current_question
        return self._record(question.is_correct(index))

    def next(self) -> VocabularyEntry | None:
        """Advance to the next card, completing the session after the last."""
        if self._completed:
            return None
        if self.current_index + 1 < len(self.vocabularies):
            self.current_index += 1
        else:
            self._completed = True
            logger.info(
                "session.completed",
                scene_id=self.scene.scene_id if self.scene else None,
                correct=self.correct_count,
                total=self.total_count,
            )
        self.show_answer = False
        self.last_result = None
        return self.current_vocabulary

    def restart(self) -> None:
        self.current_index = 0
        self.show_answer = False
        self.correct_count = 0
        self.total_count = 0
        self.last_result = None
        self._completed = not self.vocabularies
        self._question = None
