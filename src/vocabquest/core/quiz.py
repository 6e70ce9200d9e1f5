"""Multiple-choice quiz generation.

Builds four-choice questions for a vocabulary entry:
- Distractors come from the same category first, then from any entry
- Synthetic placeholders pad the choices when the pool runs out
- Choice order is shuffled
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

import structlog

from vocabquest.core.models import VocabularyEntry

logger = structlog.get_logger(__name__)

DEFAULT_NUM_CHOICES = 4
PLACEHOLDER_WORD = "？？？"
PLACEHOLDER_ID_PREFIX = "placeholder-"


class QuizGenerationError(Exception):
    """Error building quiz choices."""

    pass


class QuizType(str, Enum):
    """Direction of a quiz question."""

    IMAGE_TO_WORD = "image_to_word"
    WORD_TO_IMAGE = "word_to_image"

    @property
    def prompt(self) -> str:
        if self is QuizType.IMAGE_TO_WORD:
            return "この絵は何を表していますか？"
        return "この言葉を表す絵はどれですか？"


@dataclass(frozen=True)
class QuizQuestion:
    """A question with its shuffled choices."""

    vocabulary: VocabularyEntry
    choices: tuple[VocabularyEntry, ...]
    quiz_type: QuizType = QuizType.IMAGE_TO_WORD

    @property
    def correct_index(self) -> int:
        for idx, choice in enumerate(self.choices):
            if choice.vocabulary_id == self.vocabulary.vocabulary_id:
                return idx
        raise QuizGenerationError(
            f"Correct entry missing from choices: {self.vocabulary.vocabulary_id}"
        )

    def is_correct(self, index: int) -> bool:
        """Check a selected choice index."""
        if not 0 <= index < len(self.choices):
            raise IndexError(f"Choice index out of range: {index}")
        return self.choices[index].vocabulary_id == self.vocabulary.vocabulary_id


def is_placeholder(entry: VocabularyEntry) -> bool:
    return entry.vocabulary_id.startswith(PLACEHOLDER_ID_PREFIX)


def placeholder_entry(
    index: int,
    category: str,
    word: str = PLACEHOLDER_WORD,
) -> VocabularyEntry:
    """Synthetic distractor used when the pool has too few entries."""
    return VocabularyEntry(
        vocabulary_id=f"{PLACEHOLDER_ID_PREFIX}{index}",
        word=f"{word}{index}",
        reading="",
        ruby_text=f"{word}{index}",
        meaning="",
        category=category,
        difficulty=0,
    )


def _pick(
    candidates: list[VocabularyEntry],
    needed: int,
    seen_ids: set[str],
    seen_words: set[str],
    rng: random.Random,
) -> list[VocabularyEntry]:
    """Uniformly sample up to `needed` entries not seen yet."""
    unique: dict[str, VocabularyEntry] = {}
    words: set[str] = set()
    for entry in candidates:
        if entry.vocabulary_id in seen_ids or entry.vocabulary_id in unique:
            continue
        if entry.word in seen_words or entry.word in words:
            continue
        unique[entry.vocabulary_id] = entry
        words.add(entry.word)

    entries = list(unique.values())
    picked = entries if len(entries) <= needed else rng.sample(entries, needed)

    for entry in picked:
        seen_ids.add(entry.vocabulary_id)
        seen_words.add(entry.word)
    return picked


def generate_choices(
    correct: VocabularyEntry,
    pool: Iterable[VocabularyEntry],
    num_choices: int = DEFAULT_NUM_CHOICES,
    rng: random.Random | None = None,
    placeholder_word: str = PLACEHOLDER_WORD,
) -> list[VocabularyEntry]:
    """Build shuffled choices containing the correct entry exactly once.

    Args:
        correct: The entry being asked about
        pool: Candidate distractors (may include the correct entry)
        num_choices: Total number of choices (default 4)
        rng: Random source, for reproducible ordering
        placeholder_word: Display text for synthetic placeholders

    Returns:
        List of exactly num_choices entries with unique ids

    Raises:
        QuizGenerationError: If num_choices < 2
    """
    if num_choices < 2:
        raise QuizGenerationError(f"num_choices must be at least 2, got {num_choices}")

    rng = rng or random.Random()
    needed = num_choices - 1
    candidates = list(pool)

    seen_ids = {correct.vocabulary_id}
    seen_words = {correct.word}

    same_category = [e for e in candidates if e.category == correct.category]
    distractors = _pick(same_category, needed, seen_ids, seen_words, rng)

    if len(distractors) < needed:
        others = [e for e in candidates if e.category != correct.category]
        distractors += _pick(
            others, needed - len(distractors), seen_ids, seen_words, rng
        )

    if len(distractors) < needed:
        logger.debug(
            "quiz.padding_placeholders",
            vocabulary_id=correct.vocabulary_id,
            count=needed - len(distractors),
        )
        index = 1
        while len(distractors) < needed:
            filler = placeholder_entry(index, correct.category, placeholder_word)
            index += 1
            if filler.vocabulary_id in seen_ids or filler.word in seen_words:
                continue
            seen_ids.add(filler.vocabulary_id)
            seen_words.add(filler.word)
            distractors.append(filler)

    choices = [correct] + distractors
    rng.shuffle(choices)
    return choices


def build_question(
    correct: VocabularyEntry,
    pool: Iterable[VocabularyEntry],
    quiz_type: QuizType | None = None,
    num_choices: int = DEFAULT_NUM_CHOICES,
    rng: random.Random | None = None,
    placeholder_word: str = PLACEHOLDER_WORD,
) -> QuizQuestion:
    """Build a QuizQuestion, choosing a random direction when none is given."""
    rng = rng or random.Random()
    if quiz_type is None:
        quiz_type = rng.choice(list(QuizType))

    choices = generate_choices(
        correct,
        pool,
        num_choices=num_choices,
        rng=rng,
        placeholder_word=placeholder_word,
    )
    return QuizQuestion(vocabulary=correct, choices=tuple(choices), quiz_type=quiz_type)
