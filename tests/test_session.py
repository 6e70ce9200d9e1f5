"""Tests for study sessions."""

import pytest

from vocabquest.core.session import (
    SessionError,
    SessionMode,
    StudySession,
    check_answer,
)


@pytest.fixture
def cards(make_entry):
    return [
        make_entry("黒板", reading="こくばん", meaning="Blackboard"),
        make_entry("教科書", reading="きょうかしょ", meaning="textbook"),
        make_entry("筆箱", reading="ふでばこ", meaning="pencil case"),
    ]


class TestCheckAnswer:
    """Tests for answer matching."""

    def test_matches_word_reading_or_meaning(self, cards):
        entry = cards[0]
        assert check_answer("黒板", entry)
        assert check_answer("こくばん", entry)
        assert check_answer("blackboard", entry)

    def test_trims_and_ignores_case(self, cards):
        assert check_answer("  BLACKBOARD \n", cards[0])

    def test_rejects_other_and_blank(self, cards):
        assert not check_answer("きょうかしょ", cards[0])
        assert not check_answer("   ", cards[0])


class TestFlashcardSession:
    """Tests for flashcard-mode sessions."""

    def test_initial_state(self, cards):
        session = StudySession(cards)
        assert session.current_vocabulary == cards[0]
        assert session.current_index == 0
        assert not session.is_completed
        assert not session.show_answer
        assert session.progress == pytest.approx(1 / 3)
        assert session.remaining == 3
        assert session.accuracy_rate == 0.0

    def test_full_pass(self, cards):
        session = StudySession(cards)

        assert session.submit_answer("こくばん")
        session.next()
        assert not session.submit_answer("wrong")
        session.next()
        assert session.submit_answer("pencil case")
        session.next()

        assert session.is_completed
        assert session.current_vocabulary is None
        assert session.correct_count == 2
        assert session.total_count == 3
        assert session.accuracy_rate == pytest.approx(2 / 3)
        assert session.points_earned == 20
        assert session.remaining == 0

    def test_submit_shows_answer(self, cards):
        session = StudySession(cards)
        session.submit_answer("こくばん")
        assert session.show_answer
        assert session.last_result is True

        session.next()
        assert not session.show_answer
        assert session.last_result is None

    def test_double_submit_rejected(self, cards):
        session = StudySession(cards)
        session.submit_answer("こくばん")
        with pytest.raises(SessionError):
            session.submit_answer("こくばん")

    def test_submit_after_completion_rejected(self, cards):
        session = StudySession(cards[:1])
        session.submit_answer("こくばん")
        session.next()
        with pytest.raises(SessionError):
            session.submit_answer("こくばん")

    def test_next_after_completion_is_noop(self, cards):
        session = StudySession(cards[:1])
        session.next()
        assert session.next() is None
        assert session.is_completed

    def test_skipping_without_answer(self, cards):
        """next() advances even when the card was not answered."""
        session = StudySession(cards)
        session.next()
        assert session.current_vocabulary == cards[1]
        assert session.total_count == 0

    def test_restart(self, cards):
        session = StudySession(cards)
        session.submit_answer("こくばん")
        session.next()
        session.restart()

        assert session.current_index == 0
        assert session.correct_count == 0
        assert session.total_count == 0
        assert not session.is_completed

    def test_empty_session(self):
        session = StudySession([])
        assert session.is_completed
        assert session.current_vocabulary is None
        assert session.progress == 0.0
        assert session.remaining == 0

    def test_select_choice_requires_quiz_mode(self, cards):
        session = StudySession(cards)
        with pytest.raises(SessionError):
            session.select_choice(0)
        assert session.current_question is None


class TestQuizSession:
    """Tests for quiz-mode sessions."""

    def test_question_for_current_card(self, cards, rng):
        session = StudySession(cards, mode="quiz", rng=rng)
        question = session.current_question

        assert session.mode is SessionMode.QUIZ
        assert question.vocabulary == cards[0]
        assert len(question.choices) == 4
        assert session.current_question is question

    def test_correct_and_wrong_choices(self, cards, rng):
        session = StudySession(cards, mode=SessionMode.QUIZ, rng=rng)

        question = session.current_question
        assert session.select_choice(question.correct_index)
        session.next()

        question = session.current_question
        assert question.vocabulary == cards[1]
        wrong = (question.correct_index + 1) % len(question.choices)
        assert not session.select_choice(wrong)

        assert session.correct_count == 1
        assert session.total_count == 2

    def test_choice_out_of_range(self, cards, rng):
        session = StudySession(cards, mode="quiz", rng=rng)
        with pytest.raises(IndexError):
            session.select_choice(10)
        assert session.total_count == 0

    def test_invalid_mode(self, cards):
        with pytest.raises(ValueError):
            StudySession(cards, mode="speed-round")
