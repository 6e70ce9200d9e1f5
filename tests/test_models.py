"""Tests for domain records and progress recording."""

from datetime import datetime, timezone

import pytest

from vocabquest.core.models import (
    Learner,
    LearningProgress,
    SceneCategory,
)


class TestLearningProgress:
    """Tests for LearningProgress.record_answer."""

    def test_fresh_record_has_no_accuracy(self):
        """Accuracy is 0.0 before any answer."""
        progress = LearningProgress(learner_id="l1", vocabulary_id="v1")
        assert progress.accuracy_rate == 0.0
        assert progress.mastery_level == 0
        assert progress.first_learned_date is None
        assert not progress.is_mastered

    def test_three_correct_then_incorrect(self):
        """Mastery moves 1, 2, 3, 2 and accuracy ends at 0.75."""
        progress = LearningProgress(learner_id="l1", vocabulary_id="v1")

        levels = []
        for is_correct in (True, True, True, False):
            progress.record_answer(is_correct)
            levels.append(progress.mastery_level)

        assert levels == [1, 2, 3, 2]
        assert progress.total_answers == 4
        assert progress.correct_answers == 3
        assert progress.review_count == 4
        assert progress.accuracy_rate == pytest.approx(0.75)
        assert not progress.is_mastered

    def test_mastery_clamped_at_bounds(self):
        """Mastery never leaves the 0-3 range."""
        progress = LearningProgress(learner_id="l1", vocabulary_id="v1")
        progress.record_answer(False)
        assert progress.mastery_level == 0

        for _ in range(5):
            progress.record_answer(True)
        assert progress.mastery_level == 3

    def test_mastered_requires_level_and_accuracy(self):
        """Level 3 with accuracy >= 0.8 counts as mastered."""
        progress = LearningProgress(learner_id="l1", vocabulary_id="v1")
        for _ in range(4):
            progress.record_answer(True)
        assert progress.is_mastered

    def test_first_learned_date_set_once(self):
        """First answer sets first_learned_date; later ones only move last_review_date."""
        first = datetime(2024, 4, 1, tzinfo=timezone.utc)
        later = datetime(2024, 4, 2, tzinfo=timezone.utc)
        progress = LearningProgress(learner_id="l1", vocabulary_id="v1")

        progress.record_answer(True, now=first)
        progress.record_answer(False, now=later)

        assert progress.first_learned_date == first
        assert progress.last_review_date == later

    def test_invalid_mastery_rejected(self):
        """Constructing with mastery outside 0-3 fails."""
        with pytest.raises(ValueError):
            LearningProgress(learner_id="l1", vocabulary_id="v1", mastery_level=4)


class TestLearner:
    """Tests for learner points and levels."""

    def test_defaults(self):
        learner = Learner(name="たろう")
        assert learner.level == 1
        assert learner.total_points == 0
        assert learner.avatar == "default"

    def test_correct_answer_awards_mastery_level_points(self):
        """Points added equal the new mastery level."""
        learner = Learner(name="たろう")
        learner.record_answer("v1", True)  # level 1
        learner.record_answer("v1", True)  # level 2
        assert learner.total_points == 3

    def test_incorrect_answer_awards_nothing(self):
        learner = Learner(name="たろう")
        learner.record_answer("v1", False)
        assert learner.total_points == 0
        assert learner.progress["v1"].total_answers == 1

    def test_progress_for_creates_once(self):
        learner = Learner(name="たろう")
        record = learner.progress_for("v1")
        assert learner.progress_for("v1") is record
        assert record.learner_id == learner.learner_id

    def test_level_progress(self):
        """Progress toward the next level is measured from level * 100."""
        learner = Learner(name="たろう", level=1, total_points=150)
        assert learner.level_progress() == pytest.approx(0.5)
        assert learner.points_to_next_level() == 50

    def test_level_progress_capped(self):
        learner = Learner(name="たろう", level=1, total_points=500)
        assert learner.level_progress() == 1.0

    def test_level_progress_below_floor(self):
        learner = Learner(name="たろう", level=1, total_points=20)
        assert learner.level_progress() == 0.0

    def test_mastered_count(self):
        learner = Learner(name="たろう")
        for _ in range(3):
            learner.record_answer("v1", True)
        learner.record_answer("v2", False)
        assert learner.mastered_count == 1

    def test_to_dict(self):
        learner = Learner(name="はなこ")
        data = learner.to_dict()
        assert data["name"] == "はなこ"
        assert data["level"] == 1
        assert "created_at" in data


class TestSceneCategory:
    """Tests for category groupings."""

    def test_school_life_categories(self):
        school = [c for c in SceneCategory if c.is_school_life]
        assert set(school) == {
            SceneCategory.MORNING_ASSEMBLY,
            SceneCategory.CLASS_TIME,
            SceneCategory.LUNCH_TIME,
            SceneCategory.CLEANING_TIME,
            SceneCategory.BREAK_TIME,
        }

    def test_vocabulary_category_mapping(self):
        assert SceneCategory.CLASS_TIME.vocabulary_category == "教室"
        assert SceneCategory.LUNCH_TIME.vocabulary_category == "給食"
        assert SceneCategory.MORNING_ASSEMBLY.vocabulary_category == "朝の会・帰りの会"

    def test_string_values(self):
        assert SceneCategory("park") is SceneCategory.PARK
        assert SceneCategory.PARK.display_name == "公園・遊び場"
