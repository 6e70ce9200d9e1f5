"""Tests for the SQLite repositories."""

import sqlite3

import pytest

from vocabquest.core.models import Learner, LearningProgress, SceneCategory
from vocabquest.db import RepositoryError, get_db
from vocabquest.db import learner_repository, scene_repository, vocabulary_repository


class TestVocabularyRepository:
    """Tests for vocabulary persistence."""

    def test_insert_and_get(self, db_path, make_entry):
        entry = make_entry(
            "黒板",
            ruby_text="｜黒板《こくばん》",
            meaning_en="blackboard",
            jlpt_level=5,
            example_sentences=("先生が｜黒板《こくばん》に書きます。",),
        )
        vocabulary_repository.insert_vocabulary(entry)

        loaded = vocabulary_repository.get_vocabulary_by_id(entry.vocabulary_id)
        assert loaded == entry

    def test_get_missing(self, db_path):
        assert vocabulary_repository.get_vocabulary_by_id("nope") is None

    def test_duplicate_id_rejected(self, db_path, make_entry):
        vocabulary_repository.insert_vocabulary(make_entry("黒板"))
        with pytest.raises(sqlite3.IntegrityError):
            vocabulary_repository.insert_vocabulary(make_entry("黒板"))

    def test_get_by_ids_sorted_by_difficulty_then_word(self, db_path, make_entry):
        entries = [
            make_entry("c", difficulty=2),
            make_entry("b", difficulty=1),
            make_entry("a", difficulty=2),
        ]
        for entry in entries:
            vocabulary_repository.insert_vocabulary(entry)

        loaded = vocabulary_repository.get_vocabulary_by_ids(["id-a", "id-b", "id-c", "id-x"])
        assert [e.word for e in loaded] == ["b", "a", "c"]

    def test_get_by_ids_empty(self, db_path):
        assert vocabulary_repository.get_vocabulary_by_ids([]) == []

    def test_filters_and_count(self, db_path, make_entry):
        vocabulary_repository.insert_vocabulary(make_entry("黒板", difficulty=1))
        vocabulary_repository.insert_vocabulary(make_entry("給食", category="給食", difficulty=2))

        assert [e.word for e in vocabulary_repository.get_vocabulary_by_category("給食")] == ["給食"]
        assert [e.word for e in vocabulary_repository.get_vocabulary_by_difficulty(1)] == ["黒板"]
        assert vocabulary_repository.count_vocabulary() == 2

    def test_delete(self, db_path, make_entry):
        vocabulary_repository.insert_vocabulary(make_entry("黒板"))
        assert vocabulary_repository.delete_vocabulary("id-黒板")
        assert not vocabulary_repository.delete_vocabulary("id-黒板")
        assert vocabulary_repository.count_vocabulary() == 0


class TestSceneRepository:
    """Tests for scene persistence."""

    def test_insert_and_get(self, db_path, make_scene):
        scene = make_scene(vocabulary_ids=("v1", "v2"), cultural_note="note")
        scene_repository.insert_scene(scene)

        assert scene_repository.get_scene_by_id(scene.scene_id) == scene
        assert scene_repository.get_scene_by_order(1) == scene
        assert scene_repository.get_scene_by_order(9) is None

    def test_all_sorted_by_order(self, db_path, make_scene):
        scene_repository.insert_scene(make_scene("給食", order=2, category=SceneCategory.LUNCH_TIME))
        scene_repository.insert_scene(make_scene("教室", order=1))

        assert [s.order for s in scene_repository.get_all_scenes()] == [1, 2]
        lunch = scene_repository.get_scenes_by_category(SceneCategory.LUNCH_TIME)
        assert [s.title for s in lunch] == ["給食"]
        assert scene_repository.count_scenes() == 2

    def test_delete(self, db_path, make_scene):
        scene = make_scene()
        scene_repository.insert_scene(scene)
        assert scene_repository.delete_scene(scene.scene_id)
        assert scene_repository.get_scene_by_id(scene.scene_id) is None


class TestLearnerRepository:
    """Tests for learners and progress persistence."""

    def test_insert_and_get(self, db_path):
        learner = Learner(name="たろう", total_points=5)
        learner_repository.insert_learner(learner)

        loaded = learner_repository.get_learner_by_id(learner.learner_id)
        assert loaded.name == "たろう"
        assert loaded.total_points == 5
        assert loaded.created_at == learner.created_at
        assert learner_repository.get_learner_by_name("たろう").learner_id == learner.learner_id

    def test_duplicate_name_rejected(self, db_path):
        learner_repository.insert_learner(Learner(name="たろう"))
        with pytest.raises(sqlite3.IntegrityError):
            learner_repository.insert_learner(Learner(name="たろう"))

    def test_current_is_most_recent(self, db_path):
        first = Learner(name="たろう")
        second = Learner(name="はなこ")
        learner_repository.insert_learner(first)
        learner_repository.insert_learner(second)

        assert learner_repository.get_current_learner().learner_id == second.learner_id
        assert [l.name for l in learner_repository.get_all_learners()] == ["たろう", "はなこ"]

    def test_current_none_when_empty(self, db_path):
        assert learner_repository.get_current_learner() is None

    def test_save_answer_persists_points_and_progress(self, db_path):
        learner = Learner(name="たろう")
        learner_repository.insert_learner(learner)

        for is_correct in (True, True, False):
            progress = learner.record_answer("v1", is_correct)
            learner_repository.save_answer(learner, progress)

        loaded = learner_repository.get_learner_by_id(learner.learner_id)
        assert loaded.total_points == 3
        record = loaded.progress["v1"]
        assert record.mastery_level == 1
        assert record.total_answers == 3
        assert record.correct_answers == 2
        assert record.first_learned_date is not None

    def test_save_answer_unknown_learner(self, db_path):
        learner = Learner(name="ghost")
        progress = learner.record_answer("v1", True)
        with pytest.raises(RepositoryError):
            learner_repository.save_answer(learner, progress)

    def test_update_learner(self, db_path):
        learner = Learner(name="たろう")
        learner_repository.insert_learner(learner)
        learner.level = 2
        learner.avatar = "cat"
        learner_repository.update_learner(learner)

        loaded = learner_repository.get_learner_by_id(learner.learner_id)
        assert loaded.level == 2
        assert loaded.avatar == "cat"

    def test_update_missing_learner(self, db_path):
        with pytest.raises(RepositoryError):
            learner_repository.update_learner(Learner(name="ghost"))

    def test_delete_cascades_progress(self, db_path):
        learner = Learner(name="たろう")
        learner.record_answer("v1", True)
        learner.record_answer("v2", False)
        learner_repository.insert_learner(learner)
        assert learner_repository.count_progress_rows(learner.learner_id) == 2

        assert learner_repository.delete_learner(learner.learner_id)
        assert learner_repository.count_progress_rows(learner.learner_id) == 0
        assert not learner_repository.delete_learner(learner.learner_id)

    def test_upsert_progress(self, db_path):
        learner = Learner(name="たろう")
        learner_repository.insert_learner(learner)
        progress = LearningProgress(learner_id=learner.learner_id, vocabulary_id="v1")
        learner_repository.upsert_progress(progress)
        progress.record_answer(True)
        learner_repository.upsert_progress(progress)

        records = learner_repository.get_progress_for_learner(learner.learner_id)
        assert len(records) == 1
        assert records[0].mastery_level == 1

    def test_mastery_check_constraint(self, db_path):
        learner = Learner(name="たろう")
        learner_repository.insert_learner(learner)
        with pytest.raises(sqlite3.IntegrityError):
            with get_db() as conn:
                conn.execute(
                    """
                    INSERT INTO learning_progress (
                        learner_id, vocabulary_id, mastery_level, last_review_date
                    ) VALUES (?, ?, ?, ?)
                    """,
                    (learner.learner_id, "v1", 4, "2024-01-01T00:00:00+00:00"),
                )
