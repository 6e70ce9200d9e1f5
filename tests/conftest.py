"""Shared pytest fixtures.

Every database test runs against its own SQLite file under tmp_path,
selected through VOCABQUEST_DB_PATH.
"""

import random

import pytest

from vocabquest.config import clear_config_cache
from vocabquest.config.app_config import DB_PATH_ENV
from vocabquest.core.models import SceneCategory, SceneDefinition, VocabularyEntry
from vocabquest.core.sample_data import seed_database
from vocabquest.db import init_db


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    """Isolated, initialized database."""
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "db" / "test.db"
    monkeypatch.setenv(DB_PATH_ENV, str(path))
    clear_config_cache()

    init_db(path)
    yield path

    clear_config_cache()


@pytest.fixture
def seeded_db(db_path):
    """Isolated database loaded with the bundled content."""
    seed_database()
    return db_path


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def make_entry():
    """Factory for vocabulary entries with predictable ids."""

    def _make(word, category="教室", vocabulary_id=None, **kwargs):
        fields = {
            "word": word,
            "reading": kwargs.pop("reading", f"{word}-reading"),
            "ruby_text": kwargs.pop("ruby_text", word),
            "meaning": kwargs.pop("meaning", f"{word}-meaning"),
            "category": category,
            "difficulty": kwargs.pop("difficulty", 1),
        }
        fields["vocabulary_id"] = vocabulary_id or f"id-{word}"
        fields.update(kwargs)
        return VocabularyEntry(**fields)

    return _make


@pytest.fixture
def make_scene():
    """Factory for scene definitions."""

    def _make(title="教室", order=1, category=SceneCategory.CLASS_TIME, **kwargs):
        return SceneDefinition(
            title=title,
            ruby_title=kwargs.pop("ruby_title", title),
            description=kwargs.pop("description", ""),
            story_content=kwargs.pop("story_content", ""),
            order=order,
            category=category,
            **kwargs,
        )

    return _make
