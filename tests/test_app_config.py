"""Tests for application config loading."""

from pathlib import Path

import pytest

from vocabquest.config import clear_config_cache, get_db_path, load_app_config
from vocabquest.config.app_config import DB_PATH_ENV


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(DB_PATH_ENV, raising=False)
    clear_config_cache()
    yield
    clear_config_cache()


def _write_config(tmp_path, text):
    config_dir = tmp_path / "data" / "config"
    config_dir.mkdir(parents=True)
    (config_dir / "app_config_v1.yaml").write_text(text, encoding="utf-8")


class TestLoadAppConfig:
    """Tests for load_app_config."""

    def test_defaults_without_file(self):
        config = load_app_config()
        assert config.quiz.num_choices == 4
        assert config.quiz.placeholder_word == "？？？"
        assert config.points.points_per_level == 100
        assert config.points.session_points_per_correct == 10
        assert config.paths.db_path == "db/vocabquest.db"

    def test_partial_file_merges_with_defaults(self, tmp_path):
        _write_config(tmp_path, "quiz:\n  num_choices: 3\n")
        config = load_app_config()
        assert config.quiz.num_choices == 3
        assert config.quiz.placeholder_word == "？？？"
        assert config.points.points_per_level == 100

    def test_cached_until_forced(self, tmp_path):
        first = load_app_config()
        _write_config(tmp_path, "points:\n  points_per_level: 50\n")

        assert load_app_config() is first
        assert load_app_config(force_reload=True).points.points_per_level == 50

    def test_env_overrides_db_path(self, tmp_path, monkeypatch):
        monkeypatch.setenv(DB_PATH_ENV, str(tmp_path / "other.db"))
        assert get_db_path() == tmp_path / "other.db"

    def test_default_db_path(self):
        assert get_db_path() == Path("db/vocabquest.db")
