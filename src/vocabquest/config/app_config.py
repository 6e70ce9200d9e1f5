"""Application configuration loader.

Loads centralized configuration from data/config/app_config_v1.yaml
with fallback to built-in defaults.

Usage:
    from vocabquest.config.app_config import load_app_config

    config = load_app_config()
    db_path = config.paths.db_path
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger(__name__)

# Config file path (relative to project root)
CONFIG_FILE = Path("data/config/app_config_v1.yaml")

# Environment override for the database location
DB_PATH_ENV = "VOCABQUEST_DB_PATH"


@dataclass
class QuizConfig:
    """Configuration for quiz generation."""

    num_choices: int = 4
    placeholder_word: str = "？？？"


@dataclass
class PointsConfig:
    """Point rules for learners and sessions."""

    points_per_level: int = 100
    session_points_per_correct: int = 10


@dataclass
class PathsConfig:
    """Filesystem locations."""

    db_path: str = "db/vocabquest.db"


@dataclass
class AppConfig:
    """Application-wide configuration."""

    quiz: QuizConfig = field(default_factory=QuizConfig)
    points: PointsConfig = field(default_factory=PointsConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)


# Module-level cache
_cached_config: AppConfig | None = None


def _get_defaults() -> dict[str, Any]:
    """Get default configuration values."""
    return {
        "quiz": {
            "num_choices": 4,
            "placeholder_word": "？？？",
        },
        "points": {
            "points_per_level": 100,
            "session_points_per_correct": 10,
        },
        "paths": {
            "db_path": "db/vocabquest.db",
        },
    }


def _parse_config(data: dict[str, Any]) -> AppConfig:
    """Parse configuration dictionary into AppConfig object."""
    defaults = _get_defaults()

    quiz_data = {**defaults["quiz"], **(data.get("quiz") or {})}
    points_data = {**defaults["points"], **(data.get("points") or {})}
    paths_data = {**defaults["paths"], **(data.get("paths") or {})}

    quiz = QuizConfig(
        num_choices=int(quiz_data["num_choices"]),
        placeholder_word=str(quiz_data["placeholder_word"]),
    )
    points = PointsConfig(
        points_per_level=int(points_data["points_per_level"]),
        session_points_per_correct=int(points_data["session_points_per_correct"]),
    )
    paths = PathsConfig(
        db_path=os.environ.get(DB_PATH_ENV, paths_data["db_path"]),
    )

    return AppConfig(quiz=quiz, points=points, paths=paths)


def load_app_config(force_reload: bool = False) -> AppConfig:
    """Load application config.

    Args:
        force_reload: If True, ignore cached config and reload from file.

    Returns:
        AppConfig object with all settings.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    data: dict[str, Any]

    if CONFIG_FILE.exists():
        logger.debug("loading_app_config", source=str(CONFIG_FILE))
        data = yaml.safe_load(CONFIG_FILE.read_text(encoding="utf-8")) or {}
    else:
        logger.info("using_default_config")
        data = _get_defaults()

    _cached_config = _parse_config(data)
    return _cached_config


def get_db_path() -> Path:
    """Get the configured database path."""
    return Path(load_app_config().paths.db_path)


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when config is modified at runtime.
    """
    global _cached_config
    _cached_config = None
