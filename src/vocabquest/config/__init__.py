"""Configuration package for vocabquest."""

from vocabquest.config.app_config import (
    AppConfig,
    PathsConfig,
    PointsConfig,
    QuizConfig,
    clear_config_cache,
    get_db_path,
    load_app_config,
)

__all__ = [
    "AppConfig",
    "PathsConfig",
    "PointsConfig",
    "QuizConfig",
    "clear_config_cache",
    "get_db_path",
    "load_app_config",
]
