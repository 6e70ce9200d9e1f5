"""Database module for SQLite persistence.

Provides:
- Database connection management
- Schema initialization
- Repository functions for vocabulary, scenes, learners and progress
"""

from vocabquest.db.database import RepositoryError, get_db, init_db

__all__ = ["RepositoryError", "get_db", "init_db"]
