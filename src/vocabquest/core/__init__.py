"""Core domain logic.

Modules:
- models: vocabulary, scenes, learners and learning progress
- ruby: ruby/furigana markup lexer
- quiz: multiple-choice question generation
- session: flashcard and quiz study sessions
- stores: repository-backed stores for presentation code
- sample_data: bundled vocabulary and scene tables
"""

__all__ = [
    "models",
    "ruby",
    "quiz",
    "session",
    "stores",
    "sample_data",
]
