"""Route handlers for the Web API."""

from vocabquest.web.routes.health import router as health_router
from vocabquest.web.routes.vocabulary import router as vocabulary_router
from vocabquest.web.routes.scenes import router as scenes_router
from vocabquest.web.routes.learners import router as learners_router
from vocabquest.web.routes.quiz import router as quiz_router
from vocabquest.web.routes.ruby import router as ruby_router

__all__ = [
    "health_router",
    "vocabulary_router",
    "scenes_router",
    "learners_router",
    "quiz_router",
    "ruby_router",
]
