"""Routers module for the Quiz API."""

from quiz.router import router as quiz_router

from .attempts import router as attempts_router
from .images import router as images_router
from .users import router as users_router

__all__ = [
    "quiz_router",
    "attempts_router",
    "images_router",
    "users_router",
]
