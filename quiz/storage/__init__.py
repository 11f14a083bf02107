"""Quiz Storage - Persistencia MongoDB/GridFS."""

from .attempt_store import AttemptStore
from .database import connect, ensure_indexes, migrate_legacy_quizzes
from .image_store import ImageStore, StoredImage
from .quiz_store import QuizStore
from .user_store import UserStore

__all__ = [
    "connect",
    "ensure_indexes",
    "migrate_legacy_quizzes",
    "QuizStore",
    "AttemptStore",
    "UserStore",
    "ImageStore",
    "StoredImage",
]
