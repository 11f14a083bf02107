"""Quiz Prompts."""

from .templates import (
    IMAGE_PROMPT,
    QUIZ_GENERATION_PROMPT,
    QUIZ_SYSTEM_PROMPT,
    build_image_prompt,
    build_quiz_prompt,
)

__all__ = [
    "QUIZ_SYSTEM_PROMPT",
    "QUIZ_GENERATION_PROMPT",
    "IMAGE_PROMPT",
    "build_quiz_prompt",
    "build_image_prompt",
]
