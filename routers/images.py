"""Image endpoints (GridFS)."""

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from app_state import get_quiz_engine
from quiz.engine import QuizEngine

router = APIRouter(prefix="/api/images", tags=["Images"])

# Imagens sao imutaveis: um ano de cache
IMAGE_CACHE_CONTROL = "public, max-age=31536000"


@router.get("/{image_id}")
async def get_image(image_id: str, engine: QuizEngine = Depends(get_quiz_engine)):
    """Serve a imagem armazenada no bucket ``quizImages``."""
    image = await engine.get_image(image_id)
    return Response(
        content=image.content,
        media_type=image.content_type,
        headers={"Cache-Control": IMAGE_CACHE_CONTROL},
    )
