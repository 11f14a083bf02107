"""User profile endpoints."""

from fastapi import APIRouter, Depends

from quiz.auth import get_current_user
from quiz.models import User

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("/me", response_model=User)
async def get_me(user: User = Depends(get_current_user)):
    """Perfil do usuario autenticado, com estatisticas e favoritos."""
    return user
