"""Quiz Auth - Validacao do token de sessao e usuario corrente.

O login (OAuth) acontece no frontend, que emite um JWT de sessao assinado
com ``SESSION_SECRET``. Aqui apenas validamos o token e garantimos que o
usuario existe na colecao ``users`` (criado no primeiro acesso).
"""

from __future__ import annotations

import logging
from typing import Any

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app_state import AppState, get_app_state
from config import Settings

from .exceptions import UnauthorizedError
from .models.schemas import User

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def decode_session_token(token: str, settings: Settings) -> dict[str, Any]:
    """Valida assinatura, expiracao e claims obrigatorias.

    Raises:
        UnauthorizedError: Token invalido, expirado ou sem email
    """
    try:
        claims = jwt.decode(
            token,
            settings.session_secret,
            algorithms=[settings.session_algorithm],
            options={"require": ["exp", "email"]},
        )
    except jwt.PyJWTError as e:
        logger.debug("Invalid session token: %s", e)
        raise UnauthorizedError(details={"reason": str(e)}) from e

    if not isinstance(claims.get("email"), str) or not claims["email"]:
        raise UnauthorizedError(details={"reason": "email claim missing"})
    return claims


async def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    state: AppState = Depends(get_app_state),
) -> User | None:
    """Usuario autenticado, ou None se nao houver token.

    Um token presente porem invalido continua sendo 401.
    """
    if credentials is None:
        return None

    claims = decode_session_token(credentials.credentials, state.settings)
    return await state.users.get_or_create(
        email=claims["email"],
        name=claims.get("name") or "",
        image=claims.get("picture"),
    )


async def get_current_user(user: User | None = Depends(get_optional_user)) -> User:
    """Usuario autenticado (401 se ausente)."""
    if user is None:
        raise UnauthorizedError()
    return user
