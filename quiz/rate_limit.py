"""Quiz Rate Limit - Limiter slowapi compartilhado pelos routers.

Os limites sao lidos do ambiente na importacao (formato slowapi,
ex: ``10/minute``) e aplicados por endereco do cliente.
"""

import os

from slowapi import Limiter
from slowapi.util import get_remote_address

RATE_LIMITS: dict[str, str] = {
    "create_quiz": os.getenv("CREATE_RATE_LIMIT", "10/minute"),
}

limiter = Limiter(
    key_func=get_remote_address,
    enabled=os.getenv("RATE_LIMIT_ENABLED", "true").lower() != "false",
)
