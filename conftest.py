# =============================================================================
# CONFTEST - Pytest Fixtures Globais
# =============================================================================
# Ambiente isolado: sem MongoDB, sem chaves reais, sem rate limit
# =============================================================================

import os
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

# Adicionar root ao path
sys.path.insert(0, str(Path(__file__).parent))

# Lido na importacao de quiz.rate_limit
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")


# =============================================================================
# FIXTURES DE AMBIENTE
# =============================================================================


@pytest.fixture(autouse=True)
def setup_test_env():
    """Configura variaveis de ambiente para testes."""
    env_vars = {
        "ENVIRONMENT": "test",
        "ANTHROPIC_API_KEY": "test-key-123",
        "OPENAI_API_KEY": "test-openai-key",
        "SESSION_SECRET": "test-session-secret",
        "MONGODB_URL": "mongodb://localhost:27017",
        "MONGODB_DB": "quizzes_test",
    }
    with patch.dict(os.environ, env_vars):
        yield
