"""LLM Client Factory - Criacao dos clientes de IA a partir das Settings."""

import httpx
from anthropic import AsyncAnthropic

from config import Settings


class LLMClientFactory:
    """Factory para os clientes usados na geracao de quiz.

    Centraliza a criacao dos clientes externos, permitindo:
    - Configuracao consistente (chaves, timeout) a partir das Settings
    - Um unico pool HTTP compartilhado por request handlers
    - Substituicao simples por mocks nos testes

    Example:
        >>> factory = LLMClientFactory(settings)
        >>> text_client = factory.create_text_client()
        >>> http = factory.create_http_client()
    """

    OPENAI_BASE_URL = "https://api.openai.com/v1"

    def __init__(self, settings: Settings):
        self.settings = settings

    def create_text_client(self) -> AsyncAnthropic:
        """Cliente Anthropic para geracao das questoes."""
        return AsyncAnthropic(
            api_key=self.settings.anthropic_api_key or None,
            timeout=self.settings.http_timeout,
            max_retries=0,
        )

    def create_http_client(self) -> httpx.AsyncClient:
        """Cliente HTTP para a API de imagens e download do arquivo gerado."""
        return httpx.AsyncClient(
            timeout=self.settings.http_timeout,
            follow_redirects=True,
        )

    def image_headers(self) -> dict[str, str]:
        """Headers de autenticacao da API de imagens."""
        return {
            "Authorization": f"Bearer {self.settings.openai_api_key}",
            "Content-Type": "application/json",
        }

    @property
    def image_generation_url(self) -> str:
        return f"{self.OPENAI_BASE_URL}/images/generations"
