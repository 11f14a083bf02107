"""Quiz Generator - Adaptador de IA (texto + imagem)."""

from __future__ import annotations

import asyncio
import json
import logging
import random
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

import anthropic
import httpx
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import UpstreamFailure
from ..models.enums import QuizDifficulty
from ..models.schemas import QuizMetadata, QuizQuestion
from ..prompts import QUIZ_SYSTEM_PROMPT, build_image_prompt, build_quiz_prompt

if TYPE_CHECKING:
    from anthropic import AsyncAnthropic

    from .factory import LLMClientFactory

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


@dataclass
class GeneratedImage:
    content: bytes
    content_type: str = "image/png"


@dataclass
class GeneratedQuiz:
    """Esqueleto completo retornado pela IA, pronto para persistir."""

    title: str
    description: str
    questions: list[QuizQuestion]
    metadata: QuizMetadata
    image: GeneratedImage


def _strip_code_fence(text: str) -> str:
    return _CODE_FENCE.sub("", text.strip())


def _image_url(body: Any) -> str | None:
    """URL da primeira imagem de ``{"data": [{"url": ...}]}``; None se o formato divergir."""
    data = body.get("data") if isinstance(body, dict) else None
    if not isinstance(data, list) or not data or not isinstance(data[0], dict):
        return None
    url = data[0].get("url")
    return url if isinstance(url, str) else None


def parse_quiz_payload(raw_text: str, num_questions: int) -> dict[str, Any]:
    """Valida o JSON retornado pelo modelo.

    Regras:
        - Deve ser um objeto com lista ``questions``
        - Pelo menos ``num_questions`` questoes (excedentes sao descartadas)
        - Cada questao precisa de texto, >= 2 alternativas e ``correctAnswer``
          igual a uma das alternativas
        - IDs sao renumerados 1..N pela posicao

    Returns:
        Dict com ``title``, ``description`` e ``questions`` (list[QuizQuestion])

    Raises:
        UpstreamFailure: Se o payload estiver vazio ou malformado
    """
    if not raw_text or not raw_text.strip():
        raise UpstreamFailure(details={"reason": "empty response"})

    try:
        data = json.loads(_strip_code_fence(raw_text))
    except json.JSONDecodeError as e:
        raise UpstreamFailure(details={"reason": f"invalid JSON: {e}"}) from e

    if not isinstance(data, dict) or not isinstance(data.get("questions"), list):
        raise UpstreamFailure(details={"reason": "missing questions list"})

    raw_questions = data["questions"]
    if len(raw_questions) < num_questions:
        raise UpstreamFailure(
            details={"reason": f"expected {num_questions} questions, got {len(raw_questions)}"}
        )

    questions: list[QuizQuestion] = []
    for position, item in enumerate(raw_questions[:num_questions], start=1):
        if not isinstance(item, dict):
            raise UpstreamFailure(details={"reason": f"question {position} is not an object"})
        try:
            question = QuizQuestion(
                id=position,
                text=item.get("text") or item.get("question") or "",
                options=item.get("options") or [],
                correct_answer=item.get("correctAnswer") or item.get("correct_answer") or "",
                explanation=item.get("explanation"),
            )
        except PydanticValidationError as e:
            raise UpstreamFailure(details={"reason": f"question {position}: {e}"}) from e

        if not question.text.strip() or len(question.options) < 2:
            raise UpstreamFailure(details={"reason": f"question {position} is incomplete"})
        if question.correct_answer not in question.options:
            raise UpstreamFailure(
                details={"reason": f"question {position}: correctAnswer is not one of the options"}
            )
        questions.append(question)

    title = data.get("title") or data.get("topic")
    description = data.get("description")
    for field_name, value in (("title", title), ("description", description)):
        if value is not None and not isinstance(value, str):
            raise UpstreamFailure(details={"reason": f"{field_name} is not a string"})

    return {"title": title, "description": description, "questions": questions}


class QuizGenerator:
    """Gera quizzes com Claude (texto) e DALL-E (ilustracao).

    Texto e imagem sao gerados em paralelo. Qualquer falha (provedor fora,
    resposta vazia/malformada, imagem ausente ou nao baixavel) vira
    ``UpstreamFailure``; nada e persistido aqui.

    Example:
        >>> generator = QuizGenerator(factory, text_client, http_client)
        >>> quiz = await generator.generate("Photosynthesis", QuizDifficulty.EASY, 5)
        >>> print(quiz.title, len(quiz.questions))
    """

    def __init__(
        self,
        factory: LLMClientFactory,
        text_client: AsyncAnthropic,
        http_client: httpx.AsyncClient,
    ):
        self.factory = factory
        self.settings = factory.settings
        self.text_client = text_client
        self.http = http_client

    async def generate(
        self, topic: str, difficulty: QuizDifficulty, num_questions: int
    ) -> GeneratedQuiz:
        """Gera o esqueleto completo do quiz.

        Args:
            topic: Tema do quiz
            difficulty: Dificuldade
            num_questions: Numero de questoes (1-20)

        Raises:
            UpstreamFailure: Em qualquer falha de geracao
        """
        seed = random.randint(0, 999_999)
        logger.info("Generating quiz topic=%r difficulty=%s n=%s", topic, difficulty.value, num_questions)

        content, image = await asyncio.gather(
            self._generate_content(topic, difficulty, num_questions, seed),
            self._generate_image(topic),
        )

        return GeneratedQuiz(
            title=content["title"] or f"Quiz: {topic}",
            description=content["description"] or f"A {difficulty.value} quiz about {topic}",
            questions=content["questions"],
            metadata=QuizMetadata(
                difficulty=difficulty,
                generated_at=datetime.now(timezone.utc).isoformat(),
                model_used=self.settings.quiz_model,
                seed=seed,
            ),
            image=image,
        )

    async def _generate_content(
        self, topic: str, difficulty: QuizDifficulty, num_questions: int, seed: int
    ) -> dict[str, Any]:
        prompt = build_quiz_prompt(topic, difficulty.value, num_questions, seed)

        try:
            message = await self.text_client.messages.create(
                model=self.settings.quiz_model,
                max_tokens=self.settings.max_tokens,
                temperature=self.settings.temperature,
                system=QUIZ_SYSTEM_PROMPT,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as e:
            logger.error("Quiz text generation failed: %s", e)
            raise UpstreamFailure(details={"reason": str(e)}) from e

        raw_text = "".join(
            block.text for block in message.content if getattr(block, "type", None) == "text"
        )

        try:
            return parse_quiz_payload(raw_text, num_questions)
        except UpstreamFailure as e:
            logger.error("Malformed quiz payload: %s", e.details.get("reason"))
            raise

    async def _generate_image(self, topic: str) -> GeneratedImage:
        payload = {
            "model": self.settings.image_model,
            "prompt": build_image_prompt(topic),
            "n": 1,
            "size": self.settings.image_size,
        }

        try:
            response = await self.http.post(
                self.factory.image_generation_url,
                headers=self.factory.image_headers(),
                json=payload,
            )
            response.raise_for_status()
            image_url = _image_url(response.json())
            if not image_url:
                raise UpstreamFailure(details={"reason": "no image URL in response"})

            download = await self.http.get(image_url)
            download.raise_for_status()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Quiz image generation failed: %s", e)
            raise UpstreamFailure(details={"reason": str(e)}) from e
        except UpstreamFailure as e:
            logger.error("Quiz image generation failed: %s", e.details.get("reason"))
            raise

        if not download.content:
            raise UpstreamFailure(details={"reason": "empty image download"})

        content_type = download.headers.get("content-type", "image/png").split(";")[0].strip()
        return GeneratedImage(content=download.content, content_type=content_type or "image/png")
