"""Client that asks the configured LLM provider for clothing descriptions."""

from __future__ import annotations

import logging
from typing import Any

from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel

from closetcam.config.settings import Settings
from closetcam.metrics.prometheus_exporter import description_requests_total
from closetcam.nlp.prompt_builder import DescriptionPromptContext, PromptBuilder
from closetcam.storage.repository import PhotoLibrary

logger = logging.getLogger(__name__)


class DescriptionGenerationError(RuntimeError):
    """Raised when the model produced no usable description."""


class GeneratedDescription(BaseModel):
    """Text returned by the model together with the prompt that produced it."""

    photo_id: str
    prompt: str
    text: str


class DescriptionClient:
    """Thin client that communicates with an OpenAI-compatible chat endpoint."""

    def __init__(self, settings: Settings, client: AsyncOpenAI | None = None) -> None:
        if client is None and not settings.ai_api_key:
            raise RuntimeError("AI API key is not configured.")

        self._settings = settings
        self._client = client or AsyncOpenAI(
            api_key=settings.ai_api_key,
            base_url=settings.ai_base_url.rstrip("/"),
            timeout=settings.request_timeout,
        )
        self._prompt_builder = PromptBuilder()

    async def fetch_clothing_description(self, photo_id: str, library: PhotoLibrary) -> GeneratedDescription:
        """
        Generate a description for the stored item ``photo_id``.

        Raises ``PhotoNotFoundError`` for unknown ids and
        ``DescriptionGenerationError`` when the model fails or answers empty.
        The result is not stored; see ``PhotoLibrary.save_generated_description``.
        """

        item = library.get(photo_id)
        prompt = self._prompt_builder.build(DescriptionPromptContext.from_item(item))

        try:
            response = await self._client.chat.completions.create(
                model=self._settings.ai_description_model,
                messages=[{"role": "user", "content": prompt}],
            )
        except OpenAIError as exc:
            description_requests_total.labels(outcome="error").inc()
            logger.error("Description request for %s failed: %s", photo_id, exc)
            raise DescriptionGenerationError(str(exc)) from exc

        try:
            text = self._first_text(response)
        except DescriptionGenerationError:
            description_requests_total.labels(outcome="empty").inc()
            raise
        description_requests_total.labels(outcome="success").inc()
        return GeneratedDescription(photo_id=photo_id, prompt=prompt, text=text)

    async def ping(self) -> bool:
        """Return ``True`` if the upstream service responds to a model listing call."""

        models = await self._client.models.list()
        return bool(models.data)

    async def close(self) -> None:
        """Release HTTP resources."""

        await self._client.close()

    @staticmethod
    def _first_text(response: Any) -> str:
        choices = getattr(response, "choices", None) or []
        if not choices:
            raise DescriptionGenerationError("No candidates in response")
        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None)
        if not content:
            raise DescriptionGenerationError("No text in candidate response")
        return content
