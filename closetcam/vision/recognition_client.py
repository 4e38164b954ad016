"""Object labelling and text recognition through an OpenAI-compatible vision model."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

import httpx
from PIL import Image

from closetcam.config.settings import Settings
from closetcam.imgproc.normalize import to_png_data_url

logger = logging.getLogger(__name__)

DETECTION_PROMPT = (
    "You label clothing photos. Identify the single most prominent clothing item in the image "
    "and answer strictly in JSON: {\"label\": \"<short item type, e.g. T-Shirt>\", "
    "\"confidence\": <number between 0 and 1>}. Use an empty label if no clothing is visible."
)

TEXT_PROMPT = (
    "Transcribe every piece of printed text visible in the image (labels, tags, care instructions). "
    "Answer strictly in JSON: {\"lines\": [\"...\"]}, one entry per text line in reading order."
)


class RecognitionRequestError(RuntimeError):
    """Raised when the vision model cannot be reached or answers unusably."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


@dataclass(frozen=True, slots=True)
class Detection:
    """Top label reported for the main object in a frame."""

    label: str
    confidence: float

    @property
    def display_label(self) -> str:
        return f"{self.label} ({int(self.confidence * 100)}%)"


class RecognitionClient:
    """Sends frames to the vision model for object labels and OCR."""

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._settings = settings
        self._client = httpx.AsyncClient(
            base_url=settings.ai_base_url.rstrip("/"),
            timeout=settings.request_timeout,
            headers={
                "Authorization": f"Bearer {settings.ai_api_key}",
            },
            transport=transport,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""

        await self._client.aclose()

    async def _request_json(
        self,
        method: str,
        endpoint: str,
        *,
        json_body: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        try:
            response = await self._client.request(method, endpoint, json=json_body)
            response.raise_for_status()
            if not response.content:
                return {}
            return response.json()
        except httpx.TimeoutException as exc:
            raise RecognitionRequestError("Vision model request timed out.") from exc
        except httpx.HTTPStatusError as exc:
            raise RecognitionRequestError(
                f"Vision model returned {exc.response.status_code}: {exc.response.text}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.TransportError as exc:
            raise RecognitionRequestError(f"Vision model is unreachable: {exc}") from exc
        except ValueError as exc:
            raise RecognitionRequestError("Vision model returned a non-JSON body.") from exc

    async def _ask(self, instructions: str, image: Image.Image) -> dict[str, Any]:
        messages: Sequence[Mapping[str, Any]] = [
            {"role": "system", "content": instructions},
            {
                "role": "user",
                "content": [
                    {"type": "image_url", "image_url": {"url": to_png_data_url(image)}},
                ],
            },
        ]
        response = await self._request_json(
            "POST",
            "/chat/completions",
            json_body={
                "model": self._settings.ai_vision_model,
                "messages": list(messages),
                "response_format": {"type": "json_object"},
            },
        )
        content = self._first_choice_content(response)
        try:
            parsed = json.loads(content)
        except json.JSONDecodeError as exc:
            logger.warning("Vision model answered with invalid JSON: %s", content)
            raise RecognitionRequestError("Vision model answered with invalid JSON.") from exc
        if not isinstance(parsed, dict):
            raise RecognitionRequestError("Vision model answered with an unexpected payload.")
        return parsed

    async def detect_object(self, image: Image.Image) -> Detection | None:
        """Return the most prominent clothing label, or ``None`` if nothing was found."""

        parsed = await self._ask(DETECTION_PROMPT, image)
        label = str(parsed.get("label") or "").strip()
        if not label:
            return None
        try:
            confidence = float(parsed.get("confidence", 0.0))
        except (TypeError, ValueError):
            confidence = 0.0
        if not math.isfinite(confidence):
            logger.warning("Vision model reported a non-finite confidence for %r.", label)
            confidence = 0.0
        return Detection(label=label, confidence=min(max(confidence, 0.0), 1.0))

    async def recognize_text(self, image: Image.Image) -> str:
        """Return recognised text lines joined by newlines."""

        parsed = await self._ask(TEXT_PROMPT, image)
        lines = parsed.get("lines") or []
        if isinstance(lines, str):
            lines = [lines]
        if not isinstance(lines, list):
            raise RecognitionRequestError("Vision model answered with unexpected text lines.")
        return "\n".join(str(line) for line in lines if str(line).strip())

    async def ping(self) -> bool:
        """Return ``True`` if the upstream service responds to a model listing call."""

        payload = await self._request_json("GET", "/models")
        return isinstance(payload, Mapping) and bool(payload.get("data"))

    @staticmethod
    def _first_choice_content(response: Mapping[str, Any]) -> str:
        if not isinstance(response, Mapping):
            raise RecognitionRequestError("Vision model returned an unexpected body.")
        choices = response.get("choices") or []
        if not isinstance(choices, list) or not choices:
            raise RecognitionRequestError("Vision model returned no choices.")
        first = choices[0]
        message = first.get("message") if isinstance(first, Mapping) else None
        content = message.get("content") if isinstance(message, Mapping) else None
        if not isinstance(content, str) or not content:
            raise RecognitionRequestError("Vision model returned an empty message.")
        return content
