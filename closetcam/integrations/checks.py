"""Start-up diagnostics: remote model reachability and the on-disk photo library."""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable

from closetcam.config.settings import Settings, get_settings
from closetcam.nlp.description_client import DescriptionClient
from closetcam.storage.repository import PhotoLibrary
from closetcam.vision.recognition_client import RecognitionClient

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class IntegrationCheckResult:
    name: str
    success: bool
    message: str


async def _outcome(name: str, probe: Callable[[], Awaitable[str | None]]) -> IntegrationCheckResult:
    """Run ``probe``; a returned string is the success message, ``None`` means a refusal."""

    try:
        message = await probe()
    except Exception as exc:  # pragma: no cover - reported, not raised
        logger.warning("%s check failed: %s", name, exc)
        return IntegrationCheckResult(name=name, success=False, message=str(exc))
    if message is None:
        return IntegrationCheckResult(name=name, success=False, message="Service responded with non-success status.")
    return IntegrationCheckResult(name=name, success=True, message=message)


async def check_description_model(settings: Settings | None = None) -> IntegrationCheckResult:
    """Confirm the chat model used for clothing descriptions answers a model listing."""

    settings = settings or get_settings()
    if not settings.ai_api_key:
        return IntegrationCheckResult(
            name="Description model",
            success=False,
            message="AI_API_KEY is not set; description generation is disabled.",
        )

    async def probe() -> str | None:
        client = DescriptionClient(settings)
        try:
            reachable = await client.ping()
        finally:
            await client.close()
        return f"{settings.ai_description_model} is reachable." if reachable else None

    return await _outcome("Description model", probe)


async def check_vision_model(settings: Settings | None = None) -> IntegrationCheckResult:
    """Confirm the vision model used for object labels and OCR answers a model listing."""

    settings = settings or get_settings()

    async def probe() -> str | None:
        client = RecognitionClient(settings)
        try:
            reachable = await client.ping()
        finally:
            await client.close()
        return f"{settings.ai_vision_model} is reachable." if reachable else None

    return await _outcome("Vision model", probe)


async def check_photo_library(settings: Settings | None = None) -> IntegrationCheckResult:
    """Load the photo library and confirm its directory accepts new images."""

    settings = settings or get_settings()
    root = Path(settings.library_root)

    async def probe() -> str | None:
        await asyncio.to_thread(root.mkdir, parents=True, exist_ok=True)
        if not os.access(root, os.W_OK):
            raise PermissionError(f"{root} is not writable.")
        photos = await PhotoLibrary(root, jpeg_quality=settings.jpeg_quality).load()
        return f"{len(photos)} photo(s) loaded from {root}."

    return await _outcome("Photo library", probe)


async def run_all_checks(settings: Settings | None = None) -> list[IntegrationCheckResult]:
    """Run every check concurrently, in a stable report order."""

    settings = settings or get_settings()
    return list(
        await asyncio.gather(
            check_photo_library(settings),
            check_description_model(settings),
            check_vision_model(settings),
        )
    )
