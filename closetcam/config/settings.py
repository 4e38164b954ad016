"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


def _load_env_file(path: str = ".env") -> None:
    """Populate os.environ from the provided .env file if it exists."""

    env_path = Path(path)
    if not env_path.exists():
        return

    for line in env_path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip())


@dataclass(frozen=True, slots=True)
class Settings:
    """Centralised project settings based on OS environment variables."""

    environment: str = "dev"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    ai_api_key: str = ""
    ai_base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai"
    ai_description_model: str = "gemini-1.5-flash-latest"
    ai_vision_model: str = "gemini-1.5-flash-latest"
    request_timeout: float = 60.0

    library_root: str = "data/library"
    jpeg_quality: int = 80
    color_sample_size: int = 10


def _build_settings() -> Settings:
    _load_env_file()

    return Settings(
        environment=os.getenv("ENVIRONMENT", "dev"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        ai_api_key=os.getenv("AI_API_KEY", ""),
        ai_base_url=os.getenv("AI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta/openai"),
        ai_description_model=os.getenv("AI_DESCRIPTION_MODEL", "gemini-1.5-flash-latest"),
        ai_vision_model=os.getenv("AI_VISION_MODEL", "gemini-1.5-flash-latest"),
        request_timeout=float(os.getenv("REQUEST_TIMEOUT", "60")),
        library_root=os.getenv("LIBRARY_ROOT", "data/library"),
        jpeg_quality=int(os.getenv("JPEG_QUALITY", "80")),
        color_sample_size=int(os.getenv("COLOR_SAMPLE_SIZE", "10")),
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance to avoid re-reading configuration."""

    return _build_settings()
