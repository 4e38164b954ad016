"""Start the HTTP API with uvicorn."""

from __future__ import annotations

import uvicorn

from closetcam.config.settings import get_settings
from closetcam.monitoring.logging import configure_logging


def main() -> None:
    settings = get_settings()
    configure_logging(settings)
    uvicorn.run(
        "closetcam.api.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
