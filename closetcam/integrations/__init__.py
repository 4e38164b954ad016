"""Integration check helpers."""

from .checks import (
    IntegrationCheckResult,
    check_description_model,
    check_photo_library,
    check_vision_model,
    run_all_checks,
)

__all__ = [
    "IntegrationCheckResult",
    "check_description_model",
    "check_photo_library",
    "check_vision_model",
    "run_all_checks",
]
