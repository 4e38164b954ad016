"""Photo library persistence."""

from .preferences import PreferenceStore
from .repository import (
    AssociatedPhoto,
    PhotoItem,
    PhotoLibrary,
    PhotoMetadata,
    PhotoNotFoundError,
    new_photo_id,
)

__all__ = [
    "AssociatedPhoto",
    "PhotoItem",
    "PhotoLibrary",
    "PhotoMetadata",
    "PhotoNotFoundError",
    "PreferenceStore",
    "new_photo_id",
]
