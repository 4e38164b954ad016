"""Local photo library: JPEG files on disk plus JSON metadata in a preference file."""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping

from PIL import Image

from closetcam.imgproc.normalize import to_jpeg_bytes
from closetcam.metrics.prometheus_exporter import photos_saved_total
from closetcam.storage.preferences import PreferenceStore

logger = logging.getLogger(__name__)

METADATA_KEY = "photoLibraryMetadata"
TEXT_PHOTO_CATEGORY = "Detected Text"


class PhotoNotFoundError(LookupError):
    """Raised when a photo id is not present in the library."""

    def __init__(self, photo_id: str) -> None:
        self.photo_id = photo_id
        super().__init__(f"Photo not found: {photo_id}")


@dataclass(slots=True, eq=False)
class PhotoMetadata:
    """Descriptive fields of a catalogued item; identity is the id alone."""

    id: str
    description: str
    category: str
    generated_description: str | None = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PhotoMetadata):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass(frozen=True, slots=True)
class AssociatedPhoto:
    """Secondary photo (typically a label or tag) attached to a catalogued item."""

    id: str
    image_data: bytes
    text: str


@dataclass(slots=True)
class PhotoItem:
    id: str
    metadata: PhotoMetadata
    associated_photos: list[AssociatedPhoto] = field(default_factory=list)


def new_photo_id() -> str:
    return str(uuid.uuid4()).upper()


class PhotoLibrary:
    """Ordered collection of photo records persisted under ``root``."""

    def __init__(self, root: Path, jpeg_quality: int = 80) -> None:
        self._root = root
        self._root.mkdir(parents=True, exist_ok=True)
        self._store = PreferenceStore(root / "preferences.json")
        self._jpeg_quality = jpeg_quality
        self._photos: list[PhotoItem] = []
        self._lock = asyncio.Lock()

    @property
    def photos(self) -> list[PhotoItem]:
        return list(self._photos)

    def image_path(self, photo_id: str) -> Path:
        return self._root / f"{photo_id}.jpg"

    def get(self, photo_id: str) -> PhotoItem:
        """Return the record with ``photo_id`` or raise ``PhotoNotFoundError``."""

        for item in self._photos:
            if item.id == photo_id:
                return item
        raise PhotoNotFoundError(photo_id)

    def get_associated(self, photo_id: str, associated_id: str) -> AssociatedPhoto:
        for associated in self.get(photo_id).associated_photos:
            if associated.id == associated_id:
                return associated
        raise PhotoNotFoundError(associated_id)

    async def load(self) -> list[PhotoItem]:
        """Replace in-memory state with what is stored on disk."""

        async with self._lock:
            raw = await asyncio.to_thread(self._store.get, METADATA_KEY)
            if not isinstance(raw, list):
                logger.info("No saved metadata found.")
                self._photos = []
                return []
            self._photos = await asyncio.to_thread(self._decode_records, raw)
            logger.info("Loaded %d photos from storage.", len(self._photos))
            return list(self._photos)

    async def save_photo(self, image: Image.Image, metadata: PhotoMetadata) -> PhotoItem:
        """Write the JPEG for ``metadata.id`` and append the record."""

        async with self._lock:
            if any(item.id == metadata.id for item in self._photos):
                raise ValueError(f"Photo id already exists: {metadata.id}")
            await self._write_image(metadata.id, image)
            item = PhotoItem(id=metadata.id, metadata=metadata)
            self._photos.append(item)
            await self._persist()
        photos_saved_total.labels(kind="photo").inc()
        logger.info("Photo saved to file: %s", self.image_path(metadata.id))
        return item

    async def save_text_photo(
        self,
        image: Image.Image,
        text: str,
        associated_with: str | None = None,
    ) -> PhotoItem:
        """
        Store a photo of recognised text.

        With ``associated_with`` the photo is attached to that record and the
        parent is returned; otherwise a standalone "Detected Text" record is
        created.
        """

        unique_id = new_photo_id()
        async with self._lock:
            if associated_with is not None:
                parent = self.get(associated_with)
                image_data = await asyncio.to_thread(to_jpeg_bytes, image, self._jpeg_quality)
                parent.associated_photos.append(AssociatedPhoto(id=unique_id, image_data=image_data, text=text))
                await self._persist()
                photos_saved_total.labels(kind="associated").inc()
                logger.info("Photo associated with %s.", associated_with)
                return parent

            await self._write_image(unique_id, image)
            metadata = PhotoMetadata(id=unique_id, description=text, category=TEXT_PHOTO_CATEGORY)
            item = PhotoItem(id=unique_id, metadata=metadata)
            self._photos.append(item)
            await self._persist()
        photos_saved_total.labels(kind="text").inc()
        logger.info("Text photo saved independently.")
        return item

    async def update_metadata(
        self,
        photo_id: str,
        *,
        description: str | None = None,
        category: str | None = None,
        generated_description: str | None = None,
    ) -> PhotoItem:
        """Edit the given fields in place; ``None`` leaves a field unchanged."""

        async with self._lock:
            item = self.get(photo_id)
            if description is not None:
                item.metadata.description = description
            if category is not None:
                item.metadata.category = category
            if generated_description is not None:
                item.metadata.generated_description = generated_description or None
            await self._persist()
            return item

    async def save_generated_description(self, photo_id: str, text: str) -> PhotoItem:
        """Store an accepted AI description on the record."""

        return await self.update_metadata(photo_id, generated_description=text)

    async def remove_associated_photos(self, associated_ids: Iterable[str], parent_id: str) -> PhotoItem:
        """Drop the listed associated photos from ``parent_id``."""

        ids = set(associated_ids)
        async with self._lock:
            try:
                parent = self.get(parent_id)
            except PhotoNotFoundError:
                logger.warning("Parent photo not found for ID %s.", parent_id)
                raise
            parent.associated_photos = [photo for photo in parent.associated_photos if photo.id not in ids]
            await self._persist()
        logger.info("Removed associated photos from parent photo %s.", parent_id)
        return parent

    async def remove_photos(self, photo_ids: Iterable[str]) -> list[str]:
        """Remove records and their files. Unknown ids are ignored."""

        ids = set(photo_ids)
        removed: list[str] = []
        async with self._lock:
            kept: list[PhotoItem] = []
            for item in self._photos:
                if item.id in ids:
                    removed.append(item.id)
                else:
                    kept.append(item)
            self._photos = kept
            for photo_id in removed:
                path = self.image_path(photo_id)
                try:
                    await asyncio.to_thread(path.unlink)
                    logger.info("Deleted photo file: %s", path)
                except OSError as exc:
                    logger.error("Failed to delete photo file %s: %s", path, exc)
            await self._persist()
        return removed

    async def _write_image(self, photo_id: str, image: Image.Image) -> None:
        data = await asyncio.to_thread(to_jpeg_bytes, image, self._jpeg_quality)
        await asyncio.to_thread(self.image_path(photo_id).write_bytes, data)

    async def _persist(self) -> None:
        payload = [self._encode_item(item) for item in self._photos]
        await asyncio.to_thread(self._store.set, METADATA_KEY, payload)
        logger.debug("Metadata saved to %s.", self._store.path)

    @staticmethod
    def _encode_item(item: PhotoItem) -> dict[str, Any]:
        return {
            "id": item.id,
            "description": item.metadata.description,
            "object": item.metadata.category,
            "generatedDescription": item.metadata.generated_description or "",
            "associatedPhotos": [
                {
                    "id": photo.id,
                    "text": photo.text,
                    "imageData": base64.b64encode(photo.image_data).decode("ascii"),
                }
                for photo in item.associated_photos
            ],
        }

    def _decode_records(self, raw: list[Any]) -> list[PhotoItem]:
        photos: list[PhotoItem] = []
        seen: set[str] = set()
        for entry in raw:
            item = self._decode_item(entry)
            if item is None:
                continue
            if item.id in seen:
                logger.warning("Duplicate photo id %s in metadata; keeping the first.", item.id)
                continue
            seen.add(item.id)
            photos.append(item)
        return photos

    def _decode_item(self, entry: Any) -> PhotoItem | None:
        if not isinstance(entry, Mapping):
            logger.warning("Failed to parse photo metadata.")
            return None
        photo_id = entry.get("id")
        description = entry.get("description")
        category = entry.get("object")
        generated = entry.get("generatedDescription")
        associated_raw = entry.get("associatedPhotos", [])
        if (
            not isinstance(photo_id, str)
            or not isinstance(description, str)
            or not isinstance(category, str)
            or not (generated is None or isinstance(generated, str))
            or not isinstance(associated_raw, list)
        ):
            logger.warning("Failed to parse photo metadata.")
            return None

        if not self.image_path(photo_id).exists():
            logger.warning("Failed to load image for %s.", photo_id)
            return None

        associated = [photo for photo in map(self._decode_associated, associated_raw) if photo is not None]
        metadata = PhotoMetadata(
            id=photo_id,
            description=description,
            category=category,
            generated_description=generated or None,
        )
        return PhotoItem(id=photo_id, metadata=metadata, associated_photos=associated)

    @staticmethod
    def _decode_associated(entry: Any) -> AssociatedPhoto | None:
        if isinstance(entry, Mapping):
            associated_id = entry.get("id")
            text = entry.get("text")
            encoded = entry.get("imageData")
            if isinstance(associated_id, str) and isinstance(text, str) and isinstance(encoded, str):
                try:
                    image_data = base64.b64decode(encoded, validate=True)
                except (ValueError, binascii.Error):
                    image_data = None
                if image_data is not None:
                    return AssociatedPhoto(id=associated_id, image_data=image_data, text=text)
        logger.warning("Failed to parse associated photo.")
        return None
