"""Frame analysis and capture flows tying sampling, recognition and storage together."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from PIL import Image

from closetcam.imgproc.color_classifier import SampledColor
from closetcam.imgproc.sampling import DEFAULT_SAMPLE_SIZE, detect_color
from closetcam.storage.repository import PhotoItem, PhotoLibrary, PhotoMetadata, new_photo_id
from closetcam.vision.recognition_client import Detection, RecognitionClient, RecognitionRequestError

logger = logging.getLogger(__name__)

UNKNOWN_OBJECT = "Unknown"
TEXT_RECOGNITION_FAILED = "Text recognition failed."


@dataclass(frozen=True, slots=True)
class FrameAnalysis:
    color_name: str
    sample: SampledColor
    detection: Detection | None = None

    @property
    def object_label(self) -> str:
        return self.detection.label if self.detection else UNKNOWN_OBJECT


@dataclass(frozen=True, slots=True)
class TextCapture:
    """Recognised text and the record it ended up in (``None`` if nothing was saved)."""

    text: str
    photo_id: str | None


class CaptureService:
    """Facade over colour sampling, the vision model and the photo library."""

    def __init__(
        self,
        library: PhotoLibrary,
        recognizer: RecognitionClient,
        *,
        sample_size: int = DEFAULT_SAMPLE_SIZE,
    ) -> None:
        self._library = library
        self._recognizer = recognizer
        self._sample_size = sample_size

    async def analyze_frame(self, image: Image.Image) -> FrameAnalysis:
        """Name the centre colour and label the main object of a frame."""

        color_name, sample = detect_color(image, self._sample_size)
        try:
            detection = await self._recognizer.detect_object(image)
        except RecognitionRequestError as exc:
            logger.error("Object detection failed: %s", exc)
            detection = None
        return FrameAnalysis(color_name=color_name, sample=sample, detection=detection)

    async def capture(
        self,
        image: Image.Image,
        *,
        description: str | None = None,
        category: str | None = None,
    ) -> PhotoItem:
        """Save a new catalogue photo described by its colour and detected object."""

        if description is None or category is None:
            analysis = await self.analyze_frame(image)
            description = description if description is not None else analysis.color_name
            category = category if category is not None else analysis.object_label

        metadata = PhotoMetadata(id=new_photo_id(), description=description, category=category)
        return await self._library.save_photo(image, metadata)

    async def capture_text(self, image: Image.Image, associated_with: str | None = None) -> TextCapture:
        """Recognise text in ``image`` and store it standalone or on ``associated_with``."""

        try:
            text = await self._recognizer.recognize_text(image)
        except RecognitionRequestError as exc:
            logger.error("Failed to perform text recognition: %s", exc)
            return TextCapture(text=TEXT_RECOGNITION_FAILED, photo_id=None)

        if not text:
            logger.info("No text recognised; nothing saved.")
            return TextCapture(text="", photo_id=None)

        item = await self._library.save_text_photo(image, text, associated_with=associated_with)
        return TextCapture(text=text, photo_id=item.id)
