"""Request and response bodies for the HTTP API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from closetcam.services.capture import FrameAnalysis
from closetcam.storage.repository import PhotoItem


class ColorSample(BaseModel):
    """RGB sample with channels on the 0-1 scale; out-of-range values are accepted."""

    red: float
    green: float
    blue: float


class ColorName(BaseModel):
    name: str


class DetectionOut(BaseModel):
    label: str
    confidence: float
    display_label: str


class FrameAnalysisOut(BaseModel):
    color: str
    rgb: ColorSample
    detection: DetectionOut | None = None

    @classmethod
    def from_analysis(cls, analysis: FrameAnalysis) -> FrameAnalysisOut:
        detection = None
        if analysis.detection is not None:
            detection = DetectionOut(
                label=analysis.detection.label,
                confidence=analysis.detection.confidence,
                display_label=analysis.detection.display_label,
            )
        sample = analysis.sample
        return cls(
            color=analysis.color_name,
            rgb=ColorSample(red=sample.red, green=sample.green, blue=sample.blue),
            detection=detection,
        )


class AssociatedPhotoOut(BaseModel):
    id: str
    text: str


class PhotoOut(BaseModel):
    id: str
    description: str
    object: str
    generated_description: str | None = None
    associated_photos: list[AssociatedPhotoOut] = Field(default_factory=list)

    @classmethod
    def from_item(cls, item: PhotoItem) -> PhotoOut:
        return cls(
            id=item.id,
            description=item.metadata.description,
            object=item.metadata.category,
            generated_description=item.metadata.generated_description,
            associated_photos=[AssociatedPhotoOut(id=photo.id, text=photo.text) for photo in item.associated_photos],
        )


class PhotoUpdate(BaseModel):
    description: str | None = None
    object: str | None = None
    generated_description: str | None = None


class IdList(BaseModel):
    ids: list[str]


class RemovedIds(BaseModel):
    removed: list[str]


class TextCaptureOut(BaseModel):
    text: str
    photo_id: str | None = None


class DescriptionText(BaseModel):
    text: str


class GeneratedDescriptionOut(BaseModel):
    photo_id: str
    prompt: str
    text: str
