"""Tests for the capture flows."""

from __future__ import annotations

from pathlib import Path

import pytest
import pytest_mock
from PIL import Image

from closetcam.services import CaptureService
from closetcam.services.capture import TEXT_RECOGNITION_FAILED, UNKNOWN_OBJECT
from closetcam.storage import PhotoLibrary, PhotoMetadata
from closetcam.vision import Detection, RecognitionClient, RecognitionRequestError


def _red_frame() -> Image.Image:
    return Image.new("RGB", (40, 40), (255, 0, 0))


@pytest.fixture
def recognizer(mocker: pytest_mock.MockerFixture) -> RecognitionClient:
    mock = mocker.create_autospec(RecognitionClient, instance=True)
    mock.detect_object = mocker.AsyncMock(return_value=Detection(label="T-Shirt", confidence=0.9))
    mock.recognize_text = mocker.AsyncMock(return_value="100% cotton")
    return mock


@pytest.mark.asyncio
async def test_analyze_frame(tmp_path: Path, recognizer: RecognitionClient) -> None:
    service = CaptureService(PhotoLibrary(tmp_path), recognizer)

    analysis = await service.analyze_frame(_red_frame())

    assert analysis.color_name == "Red"
    assert analysis.object_label == "T-Shirt"
    assert analysis.sample.as_tuple() == pytest.approx((1.0, 0.0, 0.0))


@pytest.mark.asyncio
async def test_analyze_frame_survives_detection_failure(tmp_path: Path, recognizer: RecognitionClient) -> None:
    recognizer.detect_object.side_effect = RecognitionRequestError("boom")
    service = CaptureService(PhotoLibrary(tmp_path), recognizer)

    analysis = await service.analyze_frame(_red_frame())

    assert analysis.color_name == "Red"
    assert analysis.detection is None
    assert analysis.object_label == UNKNOWN_OBJECT


@pytest.mark.asyncio
async def test_capture_stores_colour_and_object(tmp_path: Path, recognizer: RecognitionClient) -> None:
    library = PhotoLibrary(tmp_path)
    service = CaptureService(library, recognizer)

    item = await service.capture(_red_frame())

    assert item.metadata.description == "Red"
    assert item.metadata.category == "T-Shirt"
    assert library.image_path(item.id).exists()
    assert [photo.id for photo in library.photos] == [item.id]


@pytest.mark.asyncio
async def test_capture_with_overrides_skips_analysis(tmp_path: Path, recognizer: RecognitionClient) -> None:
    service = CaptureService(PhotoLibrary(tmp_path), recognizer)

    item = await service.capture(_red_frame(), description="Crimson", category="Dress")

    assert (item.metadata.description, item.metadata.category) == ("Crimson", "Dress")
    recognizer.detect_object.assert_not_awaited()


@pytest.mark.asyncio
async def test_capture_text_associates_with_parent(tmp_path: Path, recognizer: RecognitionClient) -> None:
    library = PhotoLibrary(tmp_path)
    await library.save_photo(_red_frame(), PhotoMetadata(id="shirt", description="Red", category="Shirt"))
    service = CaptureService(library, recognizer)

    result = await service.capture_text(_red_frame(), associated_with="shirt")

    assert result.text == "100% cotton"
    assert result.photo_id == "shirt"
    assert [photo.text for photo in library.get("shirt").associated_photos] == ["100% cotton"]


@pytest.mark.asyncio
async def test_capture_text_standalone(tmp_path: Path, recognizer: RecognitionClient) -> None:
    library = PhotoLibrary(tmp_path)
    service = CaptureService(library, recognizer)

    result = await service.capture_text(_red_frame())

    assert result.photo_id is not None
    assert library.get(result.photo_id).metadata.category == "Detected Text"


@pytest.mark.asyncio
async def test_capture_text_failure_saves_nothing(tmp_path: Path, recognizer: RecognitionClient) -> None:
    recognizer.recognize_text.side_effect = RecognitionRequestError("down")
    library = PhotoLibrary(tmp_path)
    service = CaptureService(library, recognizer)

    result = await service.capture_text(_red_frame())

    assert result.text == TEXT_RECOGNITION_FAILED
    assert result.photo_id is None
    assert library.photos == []


@pytest.mark.asyncio
async def test_capture_text_without_text_saves_nothing(tmp_path: Path, recognizer: RecognitionClient) -> None:
    recognizer.recognize_text.return_value = ""
    library = PhotoLibrary(tmp_path)

    result = await CaptureService(library, recognizer).capture_text(_red_frame())

    assert result.photo_id is None
    assert library.photos == []
