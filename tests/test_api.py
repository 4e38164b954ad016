"""HTTP API tests with in-process collaborators."""

from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Iterator

import pytest
import pytest_mock
from fastapi.testclient import TestClient
from PIL import Image

from closetcam.api.main import create_app
from closetcam.config.settings import Settings
from closetcam.nlp import DescriptionClient, DescriptionGenerationError, GeneratedDescription
from closetcam.storage import PhotoLibrary
from closetcam.vision import Detection, RecognitionClient


def _jpeg(color: tuple[int, int, int] = (0, 0, 128)) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (40, 40), color).save(buffer, format="JPEG", quality=95)
    return buffer.getvalue()


@pytest.fixture
def recognizer(mocker: pytest_mock.MockerFixture) -> RecognitionClient:
    mock = mocker.create_autospec(RecognitionClient, instance=True)
    mock.detect_object = mocker.AsyncMock(return_value=Detection(label="Jacket", confidence=0.75))
    mock.recognize_text = mocker.AsyncMock(return_value="Dry clean only")
    mock.close = mocker.AsyncMock(return_value=None)
    return mock


@pytest.fixture
def describer(mocker: pytest_mock.MockerFixture) -> DescriptionClient:
    mock = mocker.create_autospec(DescriptionClient, instance=True)
    mock.close = mocker.AsyncMock(return_value=None)
    return mock


@pytest.fixture
def client(tmp_path: Path, recognizer: RecognitionClient, describer: DescriptionClient) -> Iterator[TestClient]:
    app = create_app(
        Settings(library_root=str(tmp_path)),
        library=PhotoLibrary(tmp_path),
        recognizer=recognizer,
        describer=describer,
    )
    with TestClient(app) as test_client:
        yield test_client


def _upload(client: TestClient, **form: str) -> dict:
    response = client.post("/photos", files={"file": ("frame.jpg", _jpeg(), "image/jpeg")}, data=form)
    assert response.status_code == 201, response.text
    return response.json()


def test_health_returns_ok(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.parametrize(
    ("body", "expected"),
    [
        ({"red": 1.0, "green": 0.0, "blue": 0.0}, "Red"),
        ({"red": 0.0, "green": 0.0, "blue": 0.0}, "Black"),
        ({"red": 2.0, "green": 2.0, "blue": 2.0}, "Unclassified Color"),
    ],
)
def test_classify_color(client: TestClient, body: dict, expected: str) -> None:
    response = client.post("/colors/classify", json=body)

    assert response.status_code == 200
    assert response.json() == {"name": expected}


def test_analyze_frame(client: TestClient) -> None:
    response = client.post("/frames/analyze", files={"file": ("frame.jpg", _jpeg(), "image/jpeg")})

    assert response.status_code == 200
    payload = response.json()
    assert payload["color"] == "Navy"
    assert payload["detection"] == {"label": "Jacket", "confidence": 0.75, "display_label": "Jacket (75%)"}


def test_analyze_frame_rejects_non_images(client: TestClient) -> None:
    response = client.post("/frames/analyze", files={"file": ("notes.txt", b"hello", "text/plain")})

    assert response.status_code == 400


def test_capture_list_and_fetch_image(client: TestClient) -> None:
    created = _upload(client)

    assert created["description"] == "Navy"
    assert created["object"] == "Jacket"
    assert client.get("/photos").json() == [created]
    image = client.get(f"/photos/{created['id']}/image")
    assert image.status_code == 200
    assert image.headers["content-type"] == "image/jpeg"


def test_image_removed_behind_the_library_is_404(client: TestClient, tmp_path: Path) -> None:
    created = _upload(client)
    (tmp_path / f"{created['id']}.jpg").unlink()

    response = client.get(f"/photos/{created['id']}/image")

    assert response.status_code == 404
    assert client.get(f"/photos/{created['id']}").status_code == 200


def test_capture_with_form_overrides(client: TestClient, recognizer: RecognitionClient) -> None:
    created = _upload(client, description="Cobalt Blue", object="Coat")

    assert (created["description"], created["object"]) == ("Cobalt Blue", "Coat")
    recognizer.detect_object.assert_not_awaited()


def test_patch_and_delete_photos(client: TestClient) -> None:
    created = _upload(client)

    patched = client.patch(f"/photos/{created['id']}", json={"object": "Blazer"})
    assert patched.json()["object"] == "Blazer"

    removed = client.request("DELETE", "/photos", json={"ids": [created["id"], "ghost"]})
    assert removed.json() == {"removed": [created["id"]]}
    assert client.get(f"/photos/{created['id']}").status_code == 404


def test_text_capture_and_associated_removal(client: TestClient) -> None:
    parent = _upload(client)

    response = client.post(
        "/photos/text",
        files={"file": ("label.jpg", _jpeg((255, 255, 255)), "image/jpeg")},
        data={"associated_with": parent["id"]},
    )
    assert response.status_code == 201
    assert response.json() == {"text": "Dry clean only", "photo_id": parent["id"]}

    associated = client.get(f"/photos/{parent['id']}").json()["associated_photos"]
    assert [entry["text"] for entry in associated] == ["Dry clean only"]
    image = client.get(f"/photos/{parent['id']}/associated/{associated[0]['id']}/image")
    assert image.content[:2] == b"\xff\xd8"

    cleaned = client.request("DELETE", f"/photos/{parent['id']}/associated", json={"ids": [associated[0]["id"]]})
    assert cleaned.json()["associated_photos"] == []


def test_text_capture_unknown_parent_is_404(client: TestClient, recognizer: RecognitionClient) -> None:
    response = client.post(
        "/photos/text",
        files={"file": ("label.jpg", _jpeg(), "image/jpeg")},
        data={"associated_with": "missing"},
    )

    assert response.status_code == 404
    recognizer.recognize_text.assert_not_awaited()


def test_generate_and_save_description(client: TestClient, describer: DescriptionClient) -> None:
    created = _upload(client)
    describer.fetch_clothing_description.return_value = GeneratedDescription(
        photo_id=created["id"],
        prompt="Describe a Navy Jacket with the following details: No additional details.",
        text="A classic navy jacket.",
    )

    generated = client.post(f"/photos/{created['id']}/description")
    assert generated.status_code == 200
    assert generated.json()["text"] == "A classic navy jacket."
    assert client.get(f"/photos/{created['id']}").json()["generated_description"] is None

    saved = client.put(f"/photos/{created['id']}/description", json={"text": "A classic navy jacket."})
    assert saved.json()["generated_description"] == "A classic navy jacket."


def test_description_failure_is_502(client: TestClient, describer: DescriptionClient) -> None:
    created = _upload(client)
    describer.fetch_clothing_description.side_effect = DescriptionGenerationError("No candidates in response")

    response = client.post(f"/photos/{created['id']}/description")

    assert response.status_code == 502
    assert response.json() == {"detail": "No candidates in response"}


def test_description_unavailable_without_key(tmp_path: Path, recognizer: RecognitionClient) -> None:
    app = create_app(Settings(library_root=str(tmp_path), ai_api_key=""), recognizer=recognizer)

    with TestClient(app) as test_client:
        created = _upload(test_client)
        response = test_client.post(f"/photos/{created['id']}/description")

    assert response.status_code == 503


def test_unknown_photo_is_404(client: TestClient) -> None:
    assert client.get("/photos/missing").status_code == 404
    assert client.put("/photos/missing/description", json={"text": "x"}).status_code == 404


def test_photos_survive_restart(tmp_path: Path, recognizer: RecognitionClient) -> None:
    settings = Settings(library_root=str(tmp_path))
    with TestClient(create_app(settings, recognizer=recognizer)) as first:
        created = _upload(first)

    with TestClient(create_app(settings, recognizer=recognizer)) as second:
        assert [photo["id"] for photo in second.get("/photos").json()] == [created["id"]]
