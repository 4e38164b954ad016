"""FastAPI entrypoint and HTTP routes."""

from __future__ import annotations

import contextlib
import logging
from collections.abc import AsyncIterator
from pathlib import Path

from fastapi import FastAPI, File, Form, HTTPException, Request, Response, UploadFile, status
from fastapi.responses import FileResponse, JSONResponse
from PIL import Image
from prometheus_client import make_asgi_app

from closetcam.api import schemas
from closetcam.config.settings import Settings, get_settings
from closetcam.imgproc.color_classifier import SampledColor, classify
from closetcam.imgproc.normalize import load_image
from closetcam.nlp.description_client import DescriptionClient, DescriptionGenerationError
from closetcam.services.capture import CaptureService
from closetcam.storage.repository import PhotoLibrary, PhotoNotFoundError
from closetcam.vision.recognition_client import RecognitionClient

logger = logging.getLogger(__name__)


async def _read_image(upload: UploadFile) -> Image.Image:
    data = await upload.read()
    try:
        return load_image(data)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


def create_app(
    settings: Settings | None = None,
    *,
    library: PhotoLibrary | None = None,
    recognizer: RecognitionClient | None = None,
    describer: DescriptionClient | None = None,
) -> FastAPI:
    """Initialise the FastAPI application.

    Collaborators default to instances built from ``settings``; the description
    client is only created when an API key is configured.
    """

    settings = settings or get_settings()
    library = library or PhotoLibrary(Path(settings.library_root), jpeg_quality=settings.jpeg_quality)
    recognizer = recognizer or RecognitionClient(settings)
    if describer is None and settings.ai_api_key:
        describer = DescriptionClient(settings)
    capture = CaptureService(library, recognizer, sample_size=settings.color_sample_size)

    @contextlib.asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        await library.load()
        try:
            yield
        finally:
            with contextlib.suppress(Exception):
                await recognizer.close()
            if describer is not None:
                with contextlib.suppress(Exception):
                    await describer.close()

    app = FastAPI(
        title="closetcam API",
        version="0.1.0",
        docs_url="/docs" if settings.environment != "prod" else None,
        redoc_url="/redoc" if settings.environment != "prod" else None,
        lifespan=lifespan,
    )
    app.mount("/metrics", make_asgi_app())

    @app.exception_handler(PhotoNotFoundError)
    async def photo_not_found(_: Request, exc: PhotoNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    @app.exception_handler(DescriptionGenerationError)
    async def description_failed(_: Request, exc: DescriptionGenerationError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content={"detail": str(exc)})

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Simple health endpoint used for readiness probes."""

        return {"status": "ok"}

    @app.post("/colors/classify", tags=["colors"], response_model=schemas.ColorName)
    async def classify_color(sample: schemas.ColorSample) -> schemas.ColorName:
        name = classify(SampledColor(red=sample.red, green=sample.green, blue=sample.blue))
        return schemas.ColorName(name=name)

    @app.post("/frames/analyze", tags=["colors"], response_model=schemas.FrameAnalysisOut)
    async def analyze_frame(file: UploadFile = File(...)) -> schemas.FrameAnalysisOut:
        image = await _read_image(file)
        analysis = await capture.analyze_frame(image)
        return schemas.FrameAnalysisOut.from_analysis(analysis)

    @app.get("/photos", tags=["library"], response_model=list[schemas.PhotoOut])
    async def list_photos() -> list[schemas.PhotoOut]:
        return [schemas.PhotoOut.from_item(item) for item in library.photos]

    @app.post(
        "/photos",
        tags=["library"],
        response_model=schemas.PhotoOut,
        status_code=status.HTTP_201_CREATED,
    )
    async def capture_photo(
        file: UploadFile = File(...),
        description: str | None = Form(default=None),
        object: str | None = Form(default=None),  # noqa: A002 - public field name
    ) -> schemas.PhotoOut:
        image = await _read_image(file)
        item = await capture.capture(image, description=description, category=object)
        return schemas.PhotoOut.from_item(item)

    @app.delete("/photos", tags=["library"], response_model=schemas.RemovedIds)
    async def remove_photos(body: schemas.IdList) -> schemas.RemovedIds:
        removed = await library.remove_photos(body.ids)
        return schemas.RemovedIds(removed=removed)

    @app.post(
        "/photos/text",
        tags=["library"],
        response_model=schemas.TextCaptureOut,
        status_code=status.HTTP_201_CREATED,
    )
    async def capture_text(
        file: UploadFile = File(...),
        associated_with: str | None = Form(default=None),
    ) -> schemas.TextCaptureOut:
        image = await _read_image(file)
        if associated_with:
            library.get(associated_with)
        result = await capture.capture_text(image, associated_with=associated_with or None)
        return schemas.TextCaptureOut(text=result.text, photo_id=result.photo_id)

    @app.get("/photos/{photo_id}", tags=["library"], response_model=schemas.PhotoOut)
    async def get_photo(photo_id: str) -> schemas.PhotoOut:
        return schemas.PhotoOut.from_item(library.get(photo_id))

    @app.get("/photos/{photo_id}/image", tags=["library"])
    async def get_photo_image(photo_id: str) -> FileResponse:
        library.get(photo_id)
        path = library.image_path(photo_id)
        if not path.is_file():
            logger.warning("Image file for photo %s is missing at %s.", photo_id, path)
            raise PhotoNotFoundError(photo_id)
        return FileResponse(path, media_type="image/jpeg")

    @app.patch("/photos/{photo_id}", tags=["library"], response_model=schemas.PhotoOut)
    async def update_photo(photo_id: str, body: schemas.PhotoUpdate) -> schemas.PhotoOut:
        item = await library.update_metadata(
            photo_id,
            description=body.description,
            category=body.object,
            generated_description=body.generated_description,
        )
        return schemas.PhotoOut.from_item(item)

    @app.get("/photos/{photo_id}/associated/{associated_id}/image", tags=["library"])
    async def get_associated_image(photo_id: str, associated_id: str) -> Response:
        associated = library.get_associated(photo_id, associated_id)
        return Response(content=associated.image_data, media_type="image/jpeg")

    @app.delete("/photos/{photo_id}/associated", tags=["library"], response_model=schemas.PhotoOut)
    async def remove_associated(photo_id: str, body: schemas.IdList) -> schemas.PhotoOut:
        item = await library.remove_associated_photos(body.ids, photo_id)
        return schemas.PhotoOut.from_item(item)

    @app.post(
        "/photos/{photo_id}/description",
        tags=["descriptions"],
        response_model=schemas.GeneratedDescriptionOut,
    )
    async def generate_description(photo_id: str) -> schemas.GeneratedDescriptionOut:
        if describer is None:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="AI API key is not configured.",
            )
        result = await describer.fetch_clothing_description(photo_id, library)
        return schemas.GeneratedDescriptionOut(photo_id=result.photo_id, prompt=result.prompt, text=result.text)

    @app.put("/photos/{photo_id}/description", tags=["descriptions"], response_model=schemas.PhotoOut)
    async def save_description(photo_id: str, body: schemas.DescriptionText) -> schemas.PhotoOut:
        item = await library.save_generated_description(photo_id, body.text)
        return schemas.PhotoOut.from_item(item)

    return app
