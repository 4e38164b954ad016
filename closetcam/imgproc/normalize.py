"""Image decoding and encoding helpers."""

from __future__ import annotations

import base64
from io import BytesIO

from PIL import Image, UnidentifiedImageError


def load_image(image_bytes: bytes) -> Image.Image:
    """Decode raw upload bytes into an RGB Pillow image."""

    try:
        with Image.open(BytesIO(image_bytes)) as img:
            return img.convert("RGB")
    except UnidentifiedImageError as exc:
        raise ValueError("Uploaded file is not a supported image.") from exc


def to_jpeg_bytes(image: Image.Image, quality: int = 80) -> bytes:
    """Encode an image as JPEG."""

    buffer = BytesIO()
    image.convert("RGB").save(buffer, format="JPEG", quality=quality)
    return buffer.getvalue()


def to_png_data_url(image: Image.Image) -> str:
    """Encode an image as a ``data:image/png;base64,...`` URL for vision prompts."""

    buffer = BytesIO()
    image.convert("RGBA").save(buffer, format="PNG")
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"
