"""Centre-of-frame colour sampling."""

from __future__ import annotations

from PIL import Image, ImageStat

from closetcam.imgproc.color_classifier import UNCLASSIFIED_COLOR, SampledColor, classify
from closetcam.metrics.prometheus_exporter import color_classifications_total

DEFAULT_SAMPLE_SIZE = 10


def sample_center(image: Image.Image, size: int = DEFAULT_SAMPLE_SIZE) -> SampledColor:
    """Average a ``size`` x ``size`` square around the image centre."""

    size = max(size, 1)
    rgb = image if image.mode == "RGB" else image.convert("RGB")
    width, height = rgb.size
    left = max(width // 2 - size // 2, 0)
    top = max(height // 2 - size // 2, 0)
    right = min(left + size, width)
    bottom = min(top + size, height)

    red, green, blue = ImageStat.Stat(rgb.crop((left, top, right, bottom))).mean
    return SampledColor(red=red / 255.0, green=green / 255.0, blue=blue / 255.0)


def detect_color(image: Image.Image, size: int = DEFAULT_SAMPLE_SIZE) -> tuple[str, SampledColor]:
    """Sample the frame centre and return ``(colour name, sample)``."""

    sample = sample_center(image, size)
    name = classify(sample)
    outcome = "unclassified" if name == UNCLASSIFIED_COLOR else "classified"
    color_classifications_total.labels(outcome=outcome).inc()
    return name, sample
