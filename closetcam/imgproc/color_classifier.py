"""Nearest named colour lookup by luma-weighted RGB distance."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from closetcam.imgproc.palette import PALETTE, ColorEntry

UNCLASSIFIED_COLOR = "Unclassified Color"
UNCLASSIFIED_THRESHOLD = 0.4

RED_WEIGHT = 0.30
GREEN_WEIGHT = 0.59
BLUE_WEIGHT = 0.11


@dataclass(frozen=True, slots=True)
class SampledColor:
    """RGB triple with channels on the 0-1 scale."""

    red: float
    green: float
    blue: float

    def as_tuple(self) -> tuple[float, float, float]:
        return self.red, self.green, self.blue


def weighted_distance(sample: SampledColor, reference: tuple[float, float, float]) -> float:
    """Euclidean distance with channels scaled by 0.30 / 0.59 / 0.11."""

    red, green, blue = reference
    return math.sqrt(
        RED_WEIGHT * (sample.red - red) ** 2
        + GREEN_WEIGHT * (sample.green - green) ** 2
        + BLUE_WEIGHT * (sample.blue - blue) ** 2
    )


def nearest(
    sample: SampledColor,
    palette: Sequence[ColorEntry] = PALETTE,
) -> tuple[ColorEntry | None, float]:
    """Return the closest palette entry and its distance; earliest entry wins ties."""

    closest: ColorEntry | None = None
    smallest = math.inf
    for entry in palette:
        distance = weighted_distance(sample, entry.normalized)
        if distance < smallest:
            smallest = distance
            closest = entry
    return closest, smallest


def classify(
    sample: SampledColor,
    palette: Sequence[ColorEntry] = PALETTE,
    threshold: float = UNCLASSIFIED_THRESHOLD,
) -> str:
    """
    Name the palette colour nearest to ``sample``.

    Returns ``UNCLASSIFIED_COLOR`` when the best match is farther than
    ``threshold``; a match at exactly the threshold keeps its name.
    Channels outside 0-1 are not rejected, the same formula applies.
    """

    closest, distance = nearest(sample, palette)
    if closest is None or distance > threshold:
        return UNCLASSIFIED_COLOR
    return closest.name
