"""Image processing: colour sampling, classification and encoding."""

from .color_classifier import UNCLASSIFIED_COLOR, SampledColor, classify, nearest, weighted_distance
from .palette import PALETTE, ColorEntry, hex_to_rgb
from .sampling import detect_color, sample_center

__all__ = [
    "PALETTE",
    "UNCLASSIFIED_COLOR",
    "ColorEntry",
    "SampledColor",
    "classify",
    "detect_color",
    "hex_to_rgb",
    "nearest",
    "sample_center",
    "weighted_distance",
]
