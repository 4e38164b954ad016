"""Named reference colours used for nearest-match classification."""

from __future__ import annotations

import re
from dataclasses import dataclass

_HEX_DIGITS = re.compile(r"[0-9A-F]{6}")


def hex_to_rgb(code: str) -> tuple[int, int, int]:
    """Parse ``#RRGGBB`` (leading ``#`` optional) into 8-bit channels."""

    sanitized = code.strip().upper()
    if sanitized.startswith("#"):
        sanitized = sanitized[1:]
    # int(..., 16) alone would also accept signs, "0x" and underscores.
    if not _HEX_DIGITS.fullmatch(sanitized):
        raise ValueError(f"Invalid hex colour: {code!r}")
    value = int(sanitized, 16)
    return (value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF


@dataclass(frozen=True, slots=True)
class ColorEntry:
    """A palette colour with 8-bit RGB channels."""

    name: str
    rgb: tuple[int, int, int]

    @classmethod
    def from_hex(cls, name: str, code: str) -> ColorEntry:
        return cls(name=name, rgb=hex_to_rgb(code))

    @property
    def normalized(self) -> tuple[float, float, float]:
        red, green, blue = self.rgb
        return red / 255.0, green / 255.0, blue / 255.0


_PALETTE_HEX: tuple[tuple[str, str], ...] = (
    # Basic
    ("White", "#FFFFFF"),
    ("Black", "#000000"),
    ("Red", "#FF0000"),
    ("Green", "#00FF00"),
    ("Blue", "#0000FF"),
    ("Yellow", "#FFFF00"),
    ("Cyan", "#00FFFF"),
    ("Magenta", "#FF00FF"),
    # Reds
    ("Crimson", "#DC143C"),
    ("Firebrick", "#B22222"),
    ("Scarlet", "#FF2400"),
    ("Ruby", "#E0115F"),
    ("Maroon", "#800000"),
    ("Burgundy", "#800020"),
    ("Cherry", "#DE3163"),
    ("Rosewood", "#65000B"),
    ("Coral Red", "#FF4040"),
    ("Indian Red", "#CD5C5C"),
    ("Salmon", "#FA8072"),
    ("Light Coral", "#F08080"),
    # Greens
    ("Forest Green", "#228B22"),
    ("Lime Green", "#32CD32"),
    ("Olive Green", "#6B8E23"),
    ("Mint Green", "#98FF98"),
    ("Pale Green", "#98FB98"),
    ("Emerald", "#50C878"),
    ("Sea Green", "#2E8B57"),
    ("Jade", "#00A86B"),
    ("Neon Green", "#39FF14"),
    # Blues
    ("Sky Blue", "#87CEEB"),
    ("Dodger Blue", "#1E90FF"),
    ("Deep Sky Blue", "#00BFFF"),
    ("Cobalt Blue", "#0047AB"),
    ("Navy", "#000080"),
    ("Steel Blue", "#4682B4"),
    ("Powder Blue", "#B0E0E6"),
    ("Electric Blue", "#7DF9FF"),
    ("Cerulean", "#007BA7"),
    ("Azure", "#007FFF"),
    ("Arctic Blue", "#E0FFFF"),
    # Yellows
    ("Light Yellow", "#FFFFE0"),
    ("Lemon", "#FFF44F"),
    ("Goldenrod", "#DAA520"),
    ("Mustard", "#FFDB58"),
    ("Bright Yellow", "#FFEA00"),
    ("Canary Yellow", "#FFEF00"),
    # Oranges
    ("Orange", "#FFA500"),
    ("Dark Orange", "#FF8C00"),
    ("Peach", "#FFDAB9"),
    ("Coral", "#FF7F50"),
    ("Tangerine", "#F28500"),
    ("Pumpkin", "#FF7518"),
    ("Amber", "#FFBF00"),
    # Purples
    ("Purple", "#800080"),
    ("Violet", "#EE82EE"),
    ("Indigo", "#4B0082"),
    ("Lavender", "#E6E6FA"),
    ("Amethyst", "#9966CC"),
    ("Orchid", "#DA70D6"),
    ("Mauve", "#E0B0FF"),
    ("Lilac", "#C8A2C8"),
    ("Plum", "#DDA0DD"),
    ("Deep Purple", "#673AB7"),
    # Pinks
    ("Pink", "#FFC0CB"),
    ("Hot Pink", "#FF69B4"),
    ("Deep Pink", "#FF1493"),
    ("Bubblegum", "#FF85C1"),
    ("Blush", "#DE5D83"),
    # Neutrals
    ("Gray", "#808080"),
    ("Light Gray", "#D3D3D3"),
    ("Beige", "#F5F5DC"),
)

PALETTE: tuple[ColorEntry, ...] = tuple(ColorEntry.from_hex(name, code) for name, code in _PALETTE_HEX)
