"""Palette model and color helpers."""

from __future__ import annotations

import re
from dataclasses import dataclass

RGB = tuple[int, int, int]

_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def parse_hex_color(value: str) -> RGB:
    """Parse a "#RRGGBB" or "#RGB" color string.

    Args:
        value: Hex color, leading '#' optional, case-insensitive

    Returns:
        (red, green, blue) tuple

    Raises:
        ValueError: If the string is not a hex color
    """
    match = _HEX_COLOR.match(str(value).strip())
    if match is None:
        raise ValueError(f"Invalid hex color: {value!r}")

    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)


def format_hex_color(color: RGB) -> str:
    """Format an RGB tuple as "#rrggbb"."""
    return "#{:02x}{:02x}{:02x}".format(*color)


def grayscale_ramp(levels: int) -> tuple[RGB, ...]:
    """Evenly spaced gray levels from black to white.

    Level i has the value round(i * 255 / (levels - 1)), halves rounded up.
    """
    if levels < 2:
        raise ValueError(f"levels out of range: {levels} (must be >= 2)")
    ramp = []
    for i in range(levels):
        value = (i * 510 + (levels - 1)) // (2 * (levels - 1))
        ramp.append((value, value, value))
    return tuple(ramp)


@dataclass(frozen=True, slots=True)
class PaletteSpec:
    """Named color table usable by the palette remap.

    Attributes:
        id: Unique catalog key (e.g. "gray-4")
        name: Human-readable name
        grays: Number of gray levels of the implicit ramp
        colors: Explicit hex colors in table order, or None for a gray ramp
        framework_class: Back-end / CSS framework tag, may be empty
    """

    id: str
    name: str = ""
    grays: int = 0
    colors: tuple[str, ...] | None = None
    framework_class: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("id must not be empty")
        if self.grays < 0:
            raise ValueError(f"grays out of range: {self.grays} (must be >= 0)")
        if self.colors is not None:
            for color in self.colors:
                parse_hex_color(color)

    @property
    def hex_colors(self) -> tuple[str, ...]:
        """Explicit colors, or the gray ramp when none are listed."""
        if self.colors is not None:
            return self.colors
        if self.grays < 2:
            return ()
        return tuple(format_hex_color(c) for c in grayscale_ramp(self.grays))

    @property
    def rgb_colors(self) -> tuple[RGB, ...]:
        return tuple(parse_hex_color(c) for c in self.hex_colors)

    @property
    def is_grayscale(self) -> bool:
        """True if every table entry has equal R, G and B."""
        return all(r == g == b for r, g, b in self.rgb_colors)
