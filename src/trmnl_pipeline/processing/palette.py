"""Palette remap: level indices to an ordered color table."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final

import numpy as np
from PIL import Image

from ..exceptions import InvalidInputError
from ..models.palette import RGB, grayscale_ramp, parse_hex_color
from .quantize import QuantizedRaster

_LOGGER = logging.getLogger(__name__)

DEFAULT_1BIT_COLORMAP: Final[tuple[str, ...]] = ("#000000", "#ffffff")

DEFAULT_2BIT_COLORMAP: Final[tuple[str, ...]] = (
    "#000000",  # Black
    "#555555",  # Dark gray
    "#aaaaaa",  # Light gray
    "#ffffff",  # White
)


@dataclass(frozen=True, eq=False)
class IndexedRaster:
    """Palette image: per-pixel table indices plus the table.

    Attributes:
        indices: (height, width) uint8 array of palette indices
        palette: Ordered RGB table, one entry per quantization level
    """

    indices: np.ndarray
    palette: tuple[RGB, ...]

    @property
    def width(self) -> int:
        return int(self.indices.shape[1])

    @property
    def height(self) -> int:
        return int(self.indices.shape[0])

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @property
    def is_grayscale(self) -> bool:
        return all(r == g == b for r, g, b in self.palette)

    def to_rgb(self) -> np.ndarray:
        """(height, width, 3) uint8 array of palette colors."""
        table = np.array(self.palette, dtype=np.uint8).reshape(-1, 3)
        return table[self.indices]

    def to_image(self) -> Image.Image:
        """PIL palette image (mode 'P') with exactly the table entries."""
        image = Image.frombytes("P", self.size, np.ascontiguousarray(self.indices).tobytes())
        image.putpalette([channel for color in self.palette for channel in color])
        return image


def default_colormap(bit_depth: int) -> tuple[str, ...]:
    """Built-in table for indexed output: 4 grays at 2 bits, black/white otherwise."""
    if bit_depth == 2:
        return DEFAULT_2BIT_COLORMAP
    return DEFAULT_1BIT_COLORMAP


def table_positions(levels: int, table_size: int) -> list[int]:
    """Table entry selected by each level index.

    Level i picks entry round(i * (table_size - 1) / (levels - 1)), halves
    rounded up. With table_size == levels this is the identity; otherwise the
    first and last entries stay pinned to the darkest and lightest level.
    """
    if levels < 2:
        raise InvalidInputError(f"levels out of range: {levels} (must be >= 2)")
    if table_size < levels:
        raise InvalidInputError(
            f"Palette has {table_size} entries, need at least {levels} for {levels} levels"
        )
    span = table_size - 1
    denominator = levels - 1
    return [(2 * i * span + denominator) // (2 * denominator) for i in range(levels)]


def remap_to_palette(quantized: QuantizedRaster, colors: Sequence[str]) -> IndexedRaster:
    """Map quantized level indices onto an ordered color table.

    Args:
        quantized: Quantizer output
        colors: Hex colors, darkest level first

    Returns:
        Indexed raster whose palette holds the selected entries in level order

    Raises:
        InvalidInputError: If a color is invalid or the table is too small
    """
    try:
        table = [parse_hex_color(c) for c in colors]
    except ValueError as err:
        raise InvalidInputError(str(err)) from err

    positions = table_positions(quantized.levels, len(table))
    palette = tuple(table[p] for p in positions)
    _LOGGER.debug("Remapping %d levels onto %d-entry palette", quantized.levels, len(table))
    return IndexedRaster(indices=quantized.indices, palette=palette)


def grayscale_indexed(quantized: QuantizedRaster) -> IndexedRaster:
    """Indexed raster using the quantizer's own gray ramp as the table."""
    return IndexedRaster(indices=quantized.indices, palette=grayscale_ramp(quantized.levels))
