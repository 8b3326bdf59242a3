"""Grayscale quantization with Floyd–Steinberg error diffusion.

Levels are evenly spaced over 0..255: with N levels the step is 255 / (N - 1)
and level i has the exact value i * step. Each pixel takes the nearest level,
floor(value / step + 0.5) clamped to 0..N-1, so ties go to the upper level.
With dithering, the difference between the (error-adjusted) pixel value and
the exact level value is pushed to unvisited neighbours in raster order:

         *    7/16
  3/16  5/16  1/16

Errors accumulate in double precision, so results are bit-for-bit
reproducible for the same input.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from ..exceptions import InvalidInputError
from ..models.palette import grayscale_ramp
from ..raster import RasterBuffer

_LOGGER = logging.getLogger(__name__)

MIN_LEVELS = 2
MAX_LEVELS = 256

_RIGHT = 7 / 16
_BELOW_LEFT = 3 / 16
_BELOW = 5 / 16
_BELOW_RIGHT = 1 / 16


@dataclass(frozen=True, eq=False)
class QuantizedRaster:
    """Per-pixel level indices produced by the quantizer.

    Attributes:
        indices: (height, width) uint8 array of level indices 0..levels-1
        levels: Number of quantization levels
    """

    indices: np.ndarray
    levels: int

    @property
    def width(self) -> int:
        return int(self.indices.shape[1])

    @property
    def height(self) -> int:
        return int(self.indices.shape[0])

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def level_values(self) -> np.ndarray:
        """Gray value of each level, index-aligned."""
        return np.array([r for r, _, _ in grayscale_ramp(self.levels)], dtype=np.uint8)

    def to_gray(self) -> np.ndarray:
        """(height, width) uint8 array of level gray values."""
        return self.level_values()[self.indices]

    def to_buffer(self) -> RasterBuffer:
        return RasterBuffer.from_array(self.to_gray())


def _check_levels(levels: int) -> None:
    if not MIN_LEVELS <= levels <= MAX_LEVELS:
        raise InvalidInputError(
            f"levels out of range: {levels} (must be {MIN_LEVELS}-{MAX_LEVELS})"
        )


def to_grayscale(buffer: RasterBuffer) -> np.ndarray:
    """Luma of every pixel (ITU-R 601-2, as PIL mode 'L')."""
    gray = buffer.image.convert("L")
    try:
        return np.array(gray, dtype=np.uint8)
    finally:
        gray.close()


def threshold(gray: np.ndarray, levels: int) -> np.ndarray:
    """Map every pixel to its nearest level without error propagation.

    Args:
        gray: (height, width) intensities 0..255
        levels: Number of evenly spaced levels

    Returns:
        (height, width) uint8 level indices
    """
    _check_levels(levels)
    step = 255.0 / (levels - 1)
    indices = np.floor(gray.astype(np.float64) / step + 0.5)
    return np.clip(indices, 0, levels - 1).astype(np.uint8)


def error_diffusion(gray: np.ndarray, levels: int) -> np.ndarray:
    """Floyd–Steinberg dither to evenly spaced levels.

    Args:
        gray: (height, width) intensities 0..255
        levels: Number of evenly spaced levels

    Returns:
        (height, width) uint8 level indices
    """
    _check_levels(levels)
    height, width = gray.shape
    step = 255.0 / (levels - 1)
    top = levels - 1
    out = np.empty((height, width), dtype=np.uint8)
    if height == 0 or width == 0:
        return out

    current = gray[0].astype(np.float64).tolist()
    for y in range(height):
        below = gray[y + 1].astype(np.float64).tolist() if y + 1 < height else None
        row = [0] * width
        for x in range(width):
            old = current[x]
            index = math.floor(old / step + 0.5)
            if index < 0:
                index = 0
            elif index > top:
                index = top
            row[x] = index

            error = old - index * step
            if error == 0.0:
                continue
            if x + 1 < width:
                current[x + 1] += error * _RIGHT
            if below is not None:
                if x > 0:
                    below[x - 1] += error * _BELOW_LEFT
                below[x] += error * _BELOW
                if x + 1 < width:
                    below[x + 1] += error * _BELOW_RIGHT
        out[y] = row
        current = below

    return out


def quantize(buffer: RasterBuffer, levels: int, dither: bool = True) -> QuantizedRaster:
    """Reduce a buffer to ``levels`` evenly spaced gray levels.

    Args:
        buffer: Source buffer
        levels: Number of levels (2-256)
        dither: Use Floyd–Steinberg error diffusion (default: True)

    Returns:
        Level indices for every pixel

    Raises:
        InvalidInputError: If levels is out of range
    """
    _check_levels(levels)
    gray = to_grayscale(buffer)
    _LOGGER.debug(
        "Quantizing %dx%d image to %d levels (dither=%s)",
        buffer.width,
        buffer.height,
        levels,
        dither,
    )
    if dither:
        indices = error_diffusion(gray, levels)
    else:
        indices = threshold(gray, levels)
    return QuantizedRaster(indices=indices, levels=levels)
