"""Stage implementations injected into the pipeline.

PillowBackend does the real work. BlankBackend produces white buffers of the
right dimensions without touching source pixels, for tests and dry runs.
"""

from __future__ import annotations

import logging
from typing import Protocol

import numpy as np

from .exceptions import InvalidInputError
from .models.enums import Rotation
from .processing import geometry
from .processing.quantize import MAX_LEVELS, MIN_LEVELS, QuantizedRaster, quantize
from .raster import RasterBuffer

_LOGGER = logging.getLogger(__name__)


class TransformBackend(Protocol):
    """Geometry and quantization stages used by TransformPipeline.

    Every method either returns its input buffer unchanged or a new buffer
    that the caller owns. Input buffers are never closed.
    """

    name: str

    def resize(self, buffer: RasterBuffer, width: int, height: int) -> RasterBuffer:
        ...

    def translate(self, buffer: RasterBuffer, offset_x: int, offset_y: int) -> RasterBuffer:
        ...

    def rotate(self, buffer: RasterBuffer, degrees: int) -> RasterBuffer:
        ...

    def quantize(self, buffer: RasterBuffer, levels: int, dither: bool) -> QuantizedRaster:
        ...


class PillowBackend:
    """Pixel-exact stages built on Pillow and numpy."""

    name = "pillow"

    def resize(self, buffer: RasterBuffer, width: int, height: int) -> RasterBuffer:
        return geometry.fit_to_canvas(buffer, width, height)

    def translate(self, buffer: RasterBuffer, offset_x: int, offset_y: int) -> RasterBuffer:
        return geometry.translate(buffer, offset_x, offset_y)

    def rotate(self, buffer: RasterBuffer, degrees: int) -> RasterBuffer:
        return geometry.rotate(buffer, degrees)

    def quantize(self, buffer: RasterBuffer, levels: int, dither: bool) -> QuantizedRaster:
        return quantize(buffer, levels, dither)


class BlankBackend:
    """Stand-in backend that ignores pixel content.

    Output has the same dimensions the real stages would produce, filled
    with white (the top quantization level).
    """

    name = "blank"

    def resize(self, buffer: RasterBuffer, width: int, height: int) -> RasterBuffer:
        _LOGGER.debug("Blank backend: %dx%d canvas", width, height)
        return RasterBuffer.new(width, height)

    def translate(self, buffer: RasterBuffer, offset_x: int, offset_y: int) -> RasterBuffer:
        return buffer

    def rotate(self, buffer: RasterBuffer, degrees: int) -> RasterBuffer:
        rotation = geometry.clockwise_rotation(degrees)
        if rotation == Rotation.ROTATE_0:
            return buffer
        return RasterBuffer.new(*geometry.rotated_size(buffer.size, rotation))

    def quantize(self, buffer: RasterBuffer, levels: int, dither: bool) -> QuantizedRaster:
        if not MIN_LEVELS <= levels <= MAX_LEVELS:
            raise InvalidInputError(
                f"levels out of range: {levels} (must be {MIN_LEVELS}-{MAX_LEVELS})"
            )
        indices = np.full((buffer.height, buffer.width), levels - 1, dtype=np.uint8)
        return QuantizedRaster(indices=indices, levels=levels)
