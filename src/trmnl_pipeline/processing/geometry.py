"""Geometry stages: resize onto the panel canvas, translate, rotate."""

from __future__ import annotations

import logging
import math

from PIL import Image

from ..exceptions import InvalidInputError
from ..models.enums import Rotation
from ..models.parameters import normalize_rotation
from ..raster import WHITE, RasterBuffer

_LOGGER = logging.getLogger(__name__)

# Clockwise rotation from the caller's perspective. PIL's ROTATE_* constants
# are counter-clockwise.
_CLOCKWISE_TRANSPOSE = {
    Rotation.ROTATE_90: Image.Transpose.ROTATE_270,
    Rotation.ROTATE_180: Image.Transpose.ROTATE_180,
    Rotation.ROTATE_270: Image.Transpose.ROTATE_90,
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero.

    All geometry values are non-negative, where this equals floor(x + 0.5).
    """
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


def best_fit_size(
        source_size: tuple[int, int],
        target_size: tuple[int, int],
) -> tuple[int, int]:
    """Largest size with the source aspect ratio that fits the target.

    Args:
        source_size: (width, height) of the source image
        target_size: (width, height) of the canvas

    Returns:
        Scaled (width, height), each at least 1 and at most the target
    """
    src_w, src_h = source_size
    target_w, target_h = target_size
    scale = min(target_w / src_w, target_h / src_h)
    scaled_w = min(target_w, max(1, round_half_up(src_w * scale)))
    scaled_h = min(target_h, max(1, round_half_up(src_h * scale)))
    return scaled_w, scaled_h


def center_offset(outer: tuple[int, int], inner: tuple[int, int]) -> tuple[int, int]:
    """Top-left position that centers ``inner`` inside ``outer``."""
    return (
        round_half_up((outer[0] - inner[0]) / 2),
        round_half_up((outer[1] - inner[1]) / 2),
    )


def fit_to_canvas(buffer: RasterBuffer, width: int, height: int) -> RasterBuffer:
    """Scale to fit the target size without cropping and center on white.

    Returns the input buffer unchanged if it already has the target size,
    which makes the stage idempotent.

    Args:
        buffer: Source buffer
        width: Canvas width
        height: Canvas height

    Returns:
        Buffer of exactly width x height
    """
    if buffer.is_empty:
        raise InvalidInputError(f"Cannot resize empty buffer ({buffer.width}x{buffer.height})")
    if buffer.size == (width, height):
        return buffer

    scaled_size = best_fit_size(buffer.size, (width, height))
    if scaled_size != buffer.size:
        _LOGGER.debug("Resizing image from %s to %s", buffer.size, scaled_size)
        scaled = buffer.image.resize(scaled_size, Image.Resampling.LANCZOS)
    else:
        scaled = buffer.image

    canvas = Image.new("RGB", (width, height), WHITE)
    canvas.paste(scaled, center_offset((width, height), scaled_size))
    if scaled is not buffer.image:
        scaled.close()
    return RasterBuffer(canvas)


def translate(buffer: RasterBuffer, offset_x: int, offset_y: int) -> RasterBuffer:
    """Shift contents by (offset_x, offset_y); positive moves right/down.

    Pixels moved past the edge are dropped and uncovered pixels are white.
    A zero offset returns the input buffer unchanged.
    """
    if offset_x == 0 and offset_y == 0:
        return buffer

    _LOGGER.debug("Translating image by (%d, %d)", offset_x, offset_y)
    canvas = Image.new("RGB", buffer.size, WHITE)
    canvas.paste(buffer.image, (offset_x, offset_y))
    return RasterBuffer(canvas)


def clockwise_rotation(degrees: int | Rotation) -> Rotation:
    """Map any multiple of 90 degrees (negative included) to a Rotation.

    Raises:
        InvalidInputError: If degrees is not a multiple of 90
    """
    return Rotation(normalize_rotation(degrees))


def rotated_size(size: tuple[int, int], rotation: Rotation) -> tuple[int, int]:
    """Buffer size after a clockwise rotation."""
    width, height = size
    if rotation in (Rotation.ROTATE_90, Rotation.ROTATE_270):
        return height, width
    return width, height


def rotate(buffer: RasterBuffer, degrees: int | Rotation) -> RasterBuffer:
    """Rotate clockwise by a multiple of 90 degrees.

    90 and 270 swap width and height. 0 returns the input buffer unchanged.

    Raises:
        InvalidInputError: If degrees is not a multiple of 90
    """
    rotation = clockwise_rotation(degrees)
    if rotation == Rotation.ROTATE_0:
        return buffer

    _LOGGER.debug("Rotating image %d degrees clockwise", rotation.value)
    return RasterBuffer(buffer.image.transpose(_CLOCKWISE_TRANSPOSE[rotation]))
