"""Output encoding: indexed rasters to PNG or BMP bytes."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass

from PIL import Image

from ..models.enums import OutputFormat
from ..processing.palette import IndexedRaster
from .bitmap import encode_bmp
from .packing import container_bit_depth

_LOGGER = logging.getLogger(__name__)

PNG_BIT_DEPTHS = (1, 2, 4, 8)

# Above this depth PNG output is plain 8-bit grayscale
_PNG_MAX_PALETTE_DEPTH = 4


@dataclass(frozen=True, slots=True)
class EncodedImage:
    """Device-ready image bytes plus what a receiver needs to interpret them.

    Attributes:
        data: Encoded file contents
        output_format: Container format
        width: Image width in pixels
        height: Image height in pixels
        bit_depth: Requested bits per pixel
        stored_bit_depth: Bits per pixel actually written by the container
    """

    data: bytes
    output_format: OutputFormat
    width: int
    height: int
    bit_depth: int
    stored_bit_depth: int

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @property
    def extension(self) -> str:
        return self.output_format.extension

    @property
    def mime_type(self) -> str:
        return self.output_format.mime_type

    def __len__(self) -> int:
        return len(self.data)

    def to_image(self) -> Image.Image:
        """Decode the bytes back into a PIL image."""
        image = Image.open(io.BytesIO(self.data))
        image.load()
        return image


def encode_png(raster: IndexedRaster, bit_depth: int) -> tuple[bytes, int]:
    """Serialize an indexed raster as PNG.

    Depths up to 4 are written as a palette PNG at the smallest PNG depth
    that holds ``bit_depth``. Deeper rasters are written as 8-bit grayscale
    using the luminance of each palette entry.

    Returns:
        Tuple of (file bytes, stored bits per pixel)
    """
    bits = container_bit_depth(bit_depth, PNG_BIT_DEPTHS)
    buf = io.BytesIO()

    if bits <= _PNG_MAX_PALETTE_DEPTH:
        image = raster.to_image()
        try:
            image.save(buf, "PNG", bits=bits)
        finally:
            image.close()
    else:
        gray_table = bytes(
            (r * 299 + g * 587 + b * 114 + 500) // 1000 for r, g, b in raster.palette
        )
        gray = raster.indices.tobytes().translate(gray_table.ljust(256, b"\xff"))
        image = Image.frombytes("L", raster.size, gray)
        try:
            image.save(buf, "PNG")
        finally:
            image.close()

    data = buf.getvalue()
    _LOGGER.debug("Encoded %dx%d PNG at %d bpp (%d bytes)", raster.width, raster.height, bits, len(data))
    return data, bits


def encode_image(
        raster: IndexedRaster,
        output_format: OutputFormat,
        bit_depth: int,
) -> EncodedImage:
    """Encode an indexed raster into the requested container.

    Args:
        raster: Palette indices plus color table
        output_format: PNG or BMP
        bit_depth: Requested bits per pixel (1-8)

    Returns:
        EncodedImage with bytes and dimensions
    """
    if output_format == OutputFormat.BMP:
        data, stored = encode_bmp(raster.indices, raster.palette, bit_depth)
    else:
        data, stored = encode_png(raster, bit_depth)

    return EncodedImage(
        data=data,
        output_format=OutputFormat(output_format),
        width=raster.width,
        height=raster.height,
        bit_depth=bit_depth,
        stored_bit_depth=stored,
    )
