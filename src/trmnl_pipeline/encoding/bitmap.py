"""Uncompressed BMP3 writer for palette images."""

from __future__ import annotations

import logging
import struct

import numpy as np

from ..models.palette import RGB
from .packing import container_bit_depth, pack_pixels

_LOGGER = logging.getLogger(__name__)

BMP_BIT_DEPTHS = (1, 4, 8)

_FILE_HEADER = struct.Struct("<2sIHHI")
_INFO_HEADER = struct.Struct("<IiiHHIIiiII")
_BI_RGB = 0


def _row_stride(width: int, bits: int) -> int:
    """Bytes per stored row, padded to a 4-byte boundary."""
    return ((width * bits + 31) // 32) * 4


def _color_table(palette: tuple[RGB, ...]) -> bytes:
    """BGRA quads, one per palette entry."""
    return b"".join(bytes((b, g, r, 0)) for r, g, b in palette)


def encode_bmp(indices: np.ndarray, palette: tuple[RGB, ...], bit_depth: int) -> tuple[bytes, int]:
    """Serialize palette indices as a BMP3 file.

    Rows are stored bottom-up. The color table holds exactly the palette
    entries and the resolution fields are left at zero.

    Args:
        indices: (height, width) uint8 array of palette indices
        palette: Ordered RGB table
        bit_depth: Requested bits per pixel (1-8)

    Returns:
        Tuple of (file bytes, stored bits per pixel)

    Raises:
        ValueError: If the palette does not fit the stored depth
    """
    bits = container_bit_depth(bit_depth, BMP_BIT_DEPTHS)
    if not 0 < len(palette) <= (1 << bits):
        raise ValueError(f"Palette of {len(palette)} entries does not fit {bits}-bit BMP")

    height, width = indices.shape
    stride = _row_stride(width, bits)

    packed = pack_pixels(indices, bits)
    rows = np.zeros((height, stride), dtype=np.uint8)
    rows[:, : packed.shape[1]] = packed
    pixel_data = rows[::-1].tobytes()

    color_table = _color_table(palette)
    offset = _FILE_HEADER.size + _INFO_HEADER.size + len(color_table)
    file_size = offset + len(pixel_data)

    header = _FILE_HEADER.pack(b"BM", file_size, 0, 0, offset)
    info = _INFO_HEADER.pack(
        _INFO_HEADER.size,
        width,
        height,  # positive: bottom-up
        1,
        bits,
        _BI_RGB,
        len(pixel_data),
        0,
        0,
        len(palette),
        0,
    )
    _LOGGER.debug("Encoded %dx%d BMP at %d bpp (%d bytes)", width, height, bits, file_size)
    return header + info + color_table + pixel_data, bits
