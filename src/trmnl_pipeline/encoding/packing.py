"""Bit-depth packing of palette indices."""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np

PACKABLE_BIT_DEPTHS = (1, 2, 4, 8)


def container_bit_depth(bit_depth: int, supported: Iterable[int] = PACKABLE_BIT_DEPTHS) -> int:
    """Smallest supported storage depth that holds ``bit_depth`` bits.

    Args:
        bit_depth: Requested bits per pixel
        supported: Depths the target container can store

    Raises:
        ValueError: If no supported depth is large enough
    """
    for depth in sorted(supported):
        if depth >= bit_depth:
            return depth
    raise ValueError(f"Unsupported bit depth: {bit_depth}")


def pack_pixels(values: np.ndarray, bits: int) -> np.ndarray:
    """Pack per-pixel values into bytes, MSB first.

    Format: 8 // bits pixels per byte, leftmost pixel in the highest bits.
    Every row starts on a byte boundary; the tail of a short final byte is 0.
    Values are masked to ``bits`` bits.

    Args:
        values: (height, width) array of palette indices
        bits: Bits per pixel (1, 2, 4 or 8)

    Returns:
        (height, bytes_per_row) uint8 array
    """
    if bits not in PACKABLE_BIT_DEPTHS:
        raise ValueError(f"Unsupported bit depth: {bits}")

    values = np.asarray(values)
    if values.ndim != 2:
        raise ValueError(f"Expected 2D array, got shape {values.shape}")

    height, width = values.shape
    per_byte = 8 // bits
    bytes_per_row = (width + per_byte - 1) // per_byte

    # Pad each row to a whole number of bytes
    padded = np.zeros((height, bytes_per_row * per_byte), dtype=np.uint8)
    padded[:, :width] = values.astype(np.uint8) & ((1 << bits) - 1)

    groups = padded.reshape(height, bytes_per_row, per_byte)
    shifts = (np.arange(per_byte - 1, -1, -1) * bits).astype(np.uint8)
    return np.bitwise_or.reduce(groups << shifts, axis=2).astype(np.uint8)


def packed_bytes(values: np.ndarray, bits: int) -> bytes:
    """Packed pixel stream without row padding beyond the byte boundary."""
    return pack_pixels(values, bits).tobytes()
