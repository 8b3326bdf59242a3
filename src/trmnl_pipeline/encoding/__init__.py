"""Bit packing and container encoders."""

from .bitmap import BMP_BIT_DEPTHS, encode_bmp
from .images import PNG_BIT_DEPTHS, EncodedImage, encode_image, encode_png
from .packing import PACKABLE_BIT_DEPTHS, container_bit_depth, pack_pixels, packed_bytes

__all__ = [
    "BMP_BIT_DEPTHS",
    "PACKABLE_BIT_DEPTHS",
    "PNG_BIT_DEPTHS",
    "EncodedImage",
    "container_bit_depth",
    "encode_bmp",
    "encode_image",
    "encode_png",
    "pack_pixels",
    "packed_bytes",
]
