"""Raster transformation stages."""

from .geometry import best_fit_size, center_offset, fit_to_canvas, rotate, round_half_up, translate
from .palette import (
    DEFAULT_1BIT_COLORMAP,
    DEFAULT_2BIT_COLORMAP,
    IndexedRaster,
    default_colormap,
    grayscale_indexed,
    remap_to_palette,
    table_positions,
)
from .quantize import QuantizedRaster, error_diffusion, quantize, threshold, to_grayscale

__all__ = [
    "DEFAULT_1BIT_COLORMAP",
    "DEFAULT_2BIT_COLORMAP",
    "IndexedRaster",
    "QuantizedRaster",
    "best_fit_size",
    "center_offset",
    "default_colormap",
    "error_diffusion",
    "fit_to_canvas",
    "grayscale_indexed",
    "quantize",
    "remap_to_palette",
    "rotate",
    "round_half_up",
    "table_positions",
    "threshold",
    "to_grayscale",
    "translate",
]
