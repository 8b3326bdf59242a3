"""Data models for the TRMNL image pipeline."""

from .enums import PROFILE_ALIASES, DeviceKind, Model, OutputFormat, Rotation
from .palette import PaletteSpec, format_hex_color, grayscale_ramp, parse_hex_color
from .parameters import (
    TransformOverrides,
    TransformParameters,
    normalize_rotation,
    resolve_parameters,
)
from .profile import DeviceProfile

__all__ = [
    "DeviceKind",
    "DeviceProfile",
    "Model",
    "OutputFormat",
    "PaletteSpec",
    "PROFILE_ALIASES",
    "Rotation",
    "TransformOverrides",
    "TransformParameters",
    "format_hex_color",
    "grayscale_ramp",
    "normalize_rotation",
    "parse_hex_color",
    "resolve_parameters",
]
