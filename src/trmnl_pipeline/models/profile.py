"""Device profile model."""

from __future__ import annotations

from dataclasses import dataclass

from .enums import OutputFormat


def _check_non_negative(name: str, value: int) -> None:
    if value < 0:
        raise ValueError(f"{name} out of range: {value} (must be >= 0)")


@dataclass(frozen=True, slots=True)
class DeviceProfile:
    """Static description of one target display.

    Zero values for width, height, colors and bit depth mean the catalog
    did not specify them; parameter resolution falls back to defaults.

    Attributes:
        name: Unique catalog key (e.g. "og_png")
        label: Short display label
        description: Human-readable description
        width: Panel width in pixels
        height: Panel height in pixels
        colors: Number of quantization levels
        bit_depth: Bits per pixel of the encoded output
        scale_factor: Device pixel ratio used by the renderer
        rotation: Clockwise rotation in degrees
        mime_type: Output mime type ("image/png" or "image/bmp")
        offset_x: Horizontal translation in pixels (positive = right)
        offset_y: Vertical translation in pixels (positive = down)
        published_at: Release timestamp from the catalog, may be empty
        kind: Device category ("trmnl", "kindle" or "byod")
        palette_ids: Compatible palette ids, preferred first
    """

    name: str
    label: str = ""
    description: str = ""
    width: int = 0
    height: int = 0
    colors: int = 0
    bit_depth: int = 0
    scale_factor: float = 1.0
    rotation: int = 0
    mime_type: str = "image/png"
    offset_x: int = 0
    offset_y: int = 0
    published_at: str = ""
    kind: str = ""
    palette_ids: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("name must not be empty")
        _check_non_negative("width", self.width)
        _check_non_negative("height", self.height)
        _check_non_negative("colors", self.colors)
        _check_non_negative("bit_depth", self.bit_depth)

    @property
    def size(self) -> tuple[int, int]:
        """Panel (width, height) in pixels."""
        return self.width, self.height

    @property
    def output_format(self) -> OutputFormat:
        """Container format derived from the mime type."""
        return OutputFormat.from_mime_type(self.mime_type)
