"""Transform parameter resolution.

Every field is resolved with the same precedence: a value set explicitly on
the overrides, then the bound device profile, then the built-in default.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict, dataclass
from typing import Any, Final

from ..exceptions import InvalidInputError
from .enums import OutputFormat
from .palette import parse_hex_color
from .profile import DeviceProfile

DEFAULT_WIDTH: Final = 800
DEFAULT_HEIGHT: Final = 480
DEFAULT_COLORS: Final = 2
DEFAULT_BIT_DEPTH: Final = 1
DEFAULT_ROTATION: Final = 0
DEFAULT_OFFSET_X: Final = 0
DEFAULT_OFFSET_Y: Final = 0
DEFAULT_FORMAT: Final = OutputFormat.PNG
DEFAULT_DITHER: Final = True

MAX_COLORS: Final = 256
MAX_BIT_DEPTH: Final = 8

# Palette remap only runs for indexed PNG output at or below this depth
PALETTE_REMAP_MAX_BIT_DEPTH: Final = 2


@dataclass(frozen=True, slots=True)
class TransformOverrides:
    """Values set explicitly by the caller. None means "not set"."""

    width: int | None = None
    height: int | None = None
    colors: int | None = None
    bit_depth: int | None = None
    rotation: int | None = None
    offset_x: int | None = None
    offset_y: int | None = None
    output_format: OutputFormat | str | None = None
    palette: Sequence[str] | None = None
    dither: bool | None = None


@dataclass(frozen=True, slots=True)
class TransformParameters:
    """Fully resolved parameters for one pipeline invocation."""

    width: int
    height: int
    colors: int
    bit_depth: int
    rotation: int
    offset_x: int
    offset_y: int
    output_format: OutputFormat
    palette: tuple[str, ...] | None
    dither: bool

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @property
    def output_size(self) -> tuple[int, int]:
        """Encoded image size after rotation."""
        if self.rotation in (90, 270):
            return self.height, self.width
        return self.width, self.height

    @property
    def applies_palette_remap(self) -> bool:
        return (
            self.output_format == OutputFormat.PNG
            and self.bit_depth <= PALETTE_REMAP_MAX_BIT_DEPTH
        )

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def _profile_value(profile: DeviceProfile | None, field: str) -> Any:
    if profile is None:
        return None
    value = getattr(profile, field)
    # The catalog loader stores 0 for unspecified dimensions and color data
    if field in ("width", "height", "colors", "bit_depth") and value <= 0:
        return None
    return value


def _pick(explicit: Any, from_profile: Any, default: Any) -> Any:
    if explicit is not None:
        return explicit
    if from_profile is not None:
        return from_profile
    return default


def _coerce_int(value: Any, field: str) -> int:
    try:
        if isinstance(value, bool):
            raise TypeError("boolean is not a number")
        return int(value)
    except (TypeError, ValueError, OverflowError) as err:
        raise InvalidInputError(f"Invalid {field}: {value!r}") from err


def _coerce_format(value: OutputFormat | str) -> OutputFormat:
    if isinstance(value, OutputFormat):
        return value
    return OutputFormat.from_mime_type(str(value))


def normalize_rotation(degrees: int) -> int:
    """Normalize to 0..359 and require a multiple of 90.

    Raises:
        InvalidInputError: If the angle is not axis-aligned
    """
    normalized = int(degrees) % 360
    if normalized % 90 != 0:
        raise InvalidInputError(
            f"Unsupported rotation: {degrees} (must be a multiple of 90 degrees)"
        )
    return normalized


def resolve_parameters(
        overrides: TransformOverrides | None = None,
        profile: DeviceProfile | None = None,
) -> TransformParameters:
    """Resolve and validate transform parameters.

    Args:
        overrides: Caller-supplied values, unset fields are None
        profile: Optional device profile to fall back to

    Returns:
        Frozen parameters for one pipeline run

    Raises:
        InvalidInputError: If a resolved value is not an integer or is out of range
    """
    overrides = overrides or TransformOverrides()

    width, height, colors, bit_depth, rotation, offset_x, offset_y = (
        _coerce_int(
            _pick(getattr(overrides, field), _profile_value(profile, field), default),
            field,
        )
        for field, default in (
            ("width", DEFAULT_WIDTH),
            ("height", DEFAULT_HEIGHT),
            ("colors", DEFAULT_COLORS),
            ("bit_depth", DEFAULT_BIT_DEPTH),
            ("rotation", DEFAULT_ROTATION),
            ("offset_x", DEFAULT_OFFSET_X),
            ("offset_y", DEFAULT_OFFSET_Y),
        )
    )
    output_format = _pick(
        overrides.output_format,
        _profile_value(profile, "output_format"),
        DEFAULT_FORMAT,
    )
    dither = _pick(overrides.dither, None, DEFAULT_DITHER)
    palette = tuple(overrides.palette) if overrides.palette is not None else None

    if width <= 0 or height <= 0:
        raise InvalidInputError(f"Invalid target size: {width}x{height}")
    if not 2 <= colors <= MAX_COLORS:
        raise InvalidInputError(f"colors out of range: {colors} (must be 2-{MAX_COLORS})")
    if not 1 <= bit_depth <= MAX_BIT_DEPTH:
        raise InvalidInputError(
            f"bit_depth out of range: {bit_depth} (must be 1-{MAX_BIT_DEPTH})"
        )
    if colors > 1 << bit_depth:
        raise InvalidInputError(
            f"{colors} colors do not fit in {bit_depth} bit(s) per pixel"
        )

    params = TransformParameters(
        width=width,
        height=height,
        colors=colors,
        bit_depth=bit_depth,
        rotation=normalize_rotation(rotation),
        offset_x=offset_x,
        offset_y=offset_y,
        output_format=_coerce_format(output_format),
        palette=palette,
        dither=bool(dither),
    )

    if params.palette is not None:
        _validate_palette(params.palette)
        if params.applies_palette_remap and len(params.palette) < params.colors:
            raise InvalidInputError(
                f"Palette has {len(params.palette)} entries, "
                f"need at least {params.colors} for {params.colors} levels"
            )

    return params


def _validate_palette(palette: tuple[str, ...]) -> None:
    try:
        for color in palette:
            parse_hex_color(color)
    except ValueError as err:
        raise InvalidInputError(str(err)) from err
