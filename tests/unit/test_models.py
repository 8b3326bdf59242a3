"""Test profile, palette and parameter models."""

from __future__ import annotations

import pytest

from trmnl_pipeline.exceptions import InvalidInputError
from trmnl_pipeline.models import (
    DeviceProfile,
    Model,
    OutputFormat,
    PaletteSpec,
    Rotation,
    TransformOverrides,
    normalize_rotation,
    resolve_parameters,
)
from trmnl_pipeline.models.palette import format_hex_color, grayscale_ramp, parse_hex_color


class TestHexColors:
    """Test hex color parsing and formatting."""

    def test_parse_long_form(self):
        """Test #RRGGBB parsing, any case."""
        assert parse_hex_color("#FFA500") == (255, 165, 0)
        assert parse_hex_color("#ffa500") == (255, 165, 0)

    def test_parse_short_form_and_missing_hash(self):
        """Test #RGB and bare digits."""
        assert parse_hex_color("#fff") == (255, 255, 255)
        assert parse_hex_color("abc") == (170, 187, 204)

    @pytest.mark.parametrize("value", ["", "#12", "#12345", "#gggggg", "red"])
    def test_parse_invalid(self, value):
        """Test rejection of non-hex strings."""
        with pytest.raises(ValueError, match="Invalid hex color"):
            parse_hex_color(value)

    def test_format(self):
        """Test lowercase #rrggbb output."""
        assert format_hex_color((170, 85, 0)) == "#aa5500"


class TestGrayscaleRamp:
    """Test evenly spaced gray levels."""

    def test_two_levels(self):
        assert grayscale_ramp(2) == ((0, 0, 0), (255, 255, 255))

    def test_four_levels(self):
        """Test 2-bit ramp matches the classic 0/85/170/255 grays."""
        assert [r for r, _, _ in grayscale_ramp(4)] == [0, 85, 170, 255]

    def test_half_rounds_up(self):
        """Test 127.5 rounds to 128."""
        assert grayscale_ramp(3)[1] == (128, 128, 128)

    def test_sixteen_levels_step(self):
        assert [r for r, _, _ in grayscale_ramp(16)][:3] == [0, 17, 34]

    def test_too_few_levels(self):
        with pytest.raises(ValueError, match="levels out of range"):
            grayscale_ramp(1)


class TestPaletteSpec:
    """Test PaletteSpec dataclass."""

    def test_gray_ramp_colors(self):
        """Test implicit colors of a gray palette."""
        palette = PaletteSpec(id="gray-4", grays=4)
        assert palette.hex_colors == ("#000000", "#555555", "#aaaaaa", "#ffffff")
        assert palette.is_grayscale

    def test_explicit_colors_win(self):
        """Test explicit colors take precedence over grays."""
        palette = PaletteSpec(id="color-2", grays=2, colors=("#FF0000", "#00FF00"))
        assert palette.hex_colors == ("#FF0000", "#00FF00")
        assert palette.rgb_colors == ((255, 0, 0), (0, 255, 0))
        assert not palette.is_grayscale

    def test_no_colors(self):
        assert PaletteSpec(id="empty").hex_colors == ()

    def test_invalid_color(self):
        with pytest.raises(ValueError, match="Invalid hex color"):
            PaletteSpec(id="bad", colors=("#zzzzzz",))

    def test_empty_id(self):
        with pytest.raises(ValueError, match="id must not be empty"):
            PaletteSpec(id="")

    def test_frozen(self):
        palette = PaletteSpec(id="bw", grays=2)
        with pytest.raises(AttributeError):
            palette.grays = 4


class TestDeviceProfile:
    """Test DeviceProfile dataclass."""

    def test_defaults(self):
        """Test unspecified values default to zero / PNG."""
        profile = DeviceProfile(name="custom")
        assert profile.size == (0, 0)
        assert profile.colors == 0
        assert profile.output_format == OutputFormat.PNG
        assert profile.palette_ids == ()

    def test_bmp_mime_type(self):
        profile = DeviceProfile(name="og_bmp", mime_type="image/bmp")
        assert profile.output_format == OutputFormat.BMP

    def test_empty_name(self):
        with pytest.raises(ValueError, match="name must not be empty"):
            DeviceProfile(name="")

    @pytest.mark.parametrize("field", ["width", "height", "colors", "bit_depth"])
    def test_negative_values(self, field):
        """Test negative dimensions and color data are rejected."""
        with pytest.raises(ValueError, match=f"{field} out of range"):
            DeviceProfile(name="bad", **{field: -1})

    def test_any_rotation_accepted(self):
        """Test rotation is only validated at parameter resolution."""
        assert DeviceProfile(name="odd", rotation=45).rotation == 45


class TestEnums:
    """Test enum values and conversions."""

    def test_rotation_values(self):
        assert [r.value for r in Rotation] == [0, 90, 180, 270]

    def test_output_format_from_mime_type(self):
        assert OutputFormat.from_mime_type("image/bmp") == OutputFormat.BMP
        assert OutputFormat.from_mime_type("BMP") == OutputFormat.BMP
        assert OutputFormat.from_mime_type("image/png") == OutputFormat.PNG
        assert OutputFormat.from_mime_type("image/jpeg") == OutputFormat.PNG

    def test_output_format_properties(self):
        assert OutputFormat.BMP.extension == "bmp"
        assert OutputFormat.BMP.mime_type == "image/bmp"
        assert OutputFormat.PNG.mime_type == "image/png"

    def test_model_is_string(self):
        assert Model.OG_PNG == "og_png"
        assert Model("waveshare_7_5_bw") is Model.WAVESHARE_7_5_BW


class TestNormalizeRotation:
    """Test rotation normalization."""

    @pytest.mark.parametrize(
        ("degrees", "expected"),
        [(0, 0), (90, 90), (360, 0), (450, 90), (-90, 270), (-180, 180)],
    )
    def test_multiples_of_90(self, degrees, expected):
        assert normalize_rotation(degrees) == expected

    @pytest.mark.parametrize("degrees", [1, 45, -30, 135])
    def test_other_angles_rejected(self, degrees):
        with pytest.raises(InvalidInputError, match="Unsupported rotation"):
            normalize_rotation(degrees)


class TestResolveParameters:
    """Test override > profile > default precedence and validation."""

    def test_defaults(self):
        """Test built-in defaults with nothing set."""
        params = resolve_parameters()
        assert params.size == (800, 480)
        assert params.colors == 2
        assert params.bit_depth == 1
        assert params.rotation == 0
        assert (params.offset_x, params.offset_y) == (0, 0)
        assert params.output_format == OutputFormat.PNG
        assert params.palette is None
        assert params.dither is True

    def test_profile_values(self):
        """Test profile values replace defaults."""
        profile = DeviceProfile(
            name="kindle", width=1400, height=840, colors=256, bit_depth=8,
            rotation=90, offset_x=75, offset_y=25,
        )
        params = resolve_parameters(profile=profile)
        assert params.size == (1400, 840)
        assert params.colors == 256
        assert params.bit_depth == 8
        assert params.rotation == 90
        assert (params.offset_x, params.offset_y) == (75, 25)

    def test_overrides_win(self):
        """Test explicit values replace profile values."""
        profile = DeviceProfile(name="og_plus", width=800, height=480, colors=4, bit_depth=2)
        overrides = TransformOverrides(width=400, colors=2, rotation=180, dither=False)
        params = resolve_parameters(overrides, profile)
        assert params.size == (400, 480)
        assert params.colors == 2
        assert params.bit_depth == 2
        assert params.rotation == 180
        assert params.dither is False

    def test_explicit_zero_offset_overrides_profile(self):
        """Test an explicit 0 is a set value, not "unset"."""
        profile = DeviceProfile(name="shifted", offset_x=10, offset_y=10)
        params = resolve_parameters(TransformOverrides(offset_x=0), profile)
        assert params.offset_x == 0
        assert params.offset_y == 10

    def test_zero_profile_values_fall_back(self):
        """Test unspecified (zero) profile values use defaults."""
        params = resolve_parameters(profile=DeviceProfile(name="partial", width=1024))
        assert params.size == (1024, 480)
        assert params.colors == 2
        assert params.bit_depth == 1

    def test_format_from_profile_and_override(self):
        bmp_profile = DeviceProfile(name="og_bmp", mime_type="image/bmp")
        assert resolve_parameters(profile=bmp_profile).output_format == OutputFormat.BMP
        params = resolve_parameters(TransformOverrides(output_format="png"), bmp_profile)
        assert params.output_format == OutputFormat.PNG
        params = resolve_parameters(TransformOverrides(output_format="image/bmp"))
        assert params.output_format == OutputFormat.BMP

    def test_rotation_normalized(self):
        assert resolve_parameters(TransformOverrides(rotation=-90)).rotation == 270

    def test_rotation_rejected(self):
        with pytest.raises(InvalidInputError, match="Unsupported rotation"):
            resolve_parameters(TransformOverrides(rotation=45))

    @pytest.mark.parametrize(
        ("overrides", "message"),
        [
            (TransformOverrides(width=0), "Invalid target size"),
            (TransformOverrides(height=-1), "Invalid target size"),
            (TransformOverrides(colors=1), "colors out of range"),
            (TransformOverrides(colors=257, bit_depth=8), "colors out of range"),
            (TransformOverrides(bit_depth=0), "bit_depth out of range"),
            (TransformOverrides(bit_depth=9), "bit_depth out of range"),
            (TransformOverrides(colors=5, bit_depth=2), "do not fit"),
        ],
    )
    def test_invalid_values(self, overrides, message):
        with pytest.raises(InvalidInputError, match=message):
            resolve_parameters(overrides)

    def test_numeric_strings_accepted(self):
        params = resolve_parameters(TransformOverrides(width="800", offset_x="-5"))
        assert params.width == 800
        assert params.offset_x == -5

    @pytest.mark.parametrize(
        "overrides",
        [
            TransformOverrides(width="wide"),
            TransformOverrides(height=[480]),
            TransformOverrides(colors=True),
            TransformOverrides(rotation=float("inf")),
        ],
    )
    def test_non_integer_values(self, overrides):
        """Test unusable values raise InvalidInputError instead of TypeError."""
        with pytest.raises(InvalidInputError, match="Invalid"):
            resolve_parameters(overrides)

    def test_invalid_error_is_value_error(self):
        with pytest.raises(ValueError):
            resolve_parameters(TransformOverrides(colors=0))

    def test_palette_invalid_color(self):
        with pytest.raises(InvalidInputError, match="Invalid hex color"):
            resolve_parameters(TransformOverrides(palette=["#000000", "white"]))

    def test_palette_too_small_for_remap(self):
        """Test a palette shorter than the level count is rejected for indexed PNG."""
        with pytest.raises(InvalidInputError, match="Palette has 1 entries"):
            resolve_parameters(TransformOverrides(palette=["#000000"]))

    def test_palette_size_not_checked_without_remap(self):
        """Test BMP output ignores the palette length."""
        params = resolve_parameters(
            TransformOverrides(palette=["#000000"], output_format=OutputFormat.BMP)
        )
        assert params.palette == ("#000000",)
        assert not params.applies_palette_remap

    def test_applies_palette_remap(self):
        assert resolve_parameters().applies_palette_remap
        assert resolve_parameters(TransformOverrides(colors=4, bit_depth=2)).applies_palette_remap
        assert not resolve_parameters(TransformOverrides(colors=16, bit_depth=4)).applies_palette_remap

    def test_output_size_swaps_for_quarter_turns(self):
        assert resolve_parameters(TransformOverrides(rotation=90)).output_size == (480, 800)
        assert resolve_parameters(TransformOverrides(rotation=180)).output_size == (800, 480)
        assert resolve_parameters(TransformOverrides(rotation=270)).output_size == (480, 800)

    def test_as_dict(self):
        values = resolve_parameters(TransformOverrides(rotation=90)).as_dict()
        assert values["rotation"] == 90
        assert values["width"] == 800
        assert set(values) == {
            "width", "height", "colors", "bit_depth", "rotation",
            "offset_x", "offset_y", "output_format", "palette", "dither",
        }
