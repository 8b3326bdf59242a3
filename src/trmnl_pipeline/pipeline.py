"""Screenshot-to-device raster pipeline."""

from __future__ import annotations

import dataclasses
import logging
import os
from collections.abc import Callable
from typing import Any, TypeVar, Union

from PIL import Image

from .backends import PillowBackend, TransformBackend
from .catalog import Catalog, get_default_catalog
from .encoding import EncodedImage, encode_image
from .exceptions import InvalidInputError, TransformError, TrmnlPipelineError
from .models.enums import Model
from .models.parameters import TransformOverrides, TransformParameters, resolve_parameters
from .models.profile import DeviceProfile
from .processing.palette import IndexedRaster, default_colormap, grayscale_indexed, remap_to_palette
from .raster import RasterBuffer

_LOGGER = logging.getLogger(__name__)

_T = TypeVar("_T")

ProfileRef = Union[DeviceProfile, Model, str, None]
SourceImage = Union[RasterBuffer, Image.Image, bytes, str, os.PathLike]

# Pillow and numpy report processing failures with these
_STAGE_ERRORS = (OSError, ValueError, TypeError)


class TransformPipeline:
    """Fixed sequence of stages turning a screenshot into device output.

    Stages run in order: resize, translate, rotate, quantize, remap, encode.
    Parameters are resolved once (override, then profile, then default) and
    reused for every image the pipeline processes.

    Usage:
        pipeline = TransformPipeline("og_png")
        encoded = pipeline.process(screenshot_bytes)

        # Explicit values win over the profile
        pipeline = TransformPipeline(
            "og_plus", TransformOverrides(rotation=180, dither=False)
        )

        # No pixel work, correct output dimensions
        pipeline = TransformPipeline("v2", backend=BlankBackend())
    """

    def __init__(
            self,
            profile: ProfileRef = None,
            overrides: TransformOverrides | None = None,
            *,
            catalog: Catalog | None = None,
            backend: TransformBackend | None = None,
    ):
        """Initialize pipeline.

        Args:
            profile: Device profile, or a profile name to look up in the catalog
            overrides: Explicitly set values (highest precedence)
            catalog: Catalog for name lookup (default: bundled catalog)
            backend: Stage implementation (default: PillowBackend)
        """
        self._profile_ref = profile
        self._overrides = overrides or TransformOverrides()
        self._catalog = catalog
        self._backend: TransformBackend = backend or PillowBackend()
        self._profile: DeviceProfile | None = None
        self._parameters: TransformParameters | None = None

    def __repr__(self) -> str:
        return f"TransformPipeline(profile={self._profile_name()!r}, backend={self._backend.name!r})"

    @property
    def backend(self) -> TransformBackend:
        return self._backend

    @property
    def overrides(self) -> TransformOverrides:
        return self._overrides

    @property
    def profile(self) -> DeviceProfile | None:
        """Bound device profile, looked up on first access.

        Raises:
            NotFoundError: If a profile name is not in the catalog
        """
        if self._profile is None and self._profile_ref is not None:
            if isinstance(self._profile_ref, DeviceProfile):
                self._profile = self._profile_ref
            else:
                catalog = self._catalog or get_default_catalog()
                self._profile = catalog.profile_by_name(self._profile_ref)
        return self._profile

    @property
    def parameters(self) -> TransformParameters:
        """Resolved parameters (computed once).

        Raises:
            InvalidInputError: If a resolved value is out of range
            NotFoundError: If the profile name is unknown
        """
        if self._parameters is None:
            self._parameters = resolve_parameters(self._overrides, self.profile)
            _LOGGER.debug("Resolved parameters: %s", self._parameters)
        return self._parameters

    def transform(self, source: SourceImage) -> IndexedRaster:
        """Run every stage except encoding.

        Args:
            source: Screenshot as a buffer, PIL image, encoded bytes or file path

        Returns:
            Indexed raster at the final output size

        Raises:
            InvalidInputError: If the source is missing, empty or unreadable
            TransformError: If a stage fails
        """
        params = self.parameters
        current, owned = _coerce_source(source)
        try:
            if current.is_empty:
                raise InvalidInputError(
                    f"Source image has zero size ({current.width}x{current.height})"
                )

            geometry_stages: tuple[tuple[str, Callable[[RasterBuffer], RasterBuffer]], ...] = (
                ("resize", lambda b: self._backend.resize(b, params.width, params.height)),
                ("translate", lambda b: self._backend.translate(b, params.offset_x, params.offset_y)),
                ("rotate", lambda b: self._backend.rotate(b, params.rotation)),
            )
            for stage, apply in geometry_stages:
                result = self._run_stage(stage, apply, current)
                if result is not current:
                    if owned:
                        current.close()
                    current, owned = result, True

            quantized = self._run_stage(
                "quantize",
                lambda b: self._backend.quantize(b, params.colors, params.dither),
                current,
            )
        finally:
            if owned:
                current.close()

        if params.applies_palette_remap:
            colors = params.palette or default_colormap(params.bit_depth)
            return self._run_stage("remap", lambda q: remap_to_palette(q, colors), quantized)

        if params.palette is not None:
            _LOGGER.debug(
                "Ignoring palette for %s output at %d bpp",
                params.output_format.value,
                params.bit_depth,
            )
        return self._run_stage("remap", grayscale_indexed, quantized)

    def process(self, source: SourceImage) -> EncodedImage:
        """Transform and encode a screenshot.

        Args:
            source: Screenshot as a buffer, PIL image, encoded bytes or file path

        Returns:
            EncodedImage ready for the device

        Raises:
            InvalidInputError: If the source or parameters are unusable
            NotFoundError: If the profile name is unknown
            TransformError: If a stage fails
        """
        params = self.parameters
        _LOGGER.info(
            "Preparing image for %s (%dx%d, %d colors, %d bpp, %s)",
            self._profile_name() or "default",
            params.width,
            params.height,
            params.colors,
            params.bit_depth,
            params.output_format.value,
        )
        raster = self.transform(source)
        encoded = self._run_stage(
            "encode",
            lambda r: encode_image(r, params.output_format, params.bit_depth),
            raster,
        )
        _LOGGER.info(
            "Image ready: %dx%d %s, %d bytes",
            encoded.width,
            encoded.height,
            encoded.extension,
            len(encoded.data),
        )
        return encoded

    def _run_stage(self, stage: str, apply: Callable[[Any], _T], value: Any) -> _T:
        try:
            return apply(value)
        except TrmnlPipelineError:
            raise
        except _STAGE_ERRORS as err:
            _LOGGER.debug("Stage %s failed: %s", stage, err)
            raise TransformError(stage, self.parameters.as_dict(), err) from err

    def _profile_name(self) -> str | None:
        ref = self._profile_ref
        if isinstance(ref, DeviceProfile):
            return ref.name
        if isinstance(ref, Model):
            return ref.value
        return ref


def _coerce_source(source: SourceImage | None) -> tuple[RasterBuffer, bool]:
    """Wrap the source as a buffer; the flag says whether the pipeline owns it."""
    if source is None:
        raise InvalidInputError("No source image provided")
    if isinstance(source, RasterBuffer):
        return source, False
    if isinstance(source, Image.Image):
        return RasterBuffer.from_image(source), True
    if isinstance(source, (bytes, bytearray, memoryview)):
        return RasterBuffer.from_bytes(bytes(source)), True
    if isinstance(source, (str, os.PathLike)):
        return RasterBuffer.open(source), True
    raise InvalidInputError(f"Unsupported source type: {type(source).__name__}")


def prepare_image(
        source: SourceImage,
        profile: ProfileRef = None,
        overrides: TransformOverrides | None = None,
        *,
        catalog: Catalog | None = None,
        backend: TransformBackend | None = None,
        **values: Any,
) -> EncodedImage:
    """Run a one-off pipeline over a single screenshot.

    Keyword values are applied on top of ``overrides``:

        prepare_image(png_bytes, "og_plus", rotation=90, dither=False)

    Raises:
        TypeError: If a keyword is not a TransformOverrides field
    """
    merged = dataclasses.replace(overrides or TransformOverrides(), **values)
    pipeline = TransformPipeline(profile, merged, catalog=catalog, backend=backend)
    return pipeline.process(source)
